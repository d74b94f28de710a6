"""
どこで: `engine.render` の面生成と陰影付け。
何を: 直方体 1 個から、画面空間の 6 面（深度・フラット陰影色つき）を生成する。
なぜ: 本体/破片の区別なく同じ経路で面を作り、合成（深度ソート）へ渡すため。
      破片群は `faces_of_many` が同じ手順を numpy の一括演算で行う（毎フレーム 216 個を処理するため）。

手順:
1. 辺長 `size` の軸平行ボックスの 8 頂点（原点中心）を作る。
2. `rotation`（X→Y→Z）で回転し、`position` だけ平行移動する。
3. 各頂点を投影。1 頂点でも表現不能なら直方体ごと破棄（空リスト）。部分クリップはしない。
4. 固定の 6 面（4 頂点の index と外向き法線）へ振り分ける。
5. 面ごとに
   - 深度 = 4 頂点のワールド Z 平均（奥ほど大）
   - 法線を `rotation` で回転し、`brightness = ambient + diffuse * max(0, n·L)`
   - 色 = `floor(color * 255 * brightness)` をチャンネルごとに [0, 255] へクランプ

頂点の並び（x が最も遅く変化）:

    idx : (x, y, z) の符号
    0   (-, -, -)    4   (+, -, -)
    1   (-, -, +)    5   (+, -, +)
    2   (-, +, -)    6   (+, +, -)
    3   (-, +, +)    7   (+, +, +)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from engine.core.vector import Vector3, dot, normalize, rotate, rotate_point_sets, rotate_points
from engine.scene.cuboid import Cuboid
from util.color import shade_rgb

from .projection import Camera, ScreenPoint
from .types import DEFAULT_LIGHT, INTACT_STROKE, Face, Light, StrokeStyle

_UNIT_CORNERS = np.array(
    [[sx, sy, sz] for sx in (-0.5, 0.5) for sy in (-0.5, 0.5) for sz in (-0.5, 0.5)],
    dtype=np.float64,
)

# (名前, 周回順の 4 頂点 index, ローカル外向き法線)
FACE_TABLE: tuple[tuple[str, tuple[int, int, int, int], Vector3], ...] = (
    ("front", (0, 4, 6, 2), Vector3(0.0, 0.0, -1.0)),
    ("back", (1, 5, 7, 3), Vector3(0.0, 0.0, 1.0)),
    ("top", (2, 3, 7, 6), Vector3(0.0, 1.0, 0.0)),
    ("bottom", (0, 4, 5, 1), Vector3(0.0, -1.0, 0.0)),
    ("left", (0, 1, 3, 2), Vector3(-1.0, 0.0, 0.0)),
    ("right", (4, 6, 7, 5), Vector3(1.0, 0.0, 0.0)),
)

# faces_of_many 用の配列表現
_FACE_INDICES = np.array([idx for _name, idx, _normal in FACE_TABLE], dtype=np.intp)
_FACE_NORMALS = np.array([normal.as_tuple() for _name, _idx, normal in FACE_TABLE], dtype=np.float64)


def world_corners(cuboid: Cuboid) -> np.ndarray:
    """回転・平行移動後の 8 頂点（`(8, 3)` float64）を返す。"""
    local = _UNIT_CORNERS * cuboid.size
    return rotate_points(local, cuboid.rotation) + cuboid.position.as_array()


def face_brightness(normal: Vector3, light: Light = DEFAULT_LIGHT) -> float:
    """回転済み法線に対するフラット陰影の明るさ。"""
    lambert = max(0.0, dot(normal, normalize(light.direction)))
    return light.ambient + light.diffuse * lambert


def faces_of(
    cuboid: Cuboid,
    camera: Camera,
    light: Light = DEFAULT_LIGHT,
    stroke: StrokeStyle = INTACT_STROKE,
) -> list[Face]:
    """直方体の 6 面を画面空間で返す（表現不能な頂点があれば空リスト）。

    Parameters
    ----------
    cuboid : Cuboid
        対象の直方体。
    camera : Camera
        投影に使うカメラ（ズーム反映済み）。
    light : Light
        平行光源。
    stroke : StrokeStyle
        面に付与する輪郭線の見た目（本体/破片のプリセット）。

    Returns
    -------
    list[Face]
        `FACE_TABLE` 順の 6 面、または空リスト。
    """
    corners = world_corners(cuboid)
    projected: list[ScreenPoint] = []
    for x, y, z in corners:
        sp = camera.project(Vector3(float(x), float(y), float(z)))
        if sp is None:
            return []
        projected.append(sp)

    base = cuboid.color.as_tuple()
    faces: list[Face] = []
    for _name, idx, normal in FACE_TABLE:
        quad = [projected[i] for i in idx]
        depth = sum(p.depth for p in quad) / 4.0
        brightness = face_brightness(rotate(normal, cuboid.rotation), light)
        faces.append(
            Face(
                points=tuple((p.x, p.y) for p in quad),  # type: ignore[arg-type]
                depth=depth,
                color=shade_rgb(base, brightness),
                stroke=stroke,
            )
        )
    return faces


def faces_of_many(
    cuboids: Sequence[Cuboid],
    camera: Camera,
    light: Light = DEFAULT_LIGHT,
    stroke: StrokeStyle = INTACT_STROKE,
) -> tuple[list[Face], int]:
    """多数の直方体の面を numpy でまとめて生成する（破片群向け）。

    結果は各直方体に `faces_of` を順に適用して連結したものと同じ
    （直方体の並び順 → `FACE_TABLE` 順）。

    Returns
    -------
    tuple[list[Face], int]
        面のリストと、近平面で破棄された直方体の数。
    """
    count = len(cuboids)
    if count == 0:
        return [], 0

    positions = np.array([c.position.as_tuple() for c in cuboids], dtype=np.float64)
    sizes = np.array([c.size for c in cuboids], dtype=np.float64)
    eulers = np.array([c.rotation.as_tuple() for c in cuboids], dtype=np.float64)
    colors = np.array([c.color.as_tuple() for c in cuboids], dtype=np.float64)

    local = _UNIT_CORNERS[None, :, :] * sizes[:, None, None]
    corners = rotate_point_sets(local, eulers) + positions[:, None, :]  # (F, 8, 3)

    # 1 頂点でも近平面以下なら直方体ごと破棄
    visible = np.all(corners[..., 2] > camera.near_plane, axis=1)
    culled = count - int(visible.sum())
    if culled == count:
        return [], culled
    corners, eulers, colors = corners[visible], eulers[visible], colors[visible]

    x, y, z = corners[..., 0], corners[..., 1], corners[..., 2]
    s = camera.effective_focal_length / z
    screen = np.stack([x * s + camera.width / 2, camera.height / 2 - y * s], axis=-1)  # (V, 8, 2)
    quads = screen[:, _FACE_INDICES]  # (V, 6, 4, 2)
    depths = z[:, _FACE_INDICES].sum(axis=2) / 4.0  # (V, 6)

    normals = rotate_point_sets(np.broadcast_to(_FACE_NORMALS, (len(corners), 6, 3)), eulers)
    lambert = np.maximum(0.0, normals @ normalize(light.direction).as_array())
    brightness = light.ambient + light.diffuse * lambert  # (V, 6)
    shaded = colors[:, None, :] * 255 * brightness[:, :, None]
    shaded = np.nan_to_num(shaded, nan=0.0, posinf=255.0, neginf=0.0)
    rgb = np.floor(shaded).clip(0, 255).astype(np.int64)  # (V, 6, 3)

    faces: list[Face] = []
    for quad_set, depth_set, rgb_set in zip(quads.tolist(), depths.tolist(), rgb.tolist()):
        for quad, depth, color in zip(quad_set, depth_set, rgb_set):
            faces.append(
                Face(
                    points=tuple(tuple(p) for p in quad),  # type: ignore[arg-type]
                    depth=depth,
                    color=tuple(color),  # type: ignore[arg-type]
                    stroke=stroke,
                )
            )
    return faces, culled


__all__ = ["FACE_TABLE", "world_corners", "face_brightness", "faces_of", "faces_of_many"]
