"""
どこで: `engine.render` の三角形化（GPU 転送前の頂点生成）。
何を: 「塗り+輪郭」の多角形列を、描画順を保った単一の三角形リスト（位置 + RGBA8 色）へ展開する。
なぜ: 多角形ごとに図形/Group を作らず 1 本の頂点リストへ書き込むことで、毎フレームの GL オブジェクト生成を避けるため。

展開規則:
- 多角形 1 個につき「塗り（扇形分割, (n-2) 三角形）→ 輪郭（辺ごとに太さ `width` の矩形 = 2 三角形）」の順に並べる。
- 多角形同士は入力順。バッファ順がそのまま描画順（画家のアルゴリズム）になる。
- 入力は画面座標（Y 下向き）。出力は `height - y` に反転した GL 座標（Y 上向き）。
- 輪郭の alpha は 0–1 で受け取り、`round(a * 255)` で 8bit 化する。塗りは常に不透明。
- 3 頂点未満の多角形と長さ 0 の辺は何も出力しない（辺は縮退した 2 三角形になる）。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from common.types import RGB8, RGBA8, Vec2

# (points, fill_color, stroke_color, stroke_width)
Polygon = tuple[Sequence[Vec2], RGB8, RGBA8, float]


def vertex_count(n: int) -> int:
    """頂点数 `n` の多角形 1 個が占める頂点数。"""
    if n < 3:
        return 0
    return (n - 2) * 3 + n * 6


def _fan_indices(n: int) -> np.ndarray:
    return np.array([[0, k, k + 1] for k in range(1, n - 1)], dtype=np.intp).reshape(-1)


def _triangulate_group(polygons: list[Polygon], height: float) -> tuple[np.ndarray, np.ndarray]:
    """同じ頂点数の多角形をまとめて展開する。返り値は `(P, V, 2)` と `(P, V, 4)`。"""
    pts = np.array([p[0] for p in polygons], dtype=np.float64)  # (P, n, 2)
    pts[..., 1] = height - pts[..., 1]
    count, n = pts.shape[0], pts.shape[1]

    fill = pts[:, _fan_indices(n)]  # (P, (n-2)*3, 2)

    a = pts
    b = np.roll(pts, -1, axis=1)
    d = b - a
    seg = np.linalg.norm(d, axis=-1, keepdims=True)
    half = np.array([float(p[3]) for p in polygons], dtype=np.float64)[:, None, None] / 2.0
    perp = np.stack([-d[..., 1], d[..., 0]], axis=-1)
    offset = np.divide(perp, seg, out=np.zeros_like(perp), where=seg > 0.0) * half
    quads = np.stack(
        [a + offset, a - offset, b - offset, a + offset, b - offset, b + offset], axis=2
    )  # (P, n, 6, 2)
    stroke = quads.reshape(count, n * 6, 2)

    fill_rgba = np.array([(*p[1], 255) for p in polygons], dtype=np.int64)
    stroke_rgba = np.array(
        [(*p[2][:3], int(round(float(p[2][3]) * 255))) for p in polygons], dtype=np.int64
    )
    colors = np.concatenate(
        [
            np.repeat(fill_rgba[:, None, :], fill.shape[1], axis=1),
            np.repeat(stroke_rgba[:, None, :], stroke.shape[1], axis=1),
        ],
        axis=1,
    )
    return np.concatenate([fill, stroke], axis=1), colors.clip(0, 255).astype(np.uint8)


def triangulate(polygons: Sequence[Polygon], height: float) -> tuple[np.ndarray, np.ndarray]:
    """多角形列を三角形リストへ展開する。

    Parameters
    ----------
    polygons : Sequence[Polygon]
        描画順に並んだ `(points, fill_color, stroke_color, stroke_width)`。
    height : float
        画面の高さ [px]（Y 反転に使う）。

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        `(V, 2)` float32 の頂点位置と `(V, 4)` uint8 の頂点色。
    """
    by_size: dict[int, list[int]] = {}
    for i, polygon in enumerate(polygons):
        n = len(polygon[0])
        if n >= 3:
            by_size.setdefault(n, []).append(i)
    if not by_size:
        return np.zeros((0, 2), dtype=np.float32), np.zeros((0, 4), dtype=np.uint8)

    if len(by_size) == 1 and len(polygons) == len(next(iter(by_size.values()))):
        pos, col = _triangulate_group(list(polygons), height)
        return pos.reshape(-1, 2).astype(np.float32), col.reshape(-1, 4)

    # 頂点数ごとに一括展開し、入力順へ戻して連結する
    pos_blocks: dict[int, np.ndarray] = {}
    col_blocks: dict[int, np.ndarray] = {}
    for indices in by_size.values():
        pos, col = _triangulate_group([polygons[i] for i in indices], height)
        for j, i in enumerate(indices):
            pos_blocks[i] = pos[j]
            col_blocks[i] = col[j]
    order = sorted(pos_blocks)
    positions = np.concatenate([pos_blocks[i] for i in order]).astype(np.float32)
    colors = np.concatenate([col_blocks[i] for i in order])
    return positions, colors


__all__ = ["Polygon", "vertex_count", "triangulate"]
