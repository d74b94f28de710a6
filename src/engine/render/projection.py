"""
どこで: `engine.render` の投影。
何を: ピンホールカメラ（原点、+Z 方向を向く）でワールド座標を画面座標 + 深度へ写す。
なぜ: 面生成と合成から投影モデルを切り離し、単体で検証できるようにするため。

モデル:
- `scale = focal_length * zoom / z`
- `screen_x = x * scale + width / 2`
- `screen_y = height / 2 - y * scale`（画面 Y は下向きに増えるため反転）
- `z <= near_plane` の点は表現不能として `None` を返す（クリップではなく除外）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from engine.core.vector import Vector3

NEAR_PLANE = 0.1


@dataclass(frozen=True, slots=True)
class ScreenPoint:
    """画面座標（ピクセル, Y 下向き）と、そのワールド Z（深度）。"""

    x: float
    y: float
    depth: float


@dataclass(frozen=True)
class Camera:
    """原点に置かれ +Z を向くピンホールカメラ。"""

    width: int
    height: int
    focal_length: float = 600.0
    near_plane: float = NEAR_PLANE
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"画面サイズは正である必要があります: {self.width}x{self.height}")
        for name in ("focal_length", "near_plane", "zoom"):
            v = getattr(self, name)
            if not math.isfinite(v) or v <= 0:
                raise ValueError(f"Camera.{name} は正の有限値である必要があります: {v!r}")

    @property
    def effective_focal_length(self) -> float:
        return self.focal_length * self.zoom

    def with_zoom(self, zoom: float) -> "Camera":
        return replace(self, zoom=float(zoom))

    def project(self, point: Vector3) -> ScreenPoint | None:
        return project(
            point, self.effective_focal_length, self.width, self.height, near_plane=self.near_plane
        )


def project(
    point: Vector3,
    focal_length: float,
    screen_width: float,
    screen_height: float,
    *,
    near_plane: float = NEAR_PLANE,
) -> ScreenPoint | None:
    """ワールド座標を画面座標へ投影する。

    Returns
    -------
    ScreenPoint | None
        表現可能なら `ScreenPoint`、カメラ近平面以下（背後を含む）なら `None`。
    """
    if point.z <= near_plane:
        return None
    s = focal_length / point.z
    return ScreenPoint(
        x=point.x * s + screen_width / 2,
        y=screen_height / 2 - point.y * s,
        depth=point.z,
    )


__all__ = ["ScreenPoint", "Camera", "project", "NEAR_PLANE"]
