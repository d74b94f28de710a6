"""
どこで: `engine.render` 型定義。
何を: 描画単位の面 `Face`、輪郭線の見た目 `StrokeStyle`（本体用/破片用のプリセット）、照明 `Light`。
なぜ: 面生成・合成・描画面（surface）間の契約を明示し、duck-typing を排除するため。
"""

from __future__ import annotations

from dataclasses import dataclass

from common.types import RGB8, RGBA8, Vec2
from engine.core.vector import Vector3


@dataclass(frozen=True)
class StrokeStyle:
    """輪郭線の色（RGB 0–255 + alpha 0–1）と太さ [px]。"""

    color: RGBA8
    width: float


# 本体: 不透明の暗い輪郭 / 破片: 半透明の細い輪郭
INTACT_STROKE = StrokeStyle(color=(20, 20, 30, 1.0), width=2.0)
FRAGMENT_STROKE = StrokeStyle(color=(255, 255, 255, 0.25), width=0.5)


@dataclass(frozen=True)
class Light:
    """平行光源。`direction` は光へ向かう向き（使用時に正規化）。"""

    direction: Vector3 = Vector3(-0.5, 0.7, -1.0)
    ambient: float = 0.4
    diffuse: float = 0.6


DEFAULT_LIGHT = Light()


@dataclass(frozen=True)
class Face:
    """画面空間の四角形 1 枚。

    - `points`: 4 頂点（周回順, 画面座標 Y 下向き）。
    - `depth`: 4 頂点のワールド Z 平均（大きいほど奥）。
    - `color`: 陰影済みの塗り色 RGB（0–255）。
    """

    points: tuple[Vec2, Vec2, Vec2, Vec2]
    depth: float
    color: RGB8
    stroke: StrokeStyle = INTACT_STROKE


__all__ = [
    "StrokeStyle",
    "INTACT_STROKE",
    "FRAGMENT_STROKE",
    "Light",
    "DEFAULT_LIGHT",
    "Face",
]
