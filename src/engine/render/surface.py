"""
どこで: `engine.render` の描画面インターフェース。
何を: 背景塗りと「塗り + 輪郭の多角形」だけを持つ `DrawingSurface` Protocol と、呼び出しを記録する実装。
なぜ: 中核（合成）をウィンドウ/GL から切り離し、ヘッドレスでも描画結果を検証できるようにするため。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Protocol, Sequence

from common.types import RGB8, RGBA8, Vec2


class DrawingSurface(Protocol):
    """描画面の最小契約。座標は画面ピクセル（原点左上, Y 下向き）。"""

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fill_background(self, color: RGB8) -> None:
        """画面全体を `color` で塗る（フレームの最初に 1 回）。"""

    def fill_and_stroke_polygon(
        self,
        points: Sequence[Vec2],
        fill_color: RGB8,
        stroke_color: RGBA8,
        stroke_width: float,
    ) -> None:
        """単純多角形を塗り、輪郭を描く。"""


@dataclass(frozen=True)
class DrawCall:
    """`RecordingSurface` が記録する 1 回の描画呼び出し。"""

    kind: Literal["background", "polygon"]
    color: RGB8
    points: tuple[Vec2, ...] = ()
    stroke_color: RGBA8 | None = None
    stroke_width: float = 0.0


@dataclass
class RecordingSurface:
    """描画呼び出しを順に記録するだけの描画面（テスト/ヘッドレス実行用）。"""

    width: int
    height: int
    calls: list[DrawCall] = field(default_factory=list)

    def fill_background(self, color: RGB8) -> None:
        # 背景はフレーム境界: 前フレームの記録は捨てる
        self.calls.clear()
        self.calls.append(DrawCall(kind="background", color=tuple(color)))  # type: ignore[arg-type]

    def fill_and_stroke_polygon(
        self,
        points: Sequence[Vec2],
        fill_color: RGB8,
        stroke_color: RGBA8,
        stroke_width: float,
    ) -> None:
        self.calls.append(
            DrawCall(
                kind="polygon",
                color=tuple(fill_color),  # type: ignore[arg-type]
                points=tuple((float(x), float(y)) for x, y in points),
                stroke_color=tuple(stroke_color),  # type: ignore[arg-type]
                stroke_width=float(stroke_width),
            )
        )

    @property
    def polygons(self) -> list[DrawCall]:
        return [c for c in self.calls if c.kind == "polygon"]


__all__ = ["DrawingSurface", "DrawCall", "RecordingSurface"]
