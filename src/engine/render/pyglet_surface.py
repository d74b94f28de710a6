"""
どこで: `engine.render` の pyglet 描画面。
何を: `DrawingSurface` 契約を、pyglet 既定の図形シェーダ上の単一三角形頂点リストで実現する。
なぜ: 中核は抽象 2 命令（背景塗り/多角形の塗り+輪郭）しか知らず、GUI 依存をここに局所化するため。

注意:
- `fill_background` から次の `fill_background` までが 1 フレームの命令列。命令は溜めるだけで GL は触らない。
- `flush`（ウィンドウの on_draw 中に呼ぶ）で、新しい命令列があれば `triangles.triangulate` で展開し、
  常駐の頂点リストへ書き込む。頂点数が変わったときだけ頂点リストを作り直す。
- 描画順はバッファ内の三角形の順（= 命令順）。多角形ごとの `Group` は作らない。
- 新しい命令列が無い on_draw では、前回の頂点リストをそのまま描き直す。
"""

from __future__ import annotations

import logging
from typing import Sequence

import pyglet
from pyglet.gl import GL_BLEND, GL_ONE_MINUS_SRC_ALPHA, GL_SRC_ALPHA, GL_TRIANGLES
from pyglet.gl import glBlendFunc, glClearColor, glDisable, glEnable

from common.types import RGB8, RGBA8, Vec2

from .triangles import Polygon, triangulate

logger = logging.getLogger(__name__)


class _BlendGroup(pyglet.graphics.ShaderGroup):
    """図形シェーダを有効化し、輪郭の半透明のためにアルファブレンドを掛ける。"""

    def set_state(self) -> None:
        self.program.use()
        glEnable(GL_BLEND)
        glBlendFunc(GL_SRC_ALPHA, GL_ONE_MINUS_SRC_ALPHA)

    def unset_state(self) -> None:
        glDisable(GL_BLEND)
        self.program.stop()


class PygletSurface:
    """pyglet ウィンドウ上の描画面。"""

    def __init__(self, window: "pyglet.window.Window"):
        self._window = window
        self._batch = pyglet.graphics.Batch()
        self._program = pyglet.shapes.get_default_shader()
        self._group = _BlendGroup(self._program)
        self._vertex_list = None
        self._vertex_count = 0
        self._background: RGB8 = (0, 0, 0)
        self._polygons: list[Polygon] = []
        self._dirty = False

    @property
    def width(self) -> int:
        return int(self._window.width)

    @property
    def height(self) -> int:
        return int(self._window.height)

    def fill_background(self, color: RGB8) -> None:
        self._background = (int(color[0]), int(color[1]), int(color[2]))
        self._polygons.clear()
        self._dirty = True

    def fill_and_stroke_polygon(
        self,
        points: Sequence[Vec2],
        fill_color: RGB8,
        stroke_color: RGBA8,
        stroke_width: float,
    ) -> None:
        self._polygons.append((points, fill_color, stroke_color, float(stroke_width)))
        self._dirty = True

    def _upload(self) -> None:
        positions, colors = triangulate(self._polygons, self.height)
        count = len(positions)
        if count == 0:
            self._release()
            return
        if self._vertex_list is not None and count == self._vertex_count:
            self._vertex_list.position[:] = positions.ravel().tolist()
            self._vertex_list.colors[:] = colors.ravel().tolist()
            return
        self._release()
        self._vertex_list = self._program.vertex_list(
            count,
            GL_TRIANGLES,
            batch=self._batch,
            group=self._group,
            position=("f", positions.ravel().tolist()),
            colors=("Bn", colors.ravel().tolist()),
            translation=("f", [0.0] * (count * 2)),
            rotation=("f", [0.0] * count),
        )
        self._vertex_count = count
        logger.debug("vertex list resized: %d vertices", count)

    def _release(self) -> None:
        if self._vertex_list is not None:
            self._vertex_list.delete()
        self._vertex_list = None
        self._vertex_count = 0

    def flush(self) -> None:
        """溜めた命令列を頂点リストへ反映し、背景塗りのうえでまとめて描画する。"""
        if self._dirty:
            self._upload()
            self._dirty = False
        r, g, b = self._background
        glClearColor(r / 255.0, g / 255.0, b / 255.0, 1.0)
        self._window.clear()
        self._batch.draw()


__all__ = ["PygletSurface"]
