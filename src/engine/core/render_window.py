"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（MSAA/固定サイズ）と描画コールバック登録、入力イベントの `InputController` への転送。
なぜ: 中核（scene/render）から GUI 依存を切り離し、最小インターフェイスで統一するため。

キー操作:
- クリック: 爆散 / ホイール: ズーム
- R/G/B を押しながら ↑/↓: 色チャンネルを増減
- S: スクリーンショット保存 / ESC: 終了

使用例:
    win = RenderWindow(960, 720, controller)

    def draw_scene():
        renderer.draw()
        surface.flush()

    win.add_draw_callback(draw_scene)
    pyglet.app.run()
"""

from __future__ import annotations

import logging
from typing import Callable

import pyglet
from pyglet.gl import Config
from pyglet.window import key

from engine.io.input import InputController

logger = logging.getLogger(__name__)

_CHANNEL_KEYS = {key.R: "r", key.G: "g", key.B: "b"}


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        controller: InputController,
        *,
        caption: str = "Shatterbox",
        on_screenshot: Callable[[], None] | None = None,
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。セッション中は固定。
            height: ウィンドウ高さ（ピクセル）。
            controller: 入力イベントの転送先。
            on_screenshot: S キーで呼ぶコールバック（None なら無効）。
        """
        # 輪郭を滑らかにするために MSAA を有効化
        config = Config(double_buffer=True, sample_buffers=1, samples=4, vsync=True)
        super().__init__(width=width, height=height, caption=caption, config=config, resizable=False)
        self._controller = controller
        self._on_screenshot = on_screenshot
        self._draw_callbacks: list[Callable[[], None]] = []
        self._held_channel: str | None = None

    def add_draw_callback(self, func: Callable[[], None]) -> None:
        """
        `on_draw` 中に呼び出す描画関数を登録する。

        - 関数は引数を取らず、副作用で描画を行うこと。
        - 登録順に呼び出される。
        """
        self._draw_callbacks.append(func)

    def on_draw(self):  # Pyglet 既定のイベント名
        """ウィンドウ描画イベントハンドラ。背景塗りは描画面側が行う。"""
        for cb in self._draw_callbacks:
            cb()

    # ---- input ----
    def on_mouse_press(self, x, y, button, modifiers):
        self._controller.on_click()

    def on_mouse_scroll(self, x, y, scroll_x, scroll_y):
        self._controller.on_scroll(scroll_y)

    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.close()
            return pyglet.event.EVENT_HANDLED
        if symbol in _CHANNEL_KEYS:
            self._held_channel = _CHANNEL_KEYS[symbol]
        elif symbol in (key.UP, key.DOWN) and self._held_channel is not None:
            self._controller.step_color(self._held_channel, 1 if symbol == key.UP else -1)
        elif symbol == key.S and self._on_screenshot is not None:
            self._on_screenshot()
        return None

    def on_key_release(self, symbol, modifiers):
        if _CHANNEL_KEYS.get(symbol) == self._held_channel:
            self._held_channel = None
