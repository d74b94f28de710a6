"""
どこで: `engine.io` の入力変換。
何を: 生の入力イベント（クリック/スクロール/色スライダ）を Scene 向けの intent に変換してキューへ積む。
なぜ: 入力源（pyglet イベント, 別スレッドのコントローラ等）から Scene を直接変更させず、
      tick 冒頭の単一コンシューマにだけ状態変更を任せるため。
"""

from __future__ import annotations

import logging

from engine.scene.intents import ColorChannelSet, ExplodeRequested, IntentQueue, ZoomRequested
from engine.scene.scene import channel_index

logger = logging.getLogger(__name__)


class InputController:
    """入力イベント → intent の変換器。"""

    COLOR_STEP = 16  # キー操作 1 回あたりの色チャンネル増減（0–255）

    def __init__(self, queue: IntentQueue):
        self._queue = queue
        # キー操作用に現在値を覚えておく（Scene 本体は tick 側で更新される）
        self._channel_values = [0.0, 0.0, 0.0]
        self._explode_sent = False

    def sync_color(self, rgb01: tuple[float, float, float]) -> None:
        """キー操作の基準色を Scene の現在色（0–1）に合わせる。"""
        self._channel_values = [float(c) * 255.0 for c in rgb01]

    def on_click(self) -> None:
        """爆散を要求する（2 回目以降は送らない。Scene 側も冪等）。"""
        if self._explode_sent:
            return
        self._explode_sent = True
        self._queue.put(ExplodeRequested())

    def on_scroll(self, delta: float) -> None:
        """スクロール量の符号でズーム方向を決める（正: 拡大 ×1.1、負: 縮小 ×0.9）。"""
        if delta == 0:
            return
        self._queue.put(ZoomRequested(direction=1.0 if delta > 0 else -1.0))

    def on_color_change(self, channel: str | int, value: float) -> None:
        """色チャンネルを 0–255 の値で設定する。"""
        idx = channel_index(channel)
        v = max(0.0, min(255.0, float(value)))
        self._channel_values[idx] = v
        self._queue.put(ColorChannelSet(channel=idx, value=v))

    def step_color(self, channel: str | int, steps: int) -> float:
        """色チャンネルを `COLOR_STEP * steps` だけ増減し、新しい値を返す。"""
        idx = channel_index(channel)
        value = self._channel_values[idx] + self.COLOR_STEP * steps
        self.on_color_change(idx, value)
        logger.debug("color channel %d -> %.0f", idx, self._channel_values[idx])
        return self._channel_values[idx]


__all__ = ["InputController"]
