"""
どこで: `engine.core` の簡易フレームドライバ。
何を: `Tickable` の列を固定順序で呼び出す FrameClock（dt 測定・フレーム予算超過の検知）。
なぜ: GUI/ループから呼び出すだけで複数コンポーネントの更新順を統一するため。
"""

from __future__ import annotations

import logging
import time
from typing import Sequence

from .tickable import Tickable

logger = logging.getLogger(__name__)


class FrameClock:
    """登録された Tickable を固定順序で実行するだけの極小クラス。"""

    def __init__(self, tickables: Sequence[Tickable], *, frame_budget: float | None = None):
        """
        tickables: 呼び出し順に並んだ Tickable
        frame_budget: 1 フレームの予算 [sec]。超過した tick を DEBUG に記録（None で無効）
        """
        self._tickables = tuple(tickables)
        self._last_time = time.perf_counter()
        self._budget = frame_budget
        self.ticks = 0
        self.over_budget = 0

    # GUI フレームワークから schedule_interval で呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # pyglet は dt を渡してくれる
            now = time.perf_counter()  # 他フレームワーク用
            dt = now - self._last_time
            self._last_time = now

        start = time.perf_counter()
        for t in self._tickables:
            t.tick(dt)
        self.ticks += 1

        if self._budget is not None:
            elapsed = time.perf_counter() - start
            if elapsed > self._budget:
                self.over_budget += 1
                logger.debug(
                    "tick %d took %.2f ms (budget %.2f ms)",
                    self.ticks,
                    elapsed * 1e3,
                    self._budget * 1e3,
                )
