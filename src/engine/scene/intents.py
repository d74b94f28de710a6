"""
どこで: `engine.scene` の入力意図（intent）キュー。
何を: 外部イベント（クリック/スクロール/色変更）を不変の intent として積み、tick 冒頭で FIFO 消費する。
なぜ: 物理ステップは全破片を read-then-write するため、入力側のスレッドから Scene を直接触らせず、
      単一コンシューマ（描画ループ）にだけ変更させるため。
"""

from __future__ import annotations

from dataclasses import dataclass
from queue import Empty, SimpleQueue
from typing import Iterator, Union


@dataclass(frozen=True, slots=True)
class ExplodeRequested:
    """爆散の要求（既に爆散済みなら no-op）。"""


@dataclass(frozen=True, slots=True)
class ZoomRequested:
    """ズーム要求。`direction > 0` で拡大、`< 0` で縮小、0 は no-op。"""

    direction: float


@dataclass(frozen=True, slots=True)
class ColorChannelSet:
    """色チャンネル設定。`channel` は "r"/"g"/"b" か 0/1/2、`value` は 0–255。"""

    channel: str | int
    value: float


Intent = Union[ExplodeRequested, ZoomRequested, ColorChannelSet]


class IntentQueue:
    """スレッド安全な単一コンシューマ向け intent キュー（`queue.SimpleQueue` の薄いラッパ）。"""

    def __init__(self) -> None:
        self._q: SimpleQueue[Intent] = SimpleQueue()

    def put(self, intent: Intent) -> None:
        self._q.put(intent)

    def drain(self) -> Iterator[Intent]:
        """現時点で積まれている intent を FIFO で取り出す。"""
        while True:
            try:
                yield self._q.get_nowait()
            except Empty:
                return

    def empty(self) -> bool:
        return self._q.empty()

    def __len__(self) -> int:
        return self._q.qsize()


__all__ = ["ExplodeRequested", "ZoomRequested", "ColorChannelSet", "Intent", "IntentQueue"]
