"""
プロジェクト向けの軽量ロギングユーティリティ。

要点:
- 既定では各モジュールが `logging.getLogger(__name__)` でロガーを取得する。
- アプリ側で設定が無い場合でも、妥当な最小構成を 1 度だけ適用するヘルパーを提供する。
- フレーム毎の出来事（near plane による破棄など）は DEBUG 止まりとし、INFO を汚さない。
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def resolve_level(level: int | str) -> int:
    """レベル指定（名前 or 数値）を logging の数値レベルへ変換する。"""
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return int(level)


def setup_default_logging(level: int | str = "INFO") -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    lvl = resolve_level(level)

    root = logging.getLogger()
    if root.handlers:
        # Assume the app has configured logging
        return
    logging.basicConfig(level=lvl, format=LOG_FORMAT)


__all__ = ["setup_default_logging", "resolve_level", "LOG_FORMAT"]
