"""
どこで: `common` パッケージ。
何を: 型エイリアス・環境変数ヘルパ・設定・ロギングなど、全層で使う軽量ユーティリティ。
なぜ: engine/api から再利用する共通基盤を分離し、依存の向きを単純化するため。
"""

from .logging import setup_default_logging

__all__ = [
    "setup_default_logging",
]
