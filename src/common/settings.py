"""
どこで: `common.settings`
何を: プロジェクトの環境変数（`SHB_*`）を型付きで一元管理し、起動時に読み込む。
なぜ: `os.getenv` の散在を解消し、既定値/型の一貫性とテスト容易性を高めるため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, env_str


@dataclass
class _Settings:
    # Logging
    LOG_LEVEL: str = "INFO"

    # 乱数（None なら非決定的）
    SEED: int | None = None

    # Runner
    FPS: int | None = None  # None なら YAML/既定値へ委譲

    # Diagnostics: 何フレームごとに DEBUG 集計を出すか（0 で無効）
    DEBUG_FRAMES: int = 120


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - 未設定/不正値は既定値へフォールバック。
    - FPS と DEBUG_FRAMES は下限丸めを適用。
    """
    _settings.LOG_LEVEL = (env_str("SHB_LOG_LEVEL", "INFO") or "INFO").upper()
    _settings.SEED = env_int("SHB_SEED", None)
    _settings.FPS = env_int("SHB_FPS", None, min_value=1)
    _settings.DEBUG_FRAMES = env_int("SHB_DEBUG_FRAMES", 120, min_value=0) or 0


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
