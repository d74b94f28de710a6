"""
どこで: `common.env`
何を: `SHB_*` 環境変数の型付き読み取りヘルパ（int/float/str/bool）。
なぜ: 未設定・空文字・不正値を一律に「既定値へフォールバック」として扱い、
      設定層（`common.settings`）から例外処理を追い出すため。
"""

from __future__ import annotations

import math
import os
from typing import Optional

_TRUE = frozenset({"true", "t", "yes", "y", "on"})
_FALSE = frozenset({"false", "f", "no", "n", "off"})


def _raw(name: str) -> Optional[str]:
    """前後空白を除いた値。未設定/空文字は None。"""
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def env_int(
    name: str, default: Optional[int] = None, *, min_value: Optional[int] = None
) -> Optional[int]:
    """整数の環境変数を読む。

    Parameters
    ----------
    name : str
        環境変数名。
    default : Optional[int]
        未設定/不正値のときに返す値。
    min_value : Optional[int]
        指定時、読み取った値がこれを下回れば下限へ丸める（既定値には適用しない）。

    Returns
    -------
    Optional[int]
    """
    raw = _raw(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    """浮動小数の環境変数を読む（NaN/inf は不正値扱い）。"""
    raw = _raw(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if math.isfinite(value) else default


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = _raw(name)
    return default if raw is None else raw


def env_bool(name: str, default: bool = False) -> bool:
    """真偽の環境変数を読む。数値（0 以外で真）か true/false 系の語を受け付ける。"""
    raw = _raw(name)
    if raw is None:
        return bool(default)
    word = raw.lower()
    if word in _TRUE:
        return True
    if word in _FALSE:
        return False
    try:
        return int(word) != 0
    except ValueError:
        return bool(default)


__all__ = ["env_int", "env_float", "env_str", "env_bool"]
