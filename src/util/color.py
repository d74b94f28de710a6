"""
どこで: `util.color`。
何を: 色指定の正規化/変換（Hex, RGBA 0–1, RGBA 0–255）と、面の陰影色の計算を一元化。
なぜ: 設定ファイル/入力/描画の全体で同一の受理仕様と丸め規則（floor + clamp）を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else 1.0 if x > 1.0 else float(x)


def parse_hex_color_str(s: str) -> tuple[float, float, float, float]:
    """Hex 文字列から RGBA(0–1) を返す。

    受理形式: "#RRGGBB", "#RRGGBBAA", "0xRRGGBB", "0xRRGGBBAA", "RRGGBB", "RRGGBBAA"。
    大文字/小文字は不問。
    """
    t = s.strip()
    if t.startswith("#"):
        t = t[1:]
    elif t.lower().startswith("0x"):
        t = t[2:]
    if len(t) not in (6, 8):
        raise ValueError(f"invalid hex color length: '{s}' (expected RRGGBB or RRGGBBAA)")
    try:
        r = int(t[0:2], 16)
        g = int(t[2:4], 16)
        b = int(t[4:6], 16)
        a = int(t[6:8], 16) if len(t) == 8 else 255
    except ValueError as e:
        raise ValueError(f"invalid hex color: '{s}'") from e
    return (r / 255.0, g / 255.0, b / 255.0, a / 255.0)


def normalize_color(value: object) -> tuple[float, float, float, float]:
    """色を RGBA(0–1) へ正規化する。

    - 受理: Hex 文字列, (r,g,b[,a]) （0–1 または 0–255）
    - 返値: (r,g,b,a) （0–1）
    """
    if isinstance(value, str):
        return parse_hex_color_str(value)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"unsupported color type: {type(value)!r}")
    if len(value) not in (3, 4):
        raise ValueError("color tuple/list must be length 3 or 4")
    try:
        fseq = [float(value[0]), float(value[1]), float(value[2])]
        a = float(value[3]) if len(value) == 4 else 1.0
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid color tuple/list: {value!r}") from e
    # 全要素が 0..1 ならそのまま
    if all(0.0 <= x <= 1.0 for x in fseq + [a]):
        r, g, b = fseq
        return (_clamp01(r), _clamp01(g), _clamp01(b), _clamp01(a))
    # 次に 0–255 とみなし、整数丸め → 0–1 へスケール
    rgb = [max(0, min(255, int(round(x)))) for x in fseq]
    a8 = max(0, min(255, int(round(a)))) if len(value) == 4 else 255
    return (rgb[0] / 255.0, rgb[1] / 255.0, rgb[2] / 255.0, a8 / 255.0)


def to_u8_rgb(value: object) -> tuple[int, int, int]:
    """色を RGB(0–255) へ変換する。"""
    r, g, b, _a = normalize_color(value)
    return (int(round(r * 255)), int(round(g * 255)), int(round(b * 255)))


def _floor_channel(c: float, brightness: float) -> int:
    v = c * 255 * brightness
    if not math.isfinite(v):
        return 0 if v != v or v < 0 else 255
    return max(0, min(255, math.floor(v)))


def shade_rgb(color: Sequence[float], brightness: float) -> tuple[int, int, int]:
    """基本色 (0–1) と明るさから描画色 (0–255) を求める。

    各チャンネル独立に `floor(c * 255 * brightness)` を取り、[0, 255] にクランプする。
    四捨五入ではなく切り捨てである点に注意。
    """
    return (
        _floor_channel(float(color[0]), brightness),
        _floor_channel(float(color[1]), brightness),
        _floor_channel(float(color[2]), brightness),
    )


__all__ = [
    "parse_hex_color_str",
    "normalize_color",
    "to_u8_rgb",
    "shade_rgb",
]
