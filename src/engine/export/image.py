"""
どこで: `engine.export.image`。
何を: 現在の描画ウィンドウ内容を PNG として保存するラッパ（最小実装）。
なぜ: ワンアクションでスクリーンショットを得られるようにするため。
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pyglet

from util.paths import ensure_screenshots_dir


def _unique_path(path: Path) -> Path:
    """同名ファイルがあれば `_1`, `_2`, ... を付けて衝突を避ける。"""
    if not path.exists():
        return path
    stem, suffix = path.stem, path.suffix
    i = 1
    while True:
        cand = path.with_name(f"{stem}_{i}{suffix}")
        if not cand.exists():
            return cand
        i += 1


def screenshot_path(width: int, height: int, out_dir: Path | None = None) -> Path:
    """タイムスタンプとピクセル寸法を含む保存先パスを返す。"""
    if out_dir is None:
        out_dir = ensure_screenshots_dir()
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _unique_path(out_dir / f"{ts}_{int(width)}x{int(height)}.png")


def save_png(window: "pyglet.window.Window", path: Path | None = None) -> Path:
    """現在のウィンドウ内容を PNG として保存する。

    Parameters
    ----------
    window : pyglet.window.Window
        対象ウィンドウ。
    path : Path | None
        出力先パス。None の場合は既定の `data/screenshot/` にタイムスタンプ名で保存。

    Returns
    -------
    Path
        保存先のファイルパス。

    Raises
    ------
    RuntimeError
        カラーバッファの取得/保存に失敗した場合（ヘッドレス等）。
    """
    if path is None:
        path = screenshot_path(window.width, window.height)
    try:
        buffer = pyglet.image.get_buffer_manager().get_color_buffer()
        buffer.save(str(path))
    except Exception as e:  # pyglet が未初期化/ヘッドレスなど
        raise RuntimeError(f"PNG 保存に失敗: {e}") from e
    return path


__all__ = ["save_png", "screenshot_path"]
