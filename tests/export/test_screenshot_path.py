from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("pyglet")

from engine.export.image import _unique_path, screenshot_path  # noqa: E402
from util.paths import ensure_screenshots_dir  # noqa: E402


def test_name_contains_pixel_size(tmp_path: Path) -> None:
    out = screenshot_path(960, 720, tmp_path)
    assert out.parent == tmp_path
    assert out.name.endswith("_960x720.png")
    assert not out.exists()


def test_unique_path_avoids_collisions(tmp_path: Path) -> None:
    base = tmp_path / "shot.png"
    assert _unique_path(base) == base
    base.write_bytes(b"")
    assert _unique_path(base) == tmp_path / "shot_1.png"
    (tmp_path / "shot_1.png").write_bytes(b"")
    assert _unique_path(base) == tmp_path / "shot_2.png"


def test_screenshots_dir_honors_data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHB_DATA_DIR", str(tmp_path))
    out = ensure_screenshots_dir()
    assert out == tmp_path / "screenshot"
    assert out.is_dir()
