from __future__ import annotations

from pathlib import Path

import pytest

from engine.scene.scene import Scene
from util.utils import config_section, load_config


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_root_config_overrides_default_top_level(tmp_path: Path) -> None:
    _write(tmp_path / "configs" / "default.yaml", "window:\n  fps: 60\nscene:\n  size: 3\n")
    _write(tmp_path / "config.yaml", "window:\n  fps: 30\n")
    cfg = load_config(tmp_path)
    assert cfg["window"] == {"fps": 30}
    assert cfg["scene"] == {"size": 3}


def test_missing_files_give_empty_dict(tmp_path: Path) -> None:
    assert load_config(tmp_path) == {}


def test_broken_yaml_is_fail_soft(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path / "configs" / "default.yaml", "window: [unclosed\n")
    with caplog.at_level("WARNING", logger="util.utils"):
        assert load_config(tmp_path) == {}
    assert any("failed to load config" in r.getMessage() for r in caplog.records)


def test_non_mapping_yaml_is_ignored(tmp_path: Path) -> None:
    _write(tmp_path / "configs" / "default.yaml", "- just\n- a list\n")
    assert load_config(tmp_path) == {}


def test_config_section() -> None:
    assert config_section({"a": {"x": 1}}, "a") == {"x": 1}
    assert config_section({"a": 3}, "a") == {}
    assert config_section(None, "a") == {}


@pytest.mark.integration
def test_repository_default_config_builds_scene() -> None:
    root = Path(__file__).resolve().parents[2]
    cfg = load_config(root)
    for name in ("window", "camera", "scene", "light", "physics", "fragmentation"):
        assert name in cfg
    s = Scene.from_config(cfg, seed=0)
    assert s.divisions == 6
    assert s.main_cuboid.size == pytest.approx(3.0)
