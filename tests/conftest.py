"""共通フィクスチャ。

- 乱数シード固定（Generator を注入）
- 小さな直方体・シーン・カメラ・記録用描画面
- 環境変数由来の設定を各テスト後に読み直す
"""

from __future__ import annotations

from typing import Iterator

import numpy as np
import pytest

from common import settings as settings_mod
from engine.core.vector import Vector3
from engine.render.projection import Camera
from engine.render.surface import RecordingSurface
from engine.scene.cuboid import Cuboid
from engine.scene.scene import Scene


@pytest.fixture(scope="session", autouse=True)
def np_seed() -> None:
    """NumPy の乱数を固定。"""
    np.random.seed(12345)


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture()
def cuboid() -> Cuboid:
    """カメラ正面 z=4 に置いた辺長 2 の灰色の直方体。"""
    return Cuboid(position=Vector3(0.0, 0.0, 4.0), size=2.0, color=Vector3(0.5, 0.5, 0.5))


@pytest.fixture()
def camera() -> Camera:
    return Camera(width=800, height=600, focal_length=600.0)


@pytest.fixture()
def scene() -> Scene:
    main = Cuboid(position=Vector3(0.0, 0.0, 10.0), size=3.0, color=Vector3(0.27, 0.53, 0.93))
    return Scene(main_cuboid=main, rng=np.random.default_rng(7))


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface(800, 600)


@pytest.fixture(autouse=True)
def _reload_settings_after_test() -> Iterator[None]:
    yield
    # monkeypatch の復元後に呼ばれる（フィクスチャは逆順に片付く）
    settings_mod.reload_from_env()
