from __future__ import annotations

import pytest

from engine.core.vector import Vector3
from engine.render.projection import NEAR_PLANE, Camera, ScreenPoint, project


def test_point_on_axis_maps_to_screen_center() -> None:
    sp = project(Vector3(0.0, 0.0, 3.0), 600.0, 800, 600)
    assert sp == ScreenPoint(400.0, 300.0, 3.0)


def test_screen_y_is_flipped() -> None:
    # scale = 600 / 2 = 300
    sp = project(Vector3(1.0, 1.0, 2.0), 600.0, 800, 600)
    assert sp is not None
    assert sp.x == pytest.approx(700.0)
    assert sp.y == pytest.approx(0.0)
    assert sp.depth == 2.0


@pytest.mark.parametrize("z", [NEAR_PLANE, 0.05, 0.0, -1.0, -100.0])
def test_points_at_or_behind_near_plane_are_unrepresentable(z: float) -> None:
    assert project(Vector3(0.0, 0.0, z), 600.0, 800, 600) is None


def test_point_just_beyond_near_plane_projects() -> None:
    assert project(Vector3(0.0, 0.0, NEAR_PLANE + 1e-6), 600.0, 800, 600) is not None


def test_camera_applies_zoom_to_focal_length(camera: Camera) -> None:
    zoomed = camera.with_zoom(2.0)
    assert zoomed.effective_focal_length == pytest.approx(1200.0)
    assert camera.zoom == 1.0  # 元は不変
    p = Vector3(1.0, 0.0, 4.0)
    a = camera.project(p)
    b = zoomed.project(p)
    assert a is not None and b is not None
    assert (b.x - 400.0) == pytest.approx(2.0 * (a.x - 400.0))


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0, "height": 600},
        {"width": 800, "height": -1},
        {"width": 800, "height": 600, "focal_length": 0.0},
        {"width": 800, "height": 600, "near_plane": float("nan")},
        {"width": 800, "height": 600, "zoom": -1.0},
    ],
)
def test_camera_rejects_invalid_parameters(kwargs) -> None:
    with pytest.raises(ValueError):
        Camera(**kwargs)
