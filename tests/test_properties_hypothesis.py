import math

import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis is a dev optional dependency")
from hypothesis import assume, given, strategies as st  # type: ignore

from engine.core.vector import Vector3, length, normalize, rotate
from engine.render.compositor import sort_faces
from engine.render.projection import NEAR_PLANE, project
from engine.render.types import Face
from engine.scene.cuboid import Cuboid
from engine.scene.scene import ZOOM_MAX, ZOOM_MIN, Scene

coord = st.floats(-100, 100, allow_nan=False, allow_infinity=False)
angle = st.floats(-10, 10, allow_nan=False, allow_infinity=False)


@given(x=coord, y=coord, z=coord)
def test_normalize_idempotent(x, y, z):
    v = Vector3(x, y, z)
    assume(length(v) > 1e-6)
    n = normalize(v)
    m = normalize(n)
    assert math.isclose(m.x, n.x, abs_tol=1e-9)
    assert math.isclose(m.y, n.y, abs_tol=1e-9)
    assert math.isclose(m.z, n.z, abs_tol=1e-9)


@given(x=coord, y=coord, z=coord, ax=angle, ay=angle, az=angle)
def test_rotation_preserves_length(x, y, z, ax, ay, az):
    v = Vector3(x, y, z)
    r = rotate(v, Vector3(ax, ay, az))
    assert math.isclose(length(r), length(v), rel_tol=1e-9, abs_tol=1e-9)


@given(x=coord, y=coord, z=coord)
def test_projection_defined_iff_beyond_near_plane(x, y, z):
    sp = project(Vector3(x, y, z), 600.0, 800, 600)
    assert (sp is None) == (z <= NEAR_PLANE)
    if sp is not None:
        assert sp.depth == z


@given(depths=st.lists(st.floats(0.2, 1000, allow_nan=False), max_size=30))
def test_sorted_faces_are_non_increasing(depths):
    square = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
    out = sort_faces(Face(points=square, depth=d, color=(0, 0, 0)) for d in depths)
    got = [f.depth for f in out]
    assert got == sorted(depths, reverse=True)


@given(steps=st.lists(st.sampled_from([-1, 0, 1]), max_size=80))
def test_zoom_always_within_bounds(steps):
    s = Scene(main_cuboid=Cuboid(position=Vector3(0.0, 0.0, 10.0), size=1.0))
    for d in steps:
        s.zoom_by(d)
        assert ZOOM_MIN <= s.zoom_level <= ZOOM_MAX
