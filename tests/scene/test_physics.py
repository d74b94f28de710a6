from __future__ import annotations

import pytest

from engine.core.vector import Vector3
from engine.scene.cuboid import Cuboid
from engine.scene.physics import (
    DEFAULT_PHYSICS,
    PhysicsConfig,
    is_at_rest,
    resolve_floor_collision,
    step,
    step_all,
)


def _fragment(y: float = 0.0, v=(0.0, 0.0, 0.0), w=(0.0, 0.0, 0.0), size: float = 1.0) -> Cuboid:
    return Cuboid(
        position=Vector3(0.0, y, 10.0),
        size=size,
        velocity=Vector3(*v),
        angular_velocity=Vector3(*w),
    )


def test_free_fall_applies_gravity_then_air_resistance() -> None:
    f = _fragment(y=5.0)
    step(f)
    expected_vy = (0.0 - 0.02) * 0.998
    assert f.velocity.y == expected_vy
    assert f.position.y == 5.0 + expected_vy


def test_rotation_then_angular_damping() -> None:
    f = _fragment(y=5.0, w=(0.1, -0.05, 0.02))
    step(f)
    assert f.rotation.x == pytest.approx(0.1)
    assert f.rotation.y == pytest.approx(-0.05)
    assert f.angular_velocity.x == pytest.approx(0.1 * 0.98)
    assert f.angular_velocity.z == pytest.approx(0.02 * 0.98)


def test_floor_collision_bounces_and_clamps() -> None:
    # 底面がちょうど床 (-4) にある
    f = _fragment(y=-3.5, v=(0.0, -0.5, 0.0))
    assert resolve_floor_collision(f)
    assert f.velocity.y == pytest.approx(0.3)
    assert f.position.y - f.size / 2 == pytest.approx(-4.0)


def test_full_step_bounce_without_gravity_or_drag() -> None:
    cfg = PhysicsConfig(gravity=0.0, air_resistance=1.0)
    f = _fragment(y=-3.5, v=(0.0, -0.5, 0.0))
    step(f, cfg)
    assert f.velocity.y == pytest.approx(0.3)
    assert f.position.y - f.size / 2 == pytest.approx(cfg.floor_y)


def test_no_collision_above_floor() -> None:
    f = _fragment(y=0.0, v=(0.1, 0.0, 0.0))
    assert not resolve_floor_collision(f)
    assert f.velocity.x == 0.1


def test_collision_applies_friction_and_spin_damping() -> None:
    f = _fragment(y=-3.5, v=(0.1, -0.5, -0.2), w=(0.1, 0.1, 0.1))
    step(f)
    assert f.velocity.x == pytest.approx(0.1 * 0.998 * 0.95)
    assert f.velocity.z == pytest.approx(-0.2 * 0.998 * 0.95)
    assert f.angular_velocity.y == pytest.approx(0.1 * 0.98 * 0.6)


def test_slow_impact_stops_vertical_motion() -> None:
    f = _fragment(y=-3.5, v=(0.0, -0.0005, 0.0))
    resolve_floor_collision(f)
    assert f.velocity.y == 0.0


def test_rest_clamp_zeroes_tiny_components() -> None:
    f = _fragment(y=5.0, v=(0.0005, 0.0, -0.0009), w=(0.0005, 0.5, 0.0))
    step(f)
    assert f.velocity.x == 0.0
    assert f.velocity.z == 0.0
    assert f.angular_velocity.x == 0.0
    assert f.angular_velocity.y == pytest.approx(0.5 * 0.98)


def test_step_all_updates_every_fragment_in_order() -> None:
    frags = [_fragment(y=float(i)) for i in range(3)]
    step_all(frags)
    assert [f.position.y for f in frags] == [
        pytest.approx(float(i) + (-0.02 * 0.998)) for i in range(3)
    ]


def test_fragment_settles_on_floor() -> None:
    f = _fragment(y=2.0, v=(0.2, 0.15, -0.1), w=(0.1, -0.12, 0.08), size=0.5)
    assert not is_at_rest(f)
    for _ in range(2000):
        step(f)
        assert f.position.y - f.size / 2 >= DEFAULT_PHYSICS.floor_y - 1e-9
    assert is_at_rest(f)
    assert f.velocity.x == 0.0 and f.velocity.z == 0.0


def test_mass_is_ignored() -> None:
    a = _fragment(y=3.0, v=(0.1, 0.2, 0.0))
    b = _fragment(y=3.0, v=(0.1, 0.2, 0.0))
    b.mass = 100.0
    for _ in range(50):
        step(a)
        step(b)
    assert a.position == b.position


def test_config_from_mapping() -> None:
    assert PhysicsConfig.from_mapping({}) == DEFAULT_PHYSICS
    cfg = PhysicsConfig.from_mapping({"gravity": 0.01, "floor_y": -2})
    assert cfg.gravity == 0.01 and cfg.floor_y == -2.0
    assert cfg.friction == DEFAULT_PHYSICS.friction
    with pytest.raises(ValueError):
        PhysicsConfig.from_mapping({"gravitas": 1.0})
