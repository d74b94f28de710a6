from __future__ import annotations

import math

import numpy as np
import pytest

from engine.core.vector import Vector3
from engine.render.faces import FACE_TABLE, face_brightness, faces_of, faces_of_many, world_corners
from engine.render.projection import Camera
from engine.render.types import DEFAULT_LIGHT, FRAGMENT_STROKE, INTACT_STROKE, Face, Light
from engine.scene.cuboid import Cuboid
from engine.scene.scene import Scene
from util.color import shade_rgb

# 正面から当たる光（front 面の法線 (0,0,-1) と一致）
HEAD_ON = Light(direction=Vector3(0.0, 0.0, -1.0), ambient=0.4, diffuse=0.6)


def test_six_faces_in_table_order(cuboid: Cuboid, camera: Camera) -> None:
    faces = faces_of(cuboid, camera)
    assert len(faces) == 6 == len(FACE_TABLE)
    assert all(len(f.points) == 4 for f in faces)


def test_depth_is_mean_world_z(cuboid: Cuboid, camera: Camera) -> None:
    depths = [f.depth for f in faces_of(cuboid, camera)]
    # front, back, top, bottom, left, right
    assert depths == pytest.approx([3.0, 5.0, 4.0, 4.0, 4.0, 4.0])


def test_front_face_screen_points(cuboid: Cuboid, camera: Camera) -> None:
    front = faces_of(cuboid, camera)[0]
    # z=3 → scale 200。頂点順 0,4,6,2 = (-,-) (+,-) (+,+) (-,+)
    expected = [(200.0, 500.0), (600.0, 500.0), (600.0, 100.0), (200.0, 100.0)]
    np.testing.assert_allclose(np.array(front.points), np.array(expected), atol=1e-9)
    # 正面の中心 (0,0,3) は画面中央に写る
    np.testing.assert_allclose(np.array(front.points).mean(axis=0), [400.0, 300.0], atol=1e-9)


def test_cuboid_crossing_near_plane_yields_nothing(camera: Camera) -> None:
    c = Cuboid(position=Vector3(0.0, 0.0, 0.5), size=2.0)
    assert faces_of(c, camera) == []
    behind = Cuboid(position=Vector3(0.0, 0.0, -10.0), size=1.0)
    assert faces_of(behind, camera) == []


def test_world_corners_centered_on_position() -> None:
    c = Cuboid(position=Vector3(1.0, -2.0, 7.0), size=3.0, rotation=Vector3(0.3, 0.9, -0.4))
    corners = world_corners(c)
    assert corners.shape == (8, 3)
    np.testing.assert_allclose(corners.mean(axis=0), [1.0, -2.0, 7.0], atol=1e-12)
    # 回転しても中心からの距離は半対角線
    dist = np.linalg.norm(corners - np.array([1.0, -2.0, 7.0]), axis=1)
    np.testing.assert_allclose(dist, 1.5 * math.sqrt(3.0), atol=1e-12)


def test_flat_shading_lit_and_unlit_faces(cuboid: Cuboid, camera: Camera) -> None:
    faces = faces_of(cuboid, camera, HEAD_ON)
    front, back = faces[0], faces[1]
    assert front.color == (127, 127, 127)  # floor(0.5 * 255 * 1.0) = floor(127.5)
    unlit = math.floor(0.5 * 255 * 0.4)
    assert back.color == (unlit, unlit, unlit)
    # 側面は法線が光と直交するので環境光のみ
    assert faces[4].color == back.color


def test_normals_follow_rotation(camera: Camera) -> None:
    # Y に π 回すと front 面は +Z を向き、光から外れる
    c = Cuboid(
        position=Vector3(0.0, 0.0, 4.0),
        size=2.0,
        color=Vector3(1.0, 1.0, 1.0),
        rotation=Vector3(0.0, math.pi, 0.0),
    )
    front = faces_of(c, camera, HEAD_ON)[0]
    assert front.depth == pytest.approx(5.0)
    assert front.color == shade_rgb((1.0, 1.0, 1.0), 0.4)


def test_face_brightness_range() -> None:
    assert face_brightness(Vector3(0.0, 0.0, -1.0), HEAD_ON) == pytest.approx(1.0)
    assert face_brightness(Vector3(0.0, 0.0, 1.0), HEAD_ON) == pytest.approx(0.4)
    # 光の向きは正規化してから使う
    scaled = Light(direction=Vector3(0.0, 0.0, -10.0))
    assert face_brightness(Vector3(0.0, 0.0, -1.0), scaled) == pytest.approx(1.0)


def test_stroke_style_is_attached(cuboid: Cuboid, camera: Camera) -> None:
    assert {f.stroke for f in faces_of(cuboid, camera)} == {INTACT_STROKE}
    assert {f.stroke for f in faces_of(cuboid, camera, stroke=FRAGMENT_STROKE)} == {FRAGMENT_STROKE}


def test_bright_color_clamps_to_255(camera: Camera) -> None:
    c = Cuboid(position=Vector3(0.0, 0.0, 4.0), size=2.0, color=Vector3(1.0, 1.0, 1.0))
    strong = Light(direction=Vector3(0.0, 0.0, -1.0), ambient=1.0, diffuse=1.0)
    assert faces_of(c, camera, strong)[0].color == (255, 255, 255)


def _assert_same_faces(batched: list[Face], single: list[Face]) -> None:
    assert len(batched) == len(single)
    for got, want in zip(batched, single):
        np.testing.assert_allclose(np.array(got.points), np.array(want.points), rtol=1e-12, atol=1e-9)
        assert got.depth == pytest.approx(want.depth, rel=1e-12)
        # floor 直前の丸め誤差で 1 段ずれることだけ許す
        assert all(abs(a - b) <= 1 for a, b in zip(got.color, want.color))
        assert all(isinstance(c, int) for c in got.color)
        assert got.stroke == want.stroke


def test_batched_faces_match_single_path_for_fragments(scene: Scene, camera: Camera) -> None:
    scene.explode()
    for _ in range(12):
        scene.advance()
    fragments = scene.fragments
    assert any(f.rotation != Vector3(0.0, 0.0, 0.0) for f in fragments)

    batched, culled = faces_of_many(fragments, camera, DEFAULT_LIGHT, FRAGMENT_STROKE)
    assert culled == 0
    assert len(batched) == len(fragments) * 6
    for i, fragment in enumerate(fragments):
        _assert_same_faces(batched[i * 6 : (i + 1) * 6], faces_of(fragment, camera, DEFAULT_LIGHT, FRAGMENT_STROKE))


def test_batched_faces_count_and_skip_culled(cuboid: Cuboid, camera: Camera) -> None:
    crossing = Cuboid(position=Vector3(0.0, 0.0, 0.5), size=2.0)
    behind = Cuboid(position=Vector3(0.0, 0.0, -10.0), size=1.0)
    tilted = Cuboid(
        position=Vector3(1.0, -0.5, 6.0),
        size=1.5,
        color=Vector3(0.9, 0.2, 0.6),
        rotation=Vector3(0.3, -1.1, 2.4),
    )
    batched, culled = faces_of_many([crossing, cuboid, behind, tilted], camera, HEAD_ON)
    assert culled == 2
    _assert_same_faces(batched, faces_of(cuboid, camera, HEAD_ON) + faces_of(tilted, camera, HEAD_ON))


def test_batched_faces_empty_and_all_culled(camera: Camera) -> None:
    assert faces_of_many([], camera) == ([], 0)
    behind = [Cuboid(position=Vector3(0.0, 0.0, -1.0), size=1.0) for _ in range(3)]
    assert faces_of_many(behind, camera) == ([], 3)
