"""
どこで: `engine.render` の合成・描画。
何を: 1 フレームぶんの状態更新（intent 消費 → `Scene.advance`）、全面の収集、深度降順ソート、描画命令の発行。
なぜ: 深度バッファを持たない描画面で、画家のアルゴリズム（奥から手前へ塗る）により遮蔽を近似するため。

フレームの流れ:
- `tick(dt)`: intent を FIFO 消費 → 状態更新 → 面を収集・ソートしてフレームとして保持。
- `draw()`: 保持したフレームを背景塗り → 面ごとに塗り+輪郭で発行（ウィンドウの on_draw から呼ぶ）。
  前回の `draw` 以降に `tick` が無ければ再発行しない。

注意:
- 面のソートは安定ソート（同深度は収集順を保つ）。
- 近平面で破棄された直方体はそのフレームだけ描かない（例外にもエラーログにもしない）。
- 相互貫通する形状ではソートのみの遮蔽近似に破綻が出るが、それは許容する。
"""

from __future__ import annotations

import logging
from typing import Iterable

from common.types import RGB8
from engine.core.tickable import Tickable
from engine.scene.intents import IntentQueue
from engine.scene.scene import Scene

from .faces import faces_of, faces_of_many
from .projection import Camera
from .surface import DrawingSurface
from .types import DEFAULT_LIGHT, FRAGMENT_STROKE, INTACT_STROKE, Face, Light

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND: RGB8 = (16, 20, 24)


def sort_faces(faces: Iterable[Face]) -> list[Face]:
    """深度の降順（奥が先）に並べた新しいリストを返す。"""
    return sorted(faces, key=lambda f: f.depth, reverse=True)


def collect_faces(scene: Scene, camera: Camera, light: Light = DEFAULT_LIGHT) -> tuple[list[Face], int]:
    """現在の状態から描画対象の面を集める（未ソート）。

    Returns
    -------
    tuple[list[Face], int]
        面のリストと、近平面で破棄された直方体の数。
    """
    if not scene.is_exploded:
        faces = faces_of(scene.main_cuboid, camera, light, INTACT_STROKE)
        return faces, 0 if faces else 1

    return faces_of_many(scene.fragments, camera, light, FRAGMENT_STROKE)


def compose(scene: Scene, camera: Camera, light: Light = DEFAULT_LIGHT) -> list[Face]:
    """描画順（奥→手前）に並んだ面列を返す（状態は変更しない）。"""
    faces, _ = collect_faces(scene, camera, light)
    return sort_faces(faces)


def draw(faces: Iterable[Face], surface: DrawingSurface, background: RGB8 = DEFAULT_BACKGROUND) -> int:
    """背景を塗り、面を与えられた順に発行する。発行した多角形数を返す。"""
    surface.fill_background(background)
    count = 0
    for face in faces:
        surface.fill_and_stroke_polygon(face.points, face.color, face.stroke.color, face.stroke.width)
        count += 1
    return count


class SceneRenderer(Tickable):
    """Scene を 1 フレームずつ進めて描画面へ流し込む。"""

    def __init__(
        self,
        scene: Scene,
        surface: DrawingSurface,
        camera: Camera,
        *,
        light: Light = DEFAULT_LIGHT,
        background: RGB8 = DEFAULT_BACKGROUND,
        intents: IntentQueue | None = None,
        debug_every: int = 0,
    ):
        """
        scene: 排他的に所有する Scene
        surface: 描画命令の送り先
        camera: ベースのカメラ（毎フレーム scene.zoom_level を反映した複製を使う）
        intents: 入力側が積む intent キュー（None なら新規作成）
        debug_every: 何フレームごとに DEBUG 集計を出すか（0 で無効）
        """
        self.scene = scene
        self.surface = surface
        self.base_camera = camera
        self.light = light
        self.background = background
        self.intents = intents if intents is not None else IntentQueue()
        self._debug_every = max(0, int(debug_every))
        self._faces: list[Face] = []
        self._pending_draw = False
        self.frame_count = 0
        self.last_face_count = 0
        self.last_culled_count = 0

    @property
    def camera(self) -> Camera:
        return self.base_camera.with_zoom(self.scene.zoom_level)

    @property
    def faces(self) -> list[Face]:
        """直近の `tick` で確定した描画順の面列。"""
        return list(self._faces)

    # -------- Tickable interface --------
    def tick(self, dt: float) -> None:
        self.scene.apply_pending(self.intents)
        self.scene.advance()
        faces, culled = collect_faces(self.scene, self.camera, self.light)
        self._faces = sort_faces(faces)
        self._pending_draw = True
        self.frame_count += 1
        self.last_face_count = len(self._faces)
        self.last_culled_count = culled
        if self._debug_every and self.frame_count % self._debug_every == 0:
            logger.debug(
                "frame=%d state=%s faces=%d culled=%d resting=%d zoom=%.3f",
                self.frame_count,
                self.scene.state.value,
                self.last_face_count,
                culled,
                self.scene.resting_count,
                self.scene.zoom_level,
            )

    def draw(self) -> int:
        """保持しているフレームを描画面へ発行する。

        直前の `draw` 以降に `tick` が走っていなければ何も発行せず 0 を返す
        （描画面は前回の内容を保持している前提）。
        """
        if not self._pending_draw:
            return 0
        self._pending_draw = False
        return draw(self._faces, self.surface, self.background)

    def render_frame(self, dt: float = 0.0) -> int:
        """`tick` と `draw` を続けて行う（ヘッドレス実行/テスト用）。"""
        self.tick(dt)
        return self.draw()


__all__ = [
    "DEFAULT_BACKGROUND",
    "sort_faces",
    "collect_faces",
    "compose",
    "draw",
    "SceneRenderer",
]
