"""
どこで: `engine.scene` の集約ルート。
何を: 本体直方体・破片列・状態（INTACT/EXPLODED）・回転角・ズームを保持し、tick ごとの状態更新を行う。
なぜ: 入力（クリック/スクロール/色）と描画ループの双方が触る可変状態を 1 か所に閉じ込めるため。

状態遷移:
- `INTACT`（初期）→ `EXPLODED`（セッション内で終端）。遷移は `explode()` のみ。
- 2 回目以降の `explode()` は no-op（例外にしない）。逆遷移は存在しない。

破片列:
- 遷移時に 1 度だけ生成し、以後は物理ステップで就地更新する。再生成・並べ替えはしない。

色の扱い（2 つの方針が併存する）:
- 爆散時は親の色を値コピーする（`fragmentation.explode`）。
- 色操作 `set_color_channel` は本体と既存の全破片を遡って更新する。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

import numpy as np

from engine.core.vector import Vector3
from util.color import normalize_color

from .cuboid import Cuboid
from .fragmentation import DEFAULT_FRAGMENTATION, FragmentationConfig, explode
from .intents import ColorChannelSet, ExplodeRequested, Intent, IntentQueue, ZoomRequested
from .physics import DEFAULT_PHYSICS, PhysicsConfig, is_at_rest, step_all

logger = logging.getLogger(__name__)

ZOOM_MIN = 0.5
ZOOM_MAX = 5.0
ZOOM_IN_FACTOR = 1.1
ZOOM_OUT_FACTOR = 0.9

_CHANNELS = {"r": 0, "g": 1, "b": 2, "red": 0, "green": 1, "blue": 2}


class SceneState(Enum):
    INTACT = "intact"
    EXPLODED = "exploded"


def _clamp_zoom(z: float) -> float:
    return max(ZOOM_MIN, min(ZOOM_MAX, z))


def channel_index(channel: str | int) -> int:
    """色チャンネル指定を 0/1/2 に解決する（不正値は `ValueError`）。"""
    if isinstance(channel, str):
        idx = _CHANNELS.get(channel.strip().lower())
        if idx is None:
            raise ValueError(f"invalid color channel: {channel!r} (expected r/g/b)")
        return idx
    if isinstance(channel, bool) or channel not in (0, 1, 2):
        raise ValueError(f"invalid color channel: {channel!r} (expected 0/1/2)")
    return int(channel)


def _with_channel(color: Vector3, idx: int, value01: float) -> Vector3:
    rgb = list(color.as_tuple())
    rgb[idx] = value01
    return Vector3(rgb[0], rgb[1], rgb[2])


@dataclass(eq=False)
class Scene:
    """シーン全体の可変状態。描画ループ（単一スレッド）が排他的に所有する。"""

    main_cuboid: Cuboid
    divisions: int = 6
    rotation_speed: float = 0.01
    physics: PhysicsConfig = DEFAULT_PHYSICS
    fragmentation: FragmentationConfig = DEFAULT_FRAGMENTATION
    rng: np.random.Generator | None = None
    rotation_angle: float = 0.0
    zoom_level: float = 1.0
    is_exploded: bool = field(default=False, init=False)
    fragments: list[Cuboid] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if isinstance(self.divisions, bool) or int(self.divisions) != self.divisions or self.divisions <= 0:
            raise ValueError(f"divisions は正の整数である必要があります: {self.divisions!r}")
        self.divisions = int(self.divisions)
        self.zoom_level = _clamp_zoom(float(self.zoom_level))

    # ── 生成 ───────────────────
    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None, *, seed: int | None = None) -> "Scene":
        """YAML 由来の設定辞書（`scene`/`physics`/`fragmentation` 節）からシーンを作る。

        欠けた値は既定値（中心 (0,0,10)、辺長 3、青系の色）で補う。
        """
        cfg = dict(config or {})
        scene_cfg = dict(cfg.get("scene") or {})
        position = Vector3.from_iterable(scene_cfg.get("position", (0.0, 0.0, 10.0)))
        r, g, b, _a = normalize_color(scene_cfg.get("color", (0.27, 0.53, 0.93)))
        main = Cuboid(
            position=position,
            size=float(scene_cfg.get("size", 3.0)),
            color=Vector3(r, g, b),
            mass=float(scene_cfg.get("mass", 1.0)),
        )
        return cls(
            main_cuboid=main,
            divisions=scene_cfg.get("divisions", 6),
            rotation_speed=float(scene_cfg.get("rotation_speed", 0.01)),
            physics=PhysicsConfig.from_mapping(cfg.get("physics")),
            fragmentation=FragmentationConfig.from_mapping(cfg.get("fragmentation")),
            rng=np.random.default_rng(seed),
        )

    # ── 状態 ───────────────────
    @property
    def state(self) -> SceneState:
        return SceneState.EXPLODED if self.is_exploded else SceneState.INTACT

    @property
    def resting_count(self) -> int:
        """静止した破片の数（診断用）。"""
        return sum(1 for f in self.fragments if is_at_rest(f, self.physics))

    def explode(self, rng: np.random.Generator | None = None) -> bool:
        """INTACT → EXPLODED の一度きりの遷移。遷移したら True、既に爆散済みなら False。"""
        if self.is_exploded:
            logger.debug("explode ignored: scene already exploded")
            return False
        source = rng if rng is not None else self.rng
        self.fragments = explode(
            self.main_cuboid, self.divisions, rng=source, config=self.fragmentation
        )
        self.is_exploded = True
        logger.info("scene exploded into %d fragments", len(self.fragments))
        return True

    def zoom_by(self, direction: float) -> float:
        """ズームを 1 段階変更し、クランプ後の値を返す。"""
        if direction > 0:
            self.zoom_level = _clamp_zoom(self.zoom_level * ZOOM_IN_FACTOR)
        elif direction < 0:
            self.zoom_level = _clamp_zoom(self.zoom_level * ZOOM_OUT_FACTOR)
        return self.zoom_level

    def set_color_channel(self, channel: str | int, value: float) -> None:
        """色チャンネルを 0–255 の値で設定する。本体と既存の全破片に反映。"""
        idx = channel_index(channel)
        v = float(value)
        if not math.isfinite(v):
            raise ValueError(f"color value must be finite: {value!r}")
        v01 = max(0.0, min(255.0, v)) / 255.0
        self.main_cuboid.color = _with_channel(self.main_cuboid.color, idx, v01)
        for fragment in self.fragments:
            fragment.color = _with_channel(fragment.color, idx, v01)

    # ── intent 消費 ───────────────────
    def apply(self, intent: Intent) -> None:
        if isinstance(intent, ExplodeRequested):
            self.explode()
        elif isinstance(intent, ZoomRequested):
            self.zoom_by(intent.direction)
        elif isinstance(intent, ColorChannelSet):
            self.set_color_channel(intent.channel, intent.value)
        else:
            raise TypeError(f"unsupported intent: {intent!r}")

    def apply_pending(self, queue: IntentQueue) -> int:
        """キューに積まれた intent を FIFO で適用し、適用数を返す。"""
        count = 0
        for intent in queue.drain():
            self.apply(intent)
            count += 1
        return count

    # ── tick ───────────────────
    def advance(self) -> None:
        """1 tick 分の状態更新（INTACT: 回転、EXPLODED: 物理）。"""
        if not self.is_exploded:
            self.rotation_angle += self.rotation_speed
            r = self.main_cuboid.rotation
            # Y のみ上書き（累積ではない）。X/Z はそのまま
            self.main_cuboid.rotation = Vector3(r.x, self.rotation_angle, r.z)
        else:
            step_all(self.fragments, self.physics)


__all__ = [
    "Scene",
    "SceneState",
    "channel_index",
    "ZOOM_MIN",
    "ZOOM_MAX",
    "ZOOM_IN_FACTOR",
    "ZOOM_OUT_FACTOR",
]
