"""
どこで: `engine.scene` の物理積分器。
何を: 破片 1 個を固定タイムステップ 1 回ぶん進める（重力・空気抵抗・床衝突・静止クランプ）。
なぜ: 破片同士は相互作用しないため、各破片に独立の純粋な更新を順に適用するだけで足りるため。

更新順（ビット単位の再現性のため変更しないこと）:
1. `velocity.y -= gravity`
2. `velocity *= air_resistance`（成分ごと。重力適用後に減衰）
3. `position += velocity`
4. `rotation += angular_velocity`
5. `angular_velocity *= angular_damping`
6. 床衝突（底面 `position.y - size/2 <= floor_y` のとき）
   - `position.y = floor_y + size/2` に押し戻す
   - `|velocity.y| > min_velocity` なら反発（`-velocity.y * bounce_damping`）、それ以外は 0
   - `velocity.x/z *= friction`
   - `angular_velocity *= bounce_damping`（衝突の反発係数を流用する。別定数ではない）
7. 静止クランプ: `|v| < min_velocity` の速度成分、`|ω| < min_angular_velocity` の角速度成分を 0 に。

質量は参照しない（重力は一定加速度、運動量交換なし）。
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping

from engine.core.vector import Vector3

from .cuboid import Cuboid


@dataclass(frozen=True)
class PhysicsConfig:
    """物理定数一式（不変）。既定値は挙動互換のため固定。"""

    gravity: float = 0.02
    bounce_damping: float = 0.6
    friction: float = 0.95
    air_resistance: float = 0.998
    floor_y: float = -4.0
    angular_damping: float = 0.98
    min_velocity: float = 0.001
    min_angular_velocity: float = 0.001

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "PhysicsConfig":
        """設定辞書から生成する（未知キーは `ValueError`、欠けたキーは既定値）。"""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown physics keys: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})


DEFAULT_PHYSICS = PhysicsConfig()


def _zero_small(v: float, threshold: float) -> float:
    return 0.0 if abs(v) < threshold else v


def resolve_floor_collision(fragment: Cuboid, config: PhysicsConfig = DEFAULT_PHYSICS) -> bool:
    """床との衝突応答を就地適用する。衝突したら True。"""
    half = fragment.size / 2
    if fragment.position.y - half > config.floor_y:
        return False

    p = fragment.position
    fragment.position = Vector3(p.x, config.floor_y + half, p.z)

    v = fragment.velocity
    if abs(v.y) > config.min_velocity:
        vy = -v.y * config.bounce_damping
    else:
        vy = 0.0
    fragment.velocity = Vector3(v.x * config.friction, vy, v.z * config.friction)

    w = fragment.angular_velocity
    k = config.bounce_damping
    fragment.angular_velocity = Vector3(w.x * k, w.y * k, w.z * k)
    return True


def step(fragment: Cuboid, config: PhysicsConfig = DEFAULT_PHYSICS) -> None:
    """破片を 1 ステップ進める（就地更新）。"""
    # 線形: 重力 → 空気抵抗 → 位置
    v = fragment.velocity
    air = config.air_resistance
    vx = v.x * air
    vy = (v.y - config.gravity) * air
    vz = v.z * air
    fragment.velocity = Vector3(vx, vy, vz)
    p = fragment.position
    fragment.position = Vector3(p.x + vx, p.y + vy, p.z + vz)

    # 角: 回転 → 減衰
    w = fragment.angular_velocity
    r = fragment.rotation
    fragment.rotation = Vector3(r.x + w.x, r.y + w.y, r.z + w.z)
    damp = config.angular_damping
    fragment.angular_velocity = Vector3(w.x * damp, w.y * damp, w.z * damp)

    resolve_floor_collision(fragment, config)

    # 静止クランプ
    v = fragment.velocity
    mv = config.min_velocity
    fragment.velocity = Vector3(_zero_small(v.x, mv), _zero_small(v.y, mv), _zero_small(v.z, mv))
    w = fragment.angular_velocity
    mw = config.min_angular_velocity
    fragment.angular_velocity = Vector3(
        _zero_small(w.x, mw), _zero_small(w.y, mw), _zero_small(w.z, mw)
    )


def step_all(fragments: Iterable[Cuboid], config: PhysicsConfig = DEFAULT_PHYSICS) -> None:
    """格納順に全破片へ `step` を適用する。"""
    for fragment in fragments:
        step(fragment, config)


def is_at_rest(fragment: Cuboid, config: PhysicsConfig = DEFAULT_PHYSICS) -> bool:
    """床上で落ち着いたか（水平速度・角速度が 0、鉛直速度が接地の微振動以内）。

    重力は床判定より先に毎 tick 加わるため、接地した破片の `velocity.y` は厳密な 0 には
    収束せず、`gravity` 未満の振幅で反発を繰り返す。これは静止として扱う。
    """
    v = fragment.velocity
    w = fragment.angular_velocity
    # 押し戻し後の位置は 1 tick で gravity 程度しか浮かない
    on_floor = fragment.position.y - fragment.size / 2 <= config.floor_y + config.gravity
    return (
        on_floor
        and v.x == 0.0
        and v.z == 0.0
        and abs(v.y) <= config.gravity
        and w.as_tuple() == (0.0, 0.0, 0.0)
    )


__all__ = [
    "PhysicsConfig",
    "DEFAULT_PHYSICS",
    "step",
    "step_all",
    "resolve_floor_collision",
    "is_at_rest",
]
