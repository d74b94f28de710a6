"""
explode（直方体の格子分割・放射発散）

- 直方体を `divisions³` 個の小直方体へ決定的に分割する（i, j, k 各 0..divisions-1）。
- 各破片の中心は親の中心からのオフセット
  `(index - divisions/2 + 0.5) * edge`（edge = size / divisions）に置く。
- 破片の辺長は `edge * gap_ratio`（既定 0.95）で、隙間を空けて見分けやすくする。
- 初速度は「オフセット方向の単位ベクトル × 一様乱数 [speed_min, speed_max]」に、
  スケール後の Y 成分へだけ上向きバイアスを足したもの。中心片（オフセット 0）は
  ゼロ方向（`normalize` の定義による）となり、バイアスのみで打ち上がる。
- 角速度は各軸独立に一様乱数 [-spin_max, spin_max]。回転角はゼロから始まる
  （オフセットはワールド軸に平行なので、親の回転は引き継がない）。
- 色は爆散時点の親の色の値コピー（後から親色が変わっても破片は追従しない。
  ただし `Scene.set_color_channel` は既存破片も明示的に更新する）。

乱数:
- `rng` に `numpy.random.Generator` を注入できる。省略時は `default_rng()`。
- 乱数の消費順は破片ごとに「速さ → 角速度 x, y, z」。同じシードなら同じ結果になる。

注意:
- 並び順は (i, j, k) の入れ子ループ順で決まるが、呼び出し側はそれに依存しないこと。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

import numpy as np

from engine.core.vector import Vector3, add, normalize, scale

from .cuboid import Cuboid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FragmentationConfig:
    """爆散の調整値。"""

    gap_ratio: float = 0.95
    speed_min: float = 0.15
    speed_max: float = 0.25
    upward_bias: float = 0.1
    spin_max: float = 0.15

    def __post_init__(self) -> None:
        if not 0.0 < self.gap_ratio <= 1.0:
            raise ValueError(f"gap_ratio は (0, 1] である必要があります: {self.gap_ratio!r}")
        if self.speed_min > self.speed_max:
            raise ValueError(
                f"speed_min ({self.speed_min!r}) は speed_max ({self.speed_max!r}) 以下である必要があります"
            )
        if self.spin_max < 0.0:
            raise ValueError(f"spin_max は 0 以上である必要があります: {self.spin_max!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "FragmentationConfig":
        """設定辞書から生成する（未知キーは `ValueError`）。"""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"unknown fragmentation keys: {sorted(unknown)}")
        return cls(**{k: float(v) for k, v in data.items()})


DEFAULT_FRAGMENTATION = FragmentationConfig()


def explode(
    cuboid: Cuboid,
    divisions: int = 6,
    *,
    rng: np.random.Generator | None = None,
    config: FragmentationConfig = DEFAULT_FRAGMENTATION,
) -> list[Cuboid]:
    """直方体を格子状に分割し、放射方向の初速度を持つ破片列を返す。

    Parameters
    ----------
    cuboid : Cuboid
        親の直方体（変更しない）。
    divisions : int, default 6
        各軸の分割数（正の整数）。結果は `divisions**3` 個。
    rng : numpy.random.Generator | None
        乱数源。None なら新規に `default_rng()` を作る。
    config : FragmentationConfig
        隙間率・速さ範囲・上向きバイアス・回転の範囲。

    Returns
    -------
    list[Cuboid]
        新しい破片のリスト。

    Raises
    ------
    ValueError
        `divisions` が正の整数でない場合。
    """
    if isinstance(divisions, bool) or int(divisions) != divisions or divisions <= 0:
        raise ValueError(f"divisions は正の整数である必要があります: {divisions!r}")
    n = int(divisions)
    if rng is None:
        rng = np.random.default_rng()

    edge = cuboid.size / n
    fragment_size = edge * config.gap_ratio
    fragment_mass = cuboid.mass / float(n**3)
    # 値コピー（Vector3 は不変なので参照共有でも後続の書き換えは波及しない）
    color = Vector3(cuboid.color.x, cuboid.color.y, cuboid.color.z)

    fragments: list[Cuboid] = []
    for i in range(n):
        for j in range(n):
            for k in range(n):
                offset = Vector3(
                    (i - n / 2 + 0.5) * edge,
                    (j - n / 2 + 0.5) * edge,
                    (k - n / 2 + 0.5) * edge,
                )
                speed = float(rng.uniform(config.speed_min, config.speed_max))
                launch = scale(normalize(offset), speed)
                # バイアスはスケール後の Y 成分にのみ加算
                velocity = Vector3(launch.x, launch.y + config.upward_bias, launch.z)
                spin = rng.uniform(-config.spin_max, config.spin_max, size=3)
                fragments.append(
                    Cuboid(
                        position=add(cuboid.position, offset),
                        size=fragment_size,
                        color=color,
                        velocity=velocity,
                        angular_velocity=Vector3(float(spin[0]), float(spin[1]), float(spin[2])),
                        mass=fragment_mass,
                    )
                )

    logger.debug("exploded cuboid into %d fragments (edge=%.4f)", len(fragments), fragment_size)
    return fragments


__all__ = ["FragmentationConfig", "DEFAULT_FRAGMENTATION", "explode"]
