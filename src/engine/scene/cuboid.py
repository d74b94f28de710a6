"""
どこで: `engine.scene` のデータモデル。
何を: 描画と物理の共通単位である直方体 `Cuboid`（中心・辺長・色・回転・速度・角速度・質量）。
なぜ: 本体（回転する 1 個）と破片（物理で動く多数）を同じ型で扱い、描画経路を一本化するため。

注意:
- `Cuboid` は可変（物理ステップが毎 tick で就地更新する）。成分の `Vector3` 自体は不変。
- `mass` は現行の物理モデルでは参照されない予約フィールド（互換のため保持）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from engine.core.vector import ZERO, Vector3


@dataclass(eq=False)
class Cuboid:
    """シーン内の直方体 1 個。

    フィールド:
    - `position`: ワールド座標の中心。
    - `size`: 辺長（> 0）。
    - `color`: 基本色 RGB（各 0–1）。外部の色操作で随時書き換わる。
    - `rotation`: 累積オイラー角（ラジアン, X→Y→Z 順に適用）。折り返しはしない。
    - `velocity` / `angular_velocity`: 破片としてのみ意味を持つ（本体ではゼロ）。
    - `mass`: 予約（物理モデルは質量非依存）。
    """

    position: Vector3
    size: float
    color: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    rotation: Vector3 = ZERO
    velocity: Vector3 = ZERO
    angular_velocity: Vector3 = ZERO
    mass: float = 1.0

    def __post_init__(self) -> None:
        size = float(self.size)
        if not math.isfinite(size) or size <= 0.0:
            raise ValueError(f"Cuboid.size は正の有限値である必要があります: {self.size!r}")
        self.size = size

    @property
    def half_size(self) -> float:
        return self.size * 0.5

    @property
    def bottom_y(self) -> float:
        """底面の Y（回転を無視した軸平行近似）。床衝突の判定に使う。"""
        return self.position.y - self.size * 0.5

    def __repr__(self) -> str:  # pragma: no cover - 表示用
        p = self.position
        return f"Cuboid(pos=({p.x:.3f}, {p.y:.3f}, {p.z:.3f}), size={self.size:.3f})"


__all__ = ["Cuboid"]
