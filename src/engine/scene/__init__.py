"""
どこで: `engine.scene` サブパッケージ。
何を: 直方体モデル・爆散（格子分割）・物理積分・状態機械（Scene）・入力 intent を提供。
なぜ: 描画（engine.render）から独立した純粋な状態更新層として、単体でテスト可能にするため。
"""

from .cuboid import Cuboid
from .fragmentation import FragmentationConfig, explode
from .intents import ColorChannelSet, ExplodeRequested, IntentQueue, ZoomRequested
from .physics import DEFAULT_PHYSICS, PhysicsConfig, step, step_all
from .scene import Scene, SceneState

__all__ = [
    "Cuboid",
    "FragmentationConfig",
    "explode",
    "ColorChannelSet",
    "ExplodeRequested",
    "IntentQueue",
    "ZoomRequested",
    "DEFAULT_PHYSICS",
    "PhysicsConfig",
    "step",
    "step_all",
    "Scene",
    "SceneState",
]
