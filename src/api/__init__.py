"""
どこで: `api` 入口（高レベル公開 API）。
何を: 実行ランナー `run`・`Scene`・`SceneRenderer` などを再輸出。
なぜ: 利用者が単一名前空間からシーン構築→実行まで完結できるようにするため。

Usage:
    from api import run

    run(width=960, height=720, seed=42)
"""

from engine.render.compositor import SceneRenderer
from engine.scene.scene import Scene

from .runner import main, run_scene

run = run_scene

__all__ = [
    "run",
    "run_scene",
    "main",
    "Scene",
    "SceneRenderer",
]
