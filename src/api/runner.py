"""
どこで: `api.runner`（実行ランナー / CLI）。
何を: 設定を解決して Scene・カメラ・合成器を組み立て、pyglet ウィンドウ・入力・フレームクロックを結線して実行する。
なぜ: 中核（engine.scene / engine.render）を GUI から独立させたまま、1 行で対話実行できるようにするため。

実行フロー（概要）:
1) 設定解決: 引数 > 環境変数（`SHB_*`）> YAML（`configs/default.yaml` + `config.yaml`）> 既定値。
2) Scene 構築: `Scene.from_config`（乱数シードは `seed` → `SHB_SEED` → 非決定的）。
3) `init_only=True` なら pyglet を読み込まず、`RecordingSurface` に繋いだ `SceneRenderer` を返す。
4) Window/入力: `RenderWindow` を生成し、`InputController` → `IntentQueue` を結線。
5) フレーム駆動: `FrameClock` を `pyglet.clock.schedule_interval` で `1/fps` ごとに呼ぶ。
   描画は on_draw で `SceneRenderer.draw()` → `PygletSurface.flush()`。

スレッド安全性:
- Scene を変更するのは tick（主スレッド）だけ。入力は intent としてキューへ積まれる。
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from common import settings as settings_mod
from common.logging import setup_default_logging
from common.types import RGB8
from engine.core.vector import Vector3
from engine.render.compositor import DEFAULT_BACKGROUND, SceneRenderer
from engine.render.projection import NEAR_PLANE, Camera
from engine.render.surface import RecordingSurface
from engine.render.types import Light
from engine.scene.intents import IntentQueue
from engine.scene.scene import Scene
from util.color import to_u8_rgb
from util.utils import config_section, load_config

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 720
DEFAULT_FPS = 60


@dataclass(frozen=True)
class RunConfig:
    """解決済みの実行設定。"""

    width: int
    height: int
    fps: int
    background: RGB8
    camera: Camera
    light: Light
    seed: int | None


def _positive_int(value: Any, default: int) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        return default
    return v if v > 0 else default


def resolve_fps(requested_fps: int | None, cfg: Mapping[str, Any] | None, *, default: int = DEFAULT_FPS) -> int:
    """FPS を解決して 1 以上の int を返す。

    - 明示指定があればそれを優先（数値化できない/<=0 は既定へ）。
    - 次に環境変数 `SHB_FPS`、最後に設定ファイルの `window.fps`。
    """
    if requested_fps is not None:
        return _positive_int(requested_fps, default)
    env_fps = settings_mod.get().FPS
    if env_fps is not None:
        return max(1, env_fps)
    return _positive_int(config_section(cfg, "window").get("fps", default), default)


def resolve_run_config(
    cfg: Mapping[str, Any] | None,
    *,
    width: int | None = None,
    height: int | None = None,
    fps: int | None = None,
    seed: int | None = None,
) -> RunConfig:
    """引数・環境変数・設定辞書から `RunConfig` を組み立てる。"""
    window = config_section(cfg, "window")
    w = _positive_int(width if width is not None else window.get("width"), DEFAULT_WIDTH)
    h = _positive_int(height if height is not None else window.get("height"), DEFAULT_HEIGHT)

    bg_raw = window.get("background")
    background = to_u8_rgb(bg_raw) if bg_raw is not None else DEFAULT_BACKGROUND

    cam = config_section(cfg, "camera")
    camera = Camera(
        width=w,
        height=h,
        focal_length=float(cam.get("focal_length", 600.0)),
        near_plane=float(cam.get("near_plane", NEAR_PLANE)),
    )

    light_cfg = config_section(cfg, "light")
    light_kwargs: dict[str, Any] = {}
    if "direction" in light_cfg:
        light_kwargs["direction"] = Vector3.from_iterable(light_cfg["direction"])
    for name in ("ambient", "diffuse"):
        if name in light_cfg:
            light_kwargs[name] = float(light_cfg[name])
    light = Light(**light_kwargs)

    if seed is None:
        seed = settings_mod.get().SEED

    return RunConfig(
        width=w,
        height=h,
        fps=resolve_fps(fps, cfg),
        background=background,
        camera=camera,
        light=light,
        seed=seed,
    )


def run_scene(
    *,
    width: int | None = None,
    height: int | None = None,
    fps: int | None = None,
    seed: int | None = None,
    config: Mapping[str, Any] | None = None,
    init_only: bool = False,
) -> SceneRenderer:
    """シーンを組み立てて実行する。

    Parameters
    ----------
    width, height : int | None
        ウィンドウ寸法 [px]。None で設定ファイル/既定値。
    fps : int | None
        更新レート。None で `SHB_FPS` → 設定ファイル → 60。
    seed : int | None
        爆散の乱数シード。None で `SHB_SEED` → 非決定的。
    config : Mapping | None
        設定辞書。None なら `load_config()` の結果を使う。
    init_only : bool, default False
        True でウィンドウを作らず、記録用描画面に繋いだ合成器を返す。

    Returns
    -------
    SceneRenderer
        結線済みの合成器（通常実行ではウィンドウを閉じた後に返る）。
    """
    cfg = load_config() if config is None else config
    rc = resolve_run_config(cfg, width=width, height=height, fps=fps, seed=seed)
    scene = Scene.from_config(cfg, seed=rc.seed)
    intents = IntentQueue()
    debug_every = settings_mod.get().DEBUG_FRAMES
    logger.info(
        "scene ready: %dx%d @ %d fps, cuboid size=%.2f, divisions=%d, seed=%s",
        rc.width,
        rc.height,
        rc.fps,
        scene.main_cuboid.size,
        scene.divisions,
        rc.seed,
    )

    if init_only:
        return SceneRenderer(
            scene,
            RecordingSurface(rc.width, rc.height),
            rc.camera,
            light=rc.light,
            background=rc.background,
            intents=intents,
            debug_every=debug_every,
        )

    # 遅延インポート（ヘッドレス環境でのウィンドウ生成を避ける）
    import pyglet

    from engine.core.frame_clock import FrameClock
    from engine.core.render_window import RenderWindow
    from engine.export.image import save_png
    from engine.io.input import InputController
    from engine.render.pyglet_surface import PygletSurface

    controller = InputController(intents)
    controller.sync_color(scene.main_cuboid.color.as_tuple())

    window: RenderWindow | None = None

    def _screenshot() -> None:
        assert window is not None
        try:
            path = save_png(window)
        except RuntimeError as e:
            logger.warning("screenshot failed: %s", e)
            return
        logger.info("saved screenshot: %s", path)

    try:
        window = RenderWindow(rc.width, rc.height, controller, on_screenshot=_screenshot)
    except Exception:
        logger.exception("failed to create window")
        raise

    surface = PygletSurface(window)
    renderer = SceneRenderer(
        scene,
        surface,
        rc.camera,
        light=rc.light,
        background=rc.background,
        intents=intents,
        debug_every=debug_every,
    )

    def _draw_main() -> None:
        renderer.draw()
        surface.flush()

    window.add_draw_callback(_draw_main)

    frame_clock = FrameClock([renderer], frame_budget=1.0 / rc.fps)
    pyglet.clock.schedule_interval(frame_clock.tick, 1.0 / rc.fps)
    try:
        pyglet.app.run()
    finally:
        pyglet.clock.unschedule(frame_clock.tick)
        logger.info(
            "session ended after %d frames (%d over budget), state=%s",
            frame_clock.ticks,
            frame_clock.over_budget,
            scene.state.value,
        )
    return renderer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="shatterbox", description="Rotating cuboid that shatters on click.")
    p.add_argument("--width", type=int, default=None, help="window width in pixels")
    p.add_argument("--height", type=int, default=None, help="window height in pixels")
    p.add_argument("--fps", type=int, default=None, help="frames per second")
    p.add_argument("--seed", type=int, default=None, help="random seed for the explosion")
    p.add_argument("--log-level", default=None, help="logging level (default: SHB_LOG_LEVEL or INFO)")
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_default_logging(args.log_level or settings_mod.get().LOG_LEVEL)
    run_scene(width=args.width, height=args.height, fps=args.fps, seed=args.seed)
    return 0


__all__ = ["RunConfig", "resolve_fps", "resolve_run_config", "run_scene", "build_parser", "main"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
