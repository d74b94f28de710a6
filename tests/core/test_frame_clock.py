from __future__ import annotations

from engine.core.frame_clock import FrameClock


class _Recorder:
    def __init__(self, name: str, log: list[tuple[str, float]]):
        self.name = name
        self.log = log

    def tick(self, dt: float) -> None:
        self.log.append((self.name, dt))


def test_tickables_called_in_registration_order_with_dt() -> None:
    log: list[tuple[str, float]] = []
    clock = FrameClock([_Recorder("a", log), _Recorder("b", log)])
    clock.tick(0.5)
    clock.tick(0.25)
    assert log == [("a", 0.5), ("b", 0.5), ("a", 0.25), ("b", 0.25)]
    assert clock.ticks == 2


def test_dt_is_measured_when_not_given() -> None:
    log: list[tuple[str, float]] = []
    clock = FrameClock([_Recorder("a", log)])
    clock.tick()
    assert log[0][1] >= 0.0


def test_over_budget_counts_slow_frames() -> None:
    clock = FrameClock([], frame_budget=-1.0)
    clock.tick(0.0)
    clock.tick(0.0)
    assert clock.over_budget == 2

    fast = FrameClock([], frame_budget=None)
    fast.tick(0.0)
    assert fast.over_budget == 0
