import pytest

from bezier_rope.models import MotionSample
from bezier_rope.simulation import CurveSimulation


class FakeMotionSource:
    """Hands out queued samples, one per latest() call, repeating the last."""

    available = True

    def __init__(self, *samples: MotionSample) -> None:
        self.samples = list(samples) or [MotionSample()]
        self.reads = 0
        self.started = 0
        self.stopped = 0
        self.torn_down = False

    def start_updates(self) -> None:
        self.started += 1

    def stop_updates(self) -> None:
        self.stopped += 1

    def latest(self) -> MotionSample:
        index = min(self.reads, len(self.samples) - 1)
        self.reads += 1
        return self.samples[index]

    def teardown(self) -> None:
        self.torn_down = True


@pytest.fixture
def motion() -> FakeMotionSource:
    return FakeMotionSource()


@pytest.fixture
def sim(motion: FakeMotionSource) -> CurveSimulation:
    simulation = CurveSimulation(800, 600, motion=motion)
    simulation.start()
    return simulation
