import pytest
from loguru import logger

from bitflip.injector import FaultInjector


class FakeClock:
    def __init__(self, now: float = 0.0, step: float = 0.0) -> None:
        self.now: float = now
        self.step: float = step

    def __call__(self) -> float:
        now = self.now
        self.now += self.step
        return now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ticking_clock() -> FakeClock:
    return FakeClock(step=1.0)


@pytest.fixture
def injector(clock: FakeClock) -> FaultInjector:
    return FaultInjector(clock=clock)


@pytest.fixture
def log_messages():
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)
