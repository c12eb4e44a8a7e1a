# Bit-flips injector module
from __future__ import annotations

import time
import random
from abc import ABC, abstractmethod
from datetime import datetime
from numbers import Real
from typing import Callable, Iterable

from loguru import logger

from bitflip import canonical
from bitflip.policy import RunState, StopPolicy, policy_from_mode
from bitflip.records import ErrorRateBucket, FlipEvent, Output
from bitflip.result import (
    ConfigurationError, ConfigureResult, InjectResult, InjectStatus
)

Observer = Callable[[FlipEvent, float], None]


class Strategy(ABC):
    """Injector strategy base class
    """
    def __init__(self) -> None:
        pass

    @abstractmethod
    def inject(self, buffer: bytearray, rate: float) -> list[int]:
        """Flip bits of buffer in place.

        Args:
            buffer (bytearray): Big-endian value bytes.
            rate (float): Error rate of active bucket.

        Returns:
            list[int]: Global indexes (byte index * 8 + bit offset) of flipped bits.
        """
        pass


class BernoulliBitflipStrategy(Strategy):
    """Every bit flips independently with probability equal to rate.
    """
    def __init__(self, rng: random.Random) -> None:
        super().__init__()
        self._rng = rng

    def inject(self, buffer: bytearray, rate: float) -> list[int]:
        bits: list[int] = []
        for idx in range(len(buffer)):
            for bit in range(8):
                if self._rng.random() < rate:
                    buffer[idx] ^= (1 << bit)
                    bits.append(idx * 8 + bit)

        return bits


def timestamp() -> str:
    ns: int = time.time_ns()
    seconds, frac = divmod(ns, 1_000_000_000)
    return f"{datetime.fromtimestamp(seconds):%m-%d-%Y-%H:%M:%S}.{frac:09d}"


def _check_rates(rates: Iterable[float]) -> list[float]:
    checked: list[float] = []
    for rate in rates:
        if isinstance(rate, bool) or not isinstance(rate, Real):
            raise ConfigurationError(f"error rate must be a number, got {rate!r}")
        if not 0.0 <= rate <= 1.0:
            raise ConfigurationError(f"error rate must be within [0, 1], got {rate}")
        checked.append(float(rate))

    if not checked:
        raise ConfigurationError("at least one error rate is required")

    return checked


class FaultInjector:
    def __init__(
        self,
        observer: Observer | None = None,
        width: int = canonical.DEFAULT_WIDTH,
        clock: Callable[[], float] = time.monotonic,
        strategy: Callable[[random.Random], Strategy] = BernoulliBitflipStrategy,
    ) -> None:
        """Probabilistic bit-flip injector with one output bucket per error rate.

        Args:
            observer (Observer | None): Called with every recorded event and its bucket rate.
            width (int): Canonical unsigned width in bits of "before" values.
            clock (Callable): Monotonic clock used by time-based policy.
                              Time window restarts for every error rate.
            strategy (Callable): Builds flip strategy from the run generator.
        """
        self.observer: Observer | None = observer
        self.width: int = width
        self._clock = clock
        self._strategy_factory = strategy
        self._strategy: Strategy | None = None
        self.policy: StopPolicy | None = None
        self.started: float | None = None
        self.output: Output = Output()
        self.cursor: int = 0
        self._variables: int = 0

    @property
    def configured(self) -> bool:
        return self.policy is not None

    @property
    def exhausted(self) -> bool:
        return self.configured and self.cursor >= len(self.output.data)

    @property
    def active_bucket(self) -> ErrorRateBucket | None:
        if not self.configured or self.exhausted:
            return None
        return self.output.data[self.cursor]

    def configure(
        self,
        mode: str | StopPolicy,
        count: int | float | None = None,
        rates: Iterable[float] = (),
        seed: int | None = None,
    ) -> ConfigureResult:
        """Set stopping policy and error rates. Replaces any previous run.

        Args:
            mode (str | StopPolicy): 'iteration', 'variable', anything else is time-based.
                                     A StopPolicy instance is used as is and count is ignored.
            count (int | float): Count limit or duration in seconds.
            rates (Iterable[float]): Error rates, one bucket per rate in given order.
            seed (int | None): Seed of run generator. None uses OS entropy.

        Returns:
            ConfigureResult: Failed result keeps previous state untouched.
        """
        fallback: bool = False
        try:
            if isinstance(mode, StopPolicy):
                policy: StopPolicy = mode
            else:
                policy, fallback = policy_from_mode(mode=mode, count=count)
            checked: list[float] = _check_rates(rates)
        except ConfigurationError as e:
            logger.error(f"Configuration rejected: {e}")
            return ConfigureResult(ok=False, error=e)

        if fallback:
            logger.warning(f"Unknown test type {mode!r}, using time limit of {policy.limit}s")

        self.policy = policy
        self.output = Output(data=[ErrorRateBucket(rate=r) for r in checked])
        self.cursor = 0
        self._variables = 0
        self._strategy = self._strategy_factory(random.Random(seed))
        self.started = self._clock()
        logger.info(f"Injector configured. Policy={policy!r}, rates={checked}")
        return ConfigureResult(ok=True, mode_fallback=fallback)

    def _state(self, flip_count: int) -> RunState:
        return RunState(
            flip_count=flip_count,
            variables=self._variables,
            elapsed=self._clock() - self.started,
        )

    def _advance(self) -> None:
        rate: float = self.output.data[self.cursor].rate
        self.cursor += 1
        self._variables = 0
        self.started = self._clock()
        if self.exhausted:
            logger.info(f"Error rate {rate} finished, all error rates exhausted")
        else:
            logger.info(f"Error rate {rate} finished, switching to {self.output.data[self.cursor].rate}")

    def inject(self, value: int, flip_count: int = 0) -> InjectResult:
        """Run the odds of flipping every bit of value with active bucket rate.

        Args:
            value (int): Value to corrupt.
            flip_count (int): Running flip count of active bucket, threaded by caller.

        Returns:
            InjectResult: New value and flip count. Event is None on passthrough.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"value must be an int, got {type(value).__name__}")

        if not self.configured:
            return InjectResult(InjectStatus.NOT_CONFIGURED, value, flip_count)
        if self.exhausted:
            return InjectResult(InjectStatus.EXHAUSTED, value, flip_count)
        if self.policy.should_stop(self._state(flip_count)):
            self._advance()
            return InjectResult(InjectStatus.STOPPED, value, flip_count)

        bucket: ErrorRateBucket = self.output.data[self.cursor]

        # "before" is canonical, candidates and "after" are not
        previous: int = canonical.canonicalize(value, self.width)
        previous_bytes: bytes = canonical.to_bytes(previous)
        buffer: bytearray = bytearray(canonical.to_bytes(value))

        bits: list[int] = self._strategy.inject(buffer, bucket.rate)
        error_value: int = canonical.from_bytes(buffer)
        flip_count += len(bits)
        self._variables += 1

        event = FlipEvent(
            iteration=flip_count,
            previous_value=previous,
            previous_bytes=previous_bytes.hex(),
            bits=tuple(bits),
            error_value=error_value,
            error_bytes=bytes(buffer).hex(),
            delta=error_value - previous,
            when=timestamp(),
        )
        bucket.append(event)
        logger.debug(f"rate={bucket.rate} flipped={len(bits)} delta={event.delta}")

        if self.observer is not None:
            self.observer(event, bucket.rate)

        status = InjectStatus.FLIPPED if bits else InjectStatus.UNCHANGED
        return InjectResult(status, error_value, flip_count, event)
