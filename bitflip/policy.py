# Stopping policies
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from bitflip.result import ConfigurationError


@dataclass(frozen=True)
class RunState:
    flip_count: int
    variables: int
    elapsed: float


class StopPolicy(ABC):
    """Stopping policy base class
    """
    name: str = ""

    def __init__(self, limit: int | float) -> None:
        super().__init__()
        self.limit = limit

    @abstractmethod
    def should_stop(self, state: RunState) -> bool:
        pass

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.limit == other.limit

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.limit!r})"


def _check_count(limit: object) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ConfigurationError(f"count limit must be an int, got {limit!r}")
    if limit < 0:
        raise ConfigurationError(f"count limit must be non-negative, got {limit}")
    return limit


class IterationLimit(StopPolicy):
    """Stop once the running flip count reaches the limit.
    Reaching, not exceeding: with limit 1 the call after a single flip is a passthrough.
    """
    name = "iteration"

    def __init__(self, limit: int) -> None:
        super().__init__(_check_count(limit))

    def should_stop(self, state: RunState) -> bool:
        return state.flip_count >= self.limit


class VariableLimit(StopPolicy):
    """Stop once the number of processed values of the active error rate reaches the limit.
    Reaching, not exceeding, same as IterationLimit.
    """
    name = "variable"

    def __init__(self, limit: int) -> None:
        super().__init__(_check_count(limit))

    def should_stop(self, state: RunState) -> bool:
        return state.variables >= self.limit


class TimeLimit(StopPolicy):
    """Stop once the configured duration (seconds) has elapsed for the active error rate."""
    name = "time"

    def __init__(self, limit: float) -> None:
        if isinstance(limit, bool) or not isinstance(limit, (int, float)):
            raise ConfigurationError(f"duration must be a number of seconds, got {limit!r}")
        if math.isnan(limit) or limit < 0:
            raise ConfigurationError(f"duration must be non-negative, got {limit}")
        super().__init__(float(limit))

    def should_stop(self, state: RunState) -> bool:
        return state.elapsed >= self.limit


def policy_from_mode(mode: str, count: int | float) -> tuple[StopPolicy, bool]:
    """Build stopping policy from loosely typed mode.

    Args:
        mode (str): 'iteration', 'variable'. Any other value selects time-based policy.
        count (int | float): Count for iteration/variable modes, seconds for time mode.

    Returns:
        tuple[StopPolicy, bool]: Policy and True if unknown mode fell back to time.
    """
    if mode == IterationLimit.name:
        return IterationLimit(count), False
    elif mode == VariableLimit.name:
        return VariableLimit(count), False

    return TimeLimit(count), mode != TimeLimit.name
