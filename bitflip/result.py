# Explicit results for configure / inject / render
from __future__ import annotations

from enum import Enum
from dataclasses import dataclass

from bitflip.records import FlipEvent


class ConfigurationError(ValueError):
    pass


class InjectStatus(Enum):
    FLIPPED = 1
    UNCHANGED = 2
    STOPPED = 3
    EXHAUSTED = 4
    NOT_CONFIGURED = 5


@dataclass(frozen=True)
class ConfigureResult:
    ok: bool
    error: ConfigurationError | None = None
    mode_fallback: bool = False

    def unwrap(self) -> None:
        """Raise the stored error if configuration failed.

        Raises:
            ConfigurationError: Reason configuration was rejected.
        """
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class InjectResult:
    status: InjectStatus
    value: int
    flip_count: int
    event: FlipEvent | None = None

    @property
    def passthrough(self) -> bool:
        return self.event is None


@dataclass(frozen=True)
class RenderResult:
    ok: bool
    text: str | None = None
    error: str | None = None
