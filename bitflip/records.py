# Flip event records
from dataclasses import dataclass, field


@dataclass(frozen=True)
class FlipEvent:
    iteration: int
    previous_value: int
    previous_bytes: str
    bits: tuple[int, ...]
    error_value: int
    error_bytes: str
    delta: int
    when: str


@dataclass
class ErrorRateBucket:
    rate: float
    flip_data: list[FlipEvent] = field(default_factory=list)

    def append(self, event: FlipEvent) -> None:
        self.flip_data.append(event)


@dataclass
class Output:
    data: list[ErrorRateBucket] = field(default_factory=list)

    def events(self) -> list[FlipEvent]:
        return [e for b in self.data for e in b.flip_data]
