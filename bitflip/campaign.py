# Injection campaign
from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from bitflip import canonical
from bitflip.injector import FaultInjector, Observer
from bitflip.policy import TimeLimit
from bitflip.result import InjectStatus

DEFAULT_MAX_CALLS: int = 100_000


@dataclass
class CampaignParams:
    mode: str
    count: int | float
    rates: list[float]
    values: list[int] = field(default_factory=lambda: [0])
    max_calls: int | None = None
    seed: int | None = None
    width: int = canonical.DEFAULT_WIDTH


@dataclass(frozen=True)
class CampaignSummary:
    calls: int
    finished: int
    exhausted: bool


class Campaign:
    def __init__(self, values: list[int], max_calls: int | None = None) -> None:
        """Inject into a set of values round-robin until every error rate is finished.
        Every error rate starts from the original values with a zero flip count.

        Args:
            values (list[int]): Values to corrupt.
            max_calls (int | None): Upper bound of inject calls. Protects runs where policy
                                    can't be reached (e.g. iteration limit with 0.0 rate).
                                    None means DEFAULT_MAX_CALLS for count limits and
                                    no bound for time limit.
        """
        if not values:
            raise ValueError("campaign needs at least one value")

        self.values: list[int] = list(values)
        self.max_calls: int | None = max_calls

    def start(self, injector: FaultInjector) -> CampaignSummary:
        current: list[int] = list(self.values)
        flip_count: int = 0
        idx: int = 0
        calls: int = 0
        finished: int = 0
        max_calls: int | None = self.max_calls
        if max_calls is None and not isinstance(injector.policy, TimeLimit):
            max_calls = DEFAULT_MAX_CALLS

        while max_calls is None or calls < max_calls:
            result = injector.inject(current[idx], flip_count)
            calls += 1
            if result.status in (InjectStatus.EXHAUSTED, InjectStatus.NOT_CONFIGURED):
                break

            if result.status == InjectStatus.STOPPED:
                finished += 1
                current = list(self.values)
                flip_count = 0
                idx = 0
                continue

            current[idx] = result.value
            flip_count = result.flip_count
            idx = (idx + 1) % len(current)

        if max_calls is not None and calls >= max_calls and not injector.exhausted:
            logger.warning(f"Campaign stopped after {calls} calls, {finished} error rates finished")

        return CampaignSummary(calls=calls, finished=finished, exhausted=injector.exhausted)


def run_campaign(
    params: CampaignParams, observer: Observer | None = None
) -> tuple[FaultInjector, CampaignSummary]:
    """Configure injector from params and run campaign.

    Raises:
        ConfigurationError: Params rejected by injector.
    """
    injector = FaultInjector(observer=observer, width=params.width)
    injector.configure(
        mode=params.mode, count=params.count, rates=params.rates, seed=params.seed
    ).unwrap()

    summary = Campaign(values=params.values, max_calls=params.max_calls).start(injector)
    return injector, summary
