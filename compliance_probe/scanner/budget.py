"""
Wall-clock budget for optional probe stages

The budget starts at probe entry. Every optional stage asks ``allow()``
before issuing its network call; once the budget is spent, all remaining
optional stages are skipped and the probe returns what it has.
"""

import time
from typing import Callable, List, Optional

import structlog

logger = structlog.get_logger()


class TimeBudget:
    """
    Cooperative elapsed-time guard

    Nothing is cancelled: a fetch already in flight runs to its own timeout,
    the budget only declines to start the next optional stage.
    """

    def __init__(self, budget_ms: int, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            budget_ms: Total wall-clock budget in milliseconds
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.budget_ms = budget_ms
        self.clock = clock
        self.started_at: Optional[float] = None
        self.skipped_stages: List[str] = []
        self.logger = logger.bind(component="time_budget")

    def start(self) -> "TimeBudget":
        self.started_at = self.clock()
        return self

    @property
    def elapsed_ms(self) -> int:
        if self.started_at is None:
            return 0
        return int(round((self.clock() - self.started_at) * 1000))

    @property
    def remaining_ms(self) -> int:
        return max(0, self.budget_ms - self.elapsed_ms)

    def exceeded(self) -> bool:
        return self.elapsed_ms > self.budget_ms

    def allow(self, stage: str) -> bool:
        """
        Ask whether an optional stage may start

        Args:
            stage: Stage name, recorded when skipped

        Returns:
            False once the budget is exceeded
        """
        if self.exceeded():
            self.skipped_stages.append(stage)
            self.logger.info(
                "Budget exceeded, skipping stage",
                stage=stage,
                elapsed_ms=self.elapsed_ms,
                budget_ms=self.budget_ms
            )
            return False
        return True

    @property
    def exhausted(self) -> bool:
        """True when the budget ran out or a stage was skipped because of it"""
        return bool(self.skipped_stages) or self.exceeded()
