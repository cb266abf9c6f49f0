"""
Base class for probes

A probe starts its time budget on entry, performs the mandatory origin
fetch, then runs its optional stages. Whatever happens inside, ``run``
returns a report: a failed origin fetch yields the analysis-error fallback.
"""

import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

import structlog

from compliance_probe.core.config import ProbeConfig
from compliance_probe.core.exceptions import OriginFetchError
from compliance_probe.models.probe import FetchResult, ProbeTarget
from compliance_probe.models.report import ComplianceReport, ResourceInventory
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.fetcher import ResourceFetcher

logger = structlog.get_logger()

Report = Union[ComplianceReport, ResourceInventory]


class BaseProbe(ABC):
    """Time-bounded analysis of one page"""

    name: str = ""
    description: str = ""
    report_class = ComplianceReport

    def __init__(
        self,
        fetcher: ResourceFetcher,
        config: Optional[ProbeConfig] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.fetcher = fetcher
        self.config = config or ProbeConfig()
        self.clock = clock
        self.logger = logger.bind(component="probe", probe=self.name)

    @property
    def origin_timeout_ms(self) -> int:
        return self.config.origin_timeout_ms

    async def run(self, url: str) -> Report:
        """
        Run the probe against a page

        Args:
            url: Absolute URL of the page

        Returns:
            ComplianceReport or ResourceInventory, never raises
        """
        budget = TimeBudget(self.config.budget_ms, clock=self.clock).start()
        self.logger.info("Probe started", url=url)

        try:
            target = ProbeTarget.from_url(url)
            report = await self.analyze(target, budget)
        except OriginFetchError as e:
            self.logger.warning("Origin fetch failed", url=url, error=e.reason, status=e.status_code)
            return self.report_class.analysis_error(self.name, url, str(e), elapsed_ms=budget.elapsed_ms)
        except ValueError as e:
            self.logger.warning("Invalid probe target", url=url, error=str(e))
            return self.report_class.analysis_error(self.name, url, str(e), elapsed_ms=budget.elapsed_ms)
        except Exception as e:
            self.logger.error("Probe failed", url=url, error=str(e), exc_info=True)
            return self.report_class.analysis_error(self.name, url, str(e), elapsed_ms=budget.elapsed_ms)

        report.elapsed_ms = budget.elapsed_ms
        report.exceeded_budget = budget.exhausted
        if budget.skipped_stages:
            report.details["skippedStages"] = list(budget.skipped_stages)

        self.logger.info(
            "Probe complete",
            url=url,
            level=report.level.value if report.level else None,
            score=report.score,
            elapsed_ms=report.elapsed_ms,
            exceeded_budget=report.exceeded_budget
        )
        return report

    async def fetch_origin(self, target: ProbeTarget) -> FetchResult:
        """
        Mandatory fetch of the target page, not gated by the budget

        Raises:
            OriginFetchError: The page could not be retrieved
        """
        page = await self.fetcher.fetch(target.url, timeout_ms=self.origin_timeout_ms)
        if not page.ok:
            raise OriginFetchError(target.url, page.error, page.status_code)
        return page

    @abstractmethod
    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> Report:
        """Probe-specific work, may raise OriginFetchError"""
