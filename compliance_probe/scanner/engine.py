"""
Probe engine
Runs selected probes concurrently against one URL over a shared HTTP session
"""

import asyncio
import math
import time
from typing import Callable, List, Optional, Sequence

import structlog

from compliance_probe.core.config import ApplicationConfig
from compliance_probe.models.report import ComplianceLevel, ScanSummary
from compliance_probe.scanner.fetcher import ResourceFetcher
from compliance_probe.scanner.probes import PROBES
from compliance_probe.scanner.probes.base import Report

logger = structlog.get_logger()

CRITICAL_LEVELS = (ComplianceLevel.CRITIQUE, ComplianceLevel.ERREUR_ANALYSE)


class ProbeEngine:
    """
    Entry point for hosting layers (CLI, HTTP routes, schedulers)

    Probes share nothing but the fetcher, so they are gathered without
    coordination; each one enforces its own time budget.
    """

    def __init__(
        self,
        config: Optional[ApplicationConfig] = None,
        fetcher: Optional[ResourceFetcher] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.config = config or ApplicationConfig()
        self.fetcher = fetcher
        self.clock = clock
        self.logger = logger.bind(component="probe_engine")

    @staticmethod
    def available_probes() -> List[str]:
        return list(PROBES)

    async def scan(self, url: str, probes: Optional[Sequence[str]] = None) -> List[Report]:
        """
        Run probes against a URL

        Args:
            url: Absolute URL of the page
            probes: Probe names, all registered probes when omitted

        Returns:
            One report per probe, in the requested order
        """
        names = list(probes) if probes else self.available_probes()
        unknown = [name for name in names if name not in PROBES]
        if unknown:
            raise ValueError(f"Unknown probe(s): {', '.join(unknown)}")

        self.logger.info("Starting scan", url=url, probes=names)
        started = self.clock()

        if self.fetcher is not None:
            reports = await self._run_all(self.fetcher, url, names)
        else:
            async with ResourceFetcher(self.config.fetcher) as fetcher:
                reports = await self._run_all(fetcher, url, names)

        self.logger.info(
            "Scan complete",
            url=url,
            probes=len(reports),
            elapsed_ms=int(round((self.clock() - started) * 1000))
        )
        return reports

    async def _run_all(self, fetcher: ResourceFetcher, url: str, names: List[str]) -> List[Report]:
        probes = [PROBES[name](fetcher, self.config.probe, clock=self.clock) for name in names]
        return list(await asyncio.gather(*(probe.run(url) for probe in probes)))

    @staticmethod
    def summarize(reports: Sequence[Report]) -> ScanSummary:
        """
        Counters stored alongside a scan

        Critique and analysis errors count as critical, Non conforme as a
        warning, Partiellement conforme as an improvement. The numeric score
        is the rounded mean of the reports that carry a score.
        """
        summary = ScanSummary()
        scores = []

        for report in reports:
            summary.probes[report.probe] = report.level.value if report.level else None

            if report.level in CRITICAL_LEVELS:
                summary.critical_count += 1
            elif report.level == ComplianceLevel.NON_CONFORME:
                summary.warning_count += 1
            elif report.level == ComplianceLevel.PARTIELLEMENT_CONFORME:
                summary.improvement_count += 1

            if report.score is not None:
                scores.append(report.score)

        if scores:
            summary.numeric_score = int(math.floor(sum(scores) / len(scores) + 0.5))
        return summary
