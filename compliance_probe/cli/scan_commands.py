"""
Scan commands for the command-line runner
Prints probe reports as JSON and a readable summary table
"""

import json
import sys
from typing import List, Optional, Sequence

import structlog
from rich.console import Console
from rich.table import Table

from compliance_probe.core.config import ApplicationConfig
from compliance_probe.models.report import ComplianceLevel, ScanSummary
from compliance_probe.scanner.engine import ProbeEngine
from compliance_probe.scanner.probes import PROBES
from compliance_probe.scanner.probes.base import Report

logger = structlog.get_logger()

# Tables go to stderr so stdout stays valid JSON
console = Console(stderr=True)

LEVEL_STYLES = {
    ComplianceLevel.CONFORME: "green",
    ComplianceLevel.PARTIELLEMENT_CONFORME: "yellow",
    ComplianceLevel.NON_CONFORME: "red",
    ComplianceLevel.CRITIQUE: "bold red",
    ComplianceLevel.ERREUR_ANALYSE: "magenta",
}


def render_summary(reports: Sequence[Report], summary: ScanSummary) -> Table:
    """One row per probe plus the persistence counters in the caption"""
    table = Table(title="Scan summary")
    table.add_column("Probe", style="cyan")
    table.add_column("Level")
    table.add_column("Score", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Elapsed", justify="right")
    table.add_column("Budget")

    for report in reports:
        if report.level:
            level = f"[{LEVEL_STYLES[report.level]}]{report.level.value}[/]"
        else:
            level = "-"

        if hasattr(report, "total_count"):
            items = str(report.total_count)
        else:
            items = f"{len(report.found_items)}/{len(report.found_items) + len(report.missing_items)}"

        table.add_row(
            report.probe,
            level,
            "-" if report.score is None else str(report.score),
            items,
            f"{report.elapsed_ms} ms",
            "[red]exceeded[/red]" if report.exceeded_budget else "ok",
        )

    table.caption = (
        f"critical={summary.critical_count} warning={summary.warning_count} "
        f"improvement={summary.improvement_count} score={summary.numeric_score}"
    )
    return table


async def scan_command(
    url: str,
    config: ApplicationConfig,
    probes: Optional[List[str]] = None,
    pretty: bool = False
) -> int:
    """
    Run probes against a URL and print the reports

    Args:
        url: Page to analyse
        config: Loaded configuration, command-line overrides applied
        probes: Probe names, every probe when empty
        pretty: Indent the JSON output

    Returns:
        Exit code, 1 when any probe ended in an analysis error
    """
    engine = ProbeEngine(config)
    reports = await engine.scan(url, probes)
    summary = engine.summarize(reports)

    output = {
        "url": url,
        "reports": [report.to_dict() for report in reports],
        "summary": summary.model_dump(),
    }
    sys.stdout.write(json.dumps(output, indent=2 if pretty else None, ensure_ascii=False))
    sys.stdout.write("\n")

    console.print(render_summary(reports, summary))

    if any(report.level == ComplianceLevel.ERREUR_ANALYSE for report in reports):
        return 1
    return 0


def list_probes_command() -> int:
    table = Table(title="Available probes")
    table.add_column("Name", style="cyan")
    table.add_column("Output")
    table.add_column("Description")

    for name, probe in PROBES.items():
        table.add_row(name, probe.report_class.__name__, probe.description)

    console.print(table)
    return 0
