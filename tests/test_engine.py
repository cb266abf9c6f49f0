"""
Test the probe engine, the scan summary and configuration loading
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from compliance_probe.cli import scan_commands
from compliance_probe.core.config import ApplicationConfig, ProbeConfig
from compliance_probe.core.exceptions import ConfigurationError
from compliance_probe.models.report import ComplianceLevel, ComplianceReport, ResourceInventory
from compliance_probe.scanner.engine import ProbeEngine

URL = "https://www.example.com/"


@pytest.fixture
def app_config(tmp_path):
    return ApplicationConfig(config_file=tmp_path / "absent.yaml")


async def test_scan_runs_selected_probes_in_order(fetcher, clock, app_config):
    fetcher.add(URL, '<body><footer><a href="/mentions-legales">Mentions légales</a></footer></body>')
    fetcher.add(URL + "mentions-legales", "<body>Raison sociale ACME, contact</body>")

    engine = ProbeEngine(app_config, fetcher=fetcher, clock=clock)
    reports = await engine.scan(URL, ["legal-notices", "mixed-content", "cookie-banner"])

    assert [report.probe for report in reports] == ["legal-notices", "mixed-content", "cookie-banner"]
    assert isinstance(reports[1], ResourceInventory)
    assert reports[0].found


async def test_scan_defaults_to_every_probe(fetcher, clock, app_config):
    fetcher.add(URL, "<body></body>")

    engine = ProbeEngine(app_config, fetcher=fetcher, clock=clock)
    reports = await engine.scan(URL)

    assert [report.probe for report in reports] == engine.available_probes()
    assert len(reports) == 8


async def test_scan_rejects_unknown_probe(fetcher, clock, app_config):
    engine = ProbeEngine(app_config, fetcher=fetcher, clock=clock)
    with pytest.raises(ValueError):
        await engine.scan(URL, ["port-scan"])


async def test_unreachable_site_is_all_critical(fetcher, clock, app_config):
    fetcher.fail(URL, "Cannot connect to host")

    engine = ProbeEngine(app_config, fetcher=fetcher, clock=clock)
    reports = await engine.scan(URL, ["legal-notices", "privacy-policy", "third-party"])
    summary = engine.summarize(reports)

    assert all(report.level == ComplianceLevel.ERREUR_ANALYSE for report in reports)
    assert summary.critical_count == 3, "Analysis errors count as critical"
    assert summary.numeric_score == 0


def test_summary_counters():
    reports = [
        ComplianceReport(probe="cookie-banner", url=URL, score=0, level=ComplianceLevel.CRITIQUE),
        ComplianceReport(probe="legal-notices", url=URL, score=50, level=ComplianceLevel.NON_CONFORME),
        ComplianceReport(probe="privacy-policy", url=URL, score=67, level=ComplianceLevel.PARTIELLEMENT_CONFORME),
        ComplianceReport(probe="user-rights", url=URL, score=100, level=ComplianceLevel.CONFORME),
        ResourceInventory(probe="api-surface", url=URL),
    ]

    summary = ProbeEngine.summarize(reports)

    assert summary.critical_count == 1
    assert summary.warning_count == 1
    assert summary.improvement_count == 1
    assert summary.numeric_score == 54, "Mean of 0, 50, 67, 100 is 54.25, inventories carry no score"
    assert summary.probes["api-surface"] is None
    assert summary.probes["user-rights"] == "Conforme"


def test_stage_timeout_must_stay_below_budget():
    with pytest.raises(ValidationError):
        ProbeConfig(budget_ms=3000)


def test_yaml_overrides(tmp_path):
    config_file = tmp_path / "probes.yaml"
    config_file.write_text("probe:\n  budget_ms: 12000\n  strict_scope: true\nlogging:\n  log_level: debug\n")

    config = ApplicationConfig(config_file=config_file)

    assert config.probe.budget_ms == 12000
    assert config.probe.strict_scope is True
    assert config.logging.log_level == "DEBUG"
    assert config.fetcher.max_redirects == 5, "Unset values keep their defaults"


def test_keyword_overrides_win_over_yaml(tmp_path):
    config_file = tmp_path / "probes.yaml"
    config_file.write_text("probe:\n  budget_ms: 12000\n")

    config = ApplicationConfig(config_file=config_file, probe={"budget_ms": 15000})

    assert config.probe.budget_ms == 15000


def test_invalid_configuration(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("probe: [unclosed\n")
    with pytest.raises(ConfigurationError):
        ApplicationConfig(config_file=broken)

    with pytest.raises(ConfigurationError):
        ApplicationConfig(config_file=Path(tmp_path / "absent.yaml"), probe={"budget_ms": 1000})


def test_probe_override_keeps_loaded_values(tmp_path):
    config_file = tmp_path / "probes.yaml"
    config_file.write_text("probe:\n  budget_ms: 12000\n  strict_scope: true\n")
    config = ApplicationConfig(config_file=config_file)

    config.override_probe(budget_ms=6000)

    assert config.probe.budget_ms == 6000
    assert config.probe.strict_scope is True, "Values read from YAML survive the override"

    with pytest.raises(ConfigurationError):
        config.override_probe(budget_ms=1000)
    assert config.probe.budget_ms == 6000, "A rejected override leaves the settings untouched"


async def test_scan_command_uses_the_given_config(monkeypatch, capsys, app_config):
    seen = []

    class RecordingEngine:
        summarize = staticmethod(ProbeEngine.summarize)

        def __init__(self, config):
            seen.append(config)

        async def scan(self, url, probes=None):
            return [ComplianceReport(probe="legal-notices", url=url, score=100, level=ComplianceLevel.CONFORME)]

    monkeypatch.setattr(scan_commands, "ProbeEngine", RecordingEngine)
    app_config.override_probe(budget_ms=7000)

    exit_code = await scan_commands.scan_command(URL, app_config, probes=["legal-notices"])

    assert exit_code == 0
    assert seen == [app_config], "The loaded config is passed through, not reloaded"
    assert seen[0].probe.budget_ms == 7000
    output = json.loads(capsys.readouterr().out)
    assert output["summary"]["numeric_score"] == 100
