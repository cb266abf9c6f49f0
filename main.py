"""
Main application entry point
Runs compliance probes against a URL from the command line
"""

import asyncio
import argparse
import sys
from pathlib import Path

import structlog

from compliance_probe.cli.scan_commands import console, list_probes_command, scan_command
from compliance_probe.core.config import ApplicationConfig
from compliance_probe.core.exceptions import ConfigurationError
from compliance_probe.core.logging import configure_logging
from compliance_probe.scanner.probes import PROBES

logger = structlog.get_logger()


def parse_arguments(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="Compliance probe engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py scan https://example.com                     Run every probe
  python main.py scan https://example.com --probe legal-notices --pretty
  python main.py scan https://example.com --budget-ms 6000    Tighter time budget
  python main.py list-probes                                  Show available probes
        """
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: config/default.yaml)"
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Run probes against a URL")
    scan_parser.add_argument("url", help="Absolute URL of the page to scan")
    scan_parser.add_argument(
        "--probe",
        action="append",
        choices=sorted(PROBES),
        metavar="NAME",
        help="Probe to run, repeatable (default: all)"
    )
    scan_parser.add_argument(
        "--budget-ms",
        type=int,
        default=None,
        help="Wall-clock budget per probe in milliseconds"
    )
    scan_parser.add_argument(
        "--pretty",
        action="store_true",
        help="Indent the JSON output"
    )

    subparsers.add_parser("list-probes", help="List available probes")

    return parser.parse_args(argv)


async def run_cli_command(args, config: ApplicationConfig):
    """Execute CLI commands"""
    if args.command == "scan":
        return await scan_command(
            args.url,
            config,
            probes=args.probe,
            pretty=args.pretty
        )
    elif args.command == "list-probes":
        return list_probes_command()

    return None


def main(argv=None) -> int:
    args = parse_arguments(argv)

    try:
        config = ApplicationConfig(config_file=args.config)
        if getattr(args, "budget_ms", None):
            config.override_probe(budget_ms=args.budget_ms)
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        return 2

    configure_logging(
        log_level=args.log_level.upper() if args.log_level else config.logging.log_level,
        log_dir=config.logging.log_dir,
        json_console=config.logging.json_console
    )

    return asyncio.run(run_cli_command(args, config)) or 0


if __name__ == "__main__":
    sys.exit(main())
