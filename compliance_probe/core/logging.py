"""
Structured logging configuration for probe runs
"""

import json
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog


class StructuredFileRenderer:
    """Renders log events as one JSON document per line"""

    def __call__(self, logger, method_name, event_dict):
        if "timestamp" not in event_dict:
            event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

        event_dict["level"] = method_name

        return json.dumps(event_dict, default=str)


def configure_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = "logs",
    json_console: bool = False
):
    """
    Configure structlog on top of the standard logging handlers

    Args:
        log_level: Minimum level for every handler
        log_dir: Directory for rotating log files, None for console only
        json_console: Render console output as JSON instead of the dev renderer
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "stream": "ext://sys.stderr",
            "formatter": "console",
        }
    }

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "filename": str(log_path / "probes.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "formatter": "json",
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "filename": str(log_path / "errors.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "formatter": "json",
        }

    console_renderer = (
        structlog.processors.JSONRenderer()
        if json_console
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": console_renderer,
            },
            "json": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processor": StructuredFileRenderer(),
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers),
                "level": log_level,
            }
        }
    })

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
