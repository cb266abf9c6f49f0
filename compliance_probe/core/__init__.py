"""
Core infrastructure: configuration, logging and exceptions
"""

from compliance_probe.core.config import ApplicationConfig, FetcherConfig, LoggingConfig, ProbeConfig
from compliance_probe.core.exceptions import ConfigurationError, OriginFetchError, ProbeError
from compliance_probe.core.logging import configure_logging

__all__ = [
    "ApplicationConfig",
    "FetcherConfig",
    "LoggingConfig",
    "ProbeConfig",
    "ConfigurationError",
    "OriginFetchError",
    "ProbeError",
    "configure_logging",
]
