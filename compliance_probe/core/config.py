"""
Configuration Management
Probe budgets, fetch limits and logging settings, overridable from
environment variables and an optional YAML file
"""

from pathlib import Path
from typing import Any, Dict, Optional

import structlog
import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from compliance_probe.core.exceptions import ConfigurationError

logger = structlog.get_logger()

DEFAULT_CONFIG_FILE = Path("config/default.yaml")


class FetcherConfig(BaseSettings):
    """HTTP client settings shared by every probe"""

    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )
    accept_language: str = Field("fr-FR,fr;q=0.9,en-US;q=0.8,en;q=0.7")

    # Timeouts in milliseconds
    default_timeout_ms: int = Field(8000)
    max_redirects: int = Field(5)

    # Response bodies above this are truncated
    max_body_bytes: int = Field(1024 * 1024)
    verify_ssl: bool = Field(True)

    @field_validator("default_timeout_ms", "max_body_bytes", mode="after")
    @classmethod
    def ensure_positive(cls, v):
        if v <= 0:
            raise ValueError("must be positive")
        return v

    model_config = {
        "env_prefix": "FETCH_",
        "env_file": ".env",
        "extra": "ignore"
    }


class ProbeConfig(BaseSettings):
    """Time budget, fan-out caps and per-stage timeouts"""

    # Wall-clock ceiling for optional stages, started at probe entry
    budget_ms: int = Field(9000)

    # Mandatory origin fetch, governed only by its own timeout
    origin_timeout_ms: int = Field(5000)
    inventory_origin_timeout_ms: int = Field(8000)

    # Optional stages
    sitemap_timeout_ms: int = Field(3000)
    inventory_sitemap_timeout_ms: int = Field(4000)
    target_timeout_ms: int = Field(4000)
    secondary_page_timeout_ms: int = Field(3000)
    robots_timeout_ms: int = Field(3000)
    manifest_timeout_ms: int = Field(4000)

    # Size caps for auxiliary documents
    sitemap_max_bytes: int = Field(512 * 1024)
    manifest_max_bytes: int = Field(200 * 1024)

    # Fan-out caps
    max_sitemaps: int = Field(3)
    max_secondary_pages: int = Field(2)
    max_relevant_links: int = Field(3)
    max_inventory_items: int = Field(100)
    max_items_per_category: int = Field(25)
    max_top_vendors: int = Field(15)
    max_footer_links_reported: int = Field(10)

    # Reject reverse-containment matches on bare public suffixes
    strict_scope: bool = Field(False)

    @model_validator(mode="after")
    def ensure_stage_timeouts_below_budget(self):
        """Optional stage timeouts must stay strictly under the budget"""
        stage_timeouts = {
            "sitemap_timeout_ms": self.sitemap_timeout_ms,
            "inventory_sitemap_timeout_ms": self.inventory_sitemap_timeout_ms,
            "target_timeout_ms": self.target_timeout_ms,
            "secondary_page_timeout_ms": self.secondary_page_timeout_ms,
            "robots_timeout_ms": self.robots_timeout_ms,
            "manifest_timeout_ms": self.manifest_timeout_ms,
        }
        for name, value in stage_timeouts.items():
            if value >= self.budget_ms:
                raise ValueError(
                    f"{name} ({value}ms) must be smaller than budget_ms ({self.budget_ms}ms)"
                )
        return self

    model_config = {
        "env_prefix": "PROBE_",
        "env_file": ".env",
        "extra": "ignore"
    }


class LoggingConfig(BaseSettings):
    """Logging destinations"""

    log_level: str = Field("INFO")
    log_dir: Optional[str] = Field("logs")
    json_console: bool = Field(False)

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v):
        levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in levels:
            raise ValueError(f"Invalid log level. Choose from: {sorted(levels)}")
        return v.upper()

    model_config = {
        "env_prefix": "LOG_",
        "env_file": ".env",
        "extra": "ignore"
    }


class ApplicationConfig:
    """
    Main configuration class that combines all config sections

    Values from the YAML file (sections ``fetcher``, ``probe``, ``logging``)
    are passed as init values, so they override environment variables.
    """

    def __init__(self, config_file: Optional[Path] = None, **overrides: Dict[str, Any]):
        self.config_file = config_file or DEFAULT_CONFIG_FILE
        custom = self._load_custom_config()

        try:
            self.fetcher = FetcherConfig(**{**custom.get("fetcher", {}), **overrides.get("fetcher", {})})
            self.probe = ProbeConfig(**{**custom.get("probe", {}), **overrides.get("probe", {})})
            self.logging = LoggingConfig(**{**custom.get("logging", {}), **overrides.get("logging", {})})
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def override_probe(self, **values: Any):
        """
        Replace probe settings, keeping every other loaded value

        Raises:
            ConfigurationError: If the resulting settings are invalid
        """
        try:
            self.probe = ProbeConfig(**{**self.probe.model_dump(), **values})
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    def _load_custom_config(self) -> Dict[str, Any]:
        """Load user-defined configuration from the YAML file"""
        if not self.config_file.exists():
            return {}

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_file}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{self.config_file} must contain a mapping")

        logger.debug("Loaded custom configuration", config_file=str(self.config_file))
        return data
