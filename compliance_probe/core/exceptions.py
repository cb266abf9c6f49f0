"""
Exception types used inside the probe engine

None of these cross a probe boundary: BaseProbe.run converts
OriginFetchError into the fallback report.
"""

from typing import Optional


class ProbeError(Exception):
    """Base class for probe engine errors"""


class OriginFetchError(ProbeError):
    """The mandatory origin fetch failed, no analysis is possible"""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class ConfigurationError(ProbeError):
    """Invalid configuration values"""
