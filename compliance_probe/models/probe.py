"""
Ephemeral types passed between the probe stages
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlparse


class Provenance(str, Enum):
    """How a candidate URL was discovered"""
    FOOTER_LINK = "footer-link"
    BODY_LINK = "body-link"
    SITEMAP = "sitemap"
    ROBOTS_RULE = "robots-rule"
    META_TAG = "meta-tag"
    LINK_HEADER = "link-header"
    MANIFEST_LINK = "manifest-link"


@dataclass(frozen=True)
class ProbeTarget:
    """The page a probe runs against"""
    url: str
    origin_domain: str

    @classmethod
    def from_url(cls, url: str) -> "ProbeTarget":
        """Build a target from an absolute URL (scheme and host required)"""
        parsed = urlparse(url)
        if not parsed.scheme or not parsed.hostname:
            raise ValueError(f"Absolute URL required, got {url!r}")
        return cls(url=url, origin_domain=parsed.hostname.lower())

    @property
    def scheme(self) -> str:
        return urlparse(self.url).scheme.lower()

    @property
    def origin(self) -> str:
        """scheme://host[:port] of the target"""
        parsed = urlparse(self.url)
        return f"{parsed.scheme}://{parsed.netloc}"


@dataclass
class FetchResult:
    """
    Outcome of one network call

    Failures are carried in ``error`` instead of being raised.
    """
    url: str
    content: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    status_code: Optional[int] = None
    error: Optional[str] = None
    elapsed_ms: int = 0
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


@dataclass
class Candidate:
    """A URL found by one discovery method"""
    url: str
    provenance: Provenance
    raw_text: Optional[str] = None


@dataclass(frozen=True)
class ClassifiedItem:
    """Result of evaluating one category against a text"""
    category: str
    matched: bool
    weight: float = 0.0
