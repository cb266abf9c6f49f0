"""
HTML/XML helpers shared by the resolver, the aggregator and the probes
"""

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin, urlparse, urlsplit, urlunsplit

import structlog
from bs4 import BeautifulSoup, Tag

logger = structlog.get_logger()

FOOTER_ROLES = ("contentinfo",)
SKIPPED_SCHEMES = ("javascript:", "mailto:", "tel:", "data:", "#")
DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class Anchor:
    """An <a href> with the text fields used for link matching"""
    href: str
    text: str
    title: str
    aria_label: str
    in_footer: bool

    @property
    def combined_text(self) -> str:
        return f"{self.text} {self.title} {self.aria_label} {self.href}".lower()


def parse_html(content: str) -> BeautifulSoup:
    return BeautifulSoup(content or "", "lxml")


def parse_xml(content: str) -> Optional[BeautifulSoup]:
    """Parse an XML document, None when the parser gives up"""
    try:
        return BeautifulSoup(content or "", "xml")
    except Exception as e:
        # lxml raises its own error types for hopeless input
        logger.debug("XML parsing failed", error=str(e))
        return None


def body_text(soup: BeautifulSoup) -> str:
    """Lower-cased visible text of the body, whole document if there is none"""
    root = soup.body or soup
    return root.get_text(" ", strip=True).lower()


def in_footer(tag: Tag) -> bool:
    for parent in tag.parents:
        if not isinstance(parent, Tag):
            continue
        if parent.name == "footer":
            return True
        if parent.get("role") in FOOTER_ROLES:
            return True
        if "footer" in (parent.get("class") or []):
            return True
    return False


def extract_anchors(soup: BeautifulSoup) -> List[Anchor]:
    """All <a href> elements in document order"""
    anchors = []
    for element in soup.find_all("a", href=True):
        anchors.append(Anchor(
            href=element["href"].strip(),
            text=element.get_text(" ", strip=True).lower(),
            title=(element.get("title") or "").lower(),
            aria_label=(element.get("aria-label") or "").lower(),
            in_footer=in_footer(element),
        ))
    return anchors


def sitemap_locations(content: str, page_entries_only: bool = False) -> List[str]:
    """
    <loc> values of a sitemap or sitemap index

    Args:
        content: Raw XML
        page_entries_only: Keep only <url><loc> entries, skipping index entries
    """
    soup = parse_xml(content)
    if soup is None:
        return []

    locations = []
    for loc in soup.find_all("loc"):
        if page_entries_only and (loc.parent is None or loc.parent.name != "url"):
            continue
        value = loc.get_text(strip=True)
        if value:
            locations.append(value)
    return locations


def absolute_url(base: str, value: str) -> Optional[str]:
    """Resolve a reference against a base URL, None for unusable values"""
    if not value:
        return None
    value = value.strip()
    if value.lower().startswith(SKIPPED_SCHEMES):
        return None
    try:
        resolved = urljoin(base, value)
        parsed = urlparse(resolved)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return canonical_url(resolved)


def canonical_url(url: str) -> Optional[str]:
    """
    Normalised spelling of an absolute URL

    Scheme and host are lower-cased, the scheme's default port and the
    fragment are dropped, and an empty path becomes ``/``.

    Args:
        url: Absolute URL

    Returns:
        Canonical URL, None when the URL has no host or a malformed port
    """
    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    host = parsed.hostname
    if not scheme or not host:
        return None

    if ":" in host:
        host = f"[{host}]"
    netloc = host if port is None or port == DEFAULT_PORTS.get(scheme) else f"{host}:{port}"

    userinfo, separator, _ = parsed.netloc.rpartition("@")
    if separator:
        netloc = f"{userinfo}@{netloc}"

    return urlunsplit((scheme, netloc, parsed.path or "/", parsed.query, ""))
