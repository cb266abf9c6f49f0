"""
Resource Discovery Aggregator

Unions candidate URLs from several discovery methods, deduplicates them by
canonical absolute URL while keeping every provenance, and caps the output.

Endpoint sources:
- API-like <a href> and <link href> (footer-link / body-link)
- <meta content> values that look like endpoints
- HTTP Link response header
- robots.txt Allow/Disallow rules, and up to three of its Sitemap: lines
- sitemap <loc> entries
- <link rel="manifest">

Also hosts the element scans behind the third-party and mixed-content
inventories.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import structlog
from bs4 import BeautifulSoup

from compliance_probe.core.config import ProbeConfig
from compliance_probe.models.probe import Candidate, FetchResult, ProbeTarget, Provenance
from compliance_probe.models.report import InventoryItem
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.domains import hostname_of, registrable_domain
from compliance_probe.scanner.fetcher import ResourceFetcher
from compliance_probe.scanner.markup import absolute_url, canonical_url, in_footer, parse_xml
from compliance_probe.scanner.patterns.classifier import PatternClassifier
from compliance_probe.scanner.patterns.resource_patterns import (
    API_LIKE,
    CATEGORY_LABELS,
    MIXED_CONTENT_SELECTORS,
    THIRD_PARTY_SELECTORS,
    UNCATEGORIZED,
    VENDOR_CATEGORIES,
)

logger = structlog.get_logger()

LINK_HEADER_ENTRY = re.compile(r"<([^>]*)>([^<]*)")
LINK_REL_PARAM = re.compile(r';\s*rel\s*=\s*"?([^";,]+)"?', re.IGNORECASE)
ROBOTS_ACCEPT = "text/plain"
SITEMAP_ACCEPT = "application/xml, text/xml"


def looks_like_api(value: str) -> bool:
    return API_LIKE.matches(value or "")


def parse_link_header(header: Optional[str], base_url: str) -> List[Candidate]:
    """
    API-like targets of an HTTP Link header

    Each ``<target>`` owns the parameters up to the next one, in any order.

    Args:
        header: Raw header value
        base_url: Base for relative targets

    Returns:
        Candidates with the rel value, when present, in ``raw_text``
    """
    if not header:
        return []

    candidates = []
    for match in LINK_HEADER_ENTRY.finditer(header):
        url = absolute_url(base_url, match.group(1))
        if not url or not looks_like_api(url):
            continue
        rel = LINK_REL_PARAM.search(match.group(2))
        candidates.append(Candidate(
            url=url,
            provenance=Provenance.LINK_HEADER,
            raw_text=rel.group(1).strip() if rel else None,
        ))
    return candidates


def parse_robots(content: Optional[str], origin: str) -> Tuple[List[Candidate], List[str]]:
    """
    API-like Allow/Disallow paths and Sitemap: URLs of a robots.txt

    Args:
        content: robots.txt body
        origin: scheme://host of the site

    Returns:
        (rule candidates, sitemap URLs)
    """
    if not content:
        return [], []

    rules = []
    sitemaps = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        directive, _, value = line.partition(":")
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "sitemap":
            url = absolute_url(origin, value)
            if url:
                sitemaps.append(url)
        elif directive in ("allow", "disallow"):
            url = absolute_url(origin, value) if value and looks_like_api(value) else None
            if url:
                rules.append(Candidate(url=url, provenance=Provenance.ROBOTS_RULE, raw_text=directive))

    return rules, sitemaps


def parse_sitemap_endpoints(content: Optional[str], base_url: str) -> List[Candidate]:
    """API-like <loc> entries of a sitemap or sitemap index"""
    soup = parse_xml(content) if content else None
    if soup is None:
        return []

    candidates = []
    for loc in soup.find_all("loc"):
        value = loc.get_text(strip=True)
        if value and looks_like_api(value):
            candidates.append(Candidate(url=absolute_url(base_url, value) or value, provenance=Provenance.SITEMAP))
    return candidates


def extract_html_endpoints(soup: BeautifulSoup, base_url: str) -> List[Candidate]:
    """API-like anchors, <link> targets and <meta content> values"""
    candidates = []

    for element in soup.find_all(["a", "link"], href=True):
        url = absolute_url(base_url, element["href"])
        if not url or not looks_like_api(url):
            continue
        provenance = Provenance.FOOTER_LINK if in_footer(element) else Provenance.BODY_LINK
        candidates.append(Candidate(url=url, provenance=provenance))

    for element in soup.find_all("meta", content=True):
        content = element["content"].strip()
        if content and looks_like_api(content):
            candidates.append(Candidate(
                url=absolute_url(base_url, content) or content,
                provenance=Provenance.META_TAG,
            ))

    return candidates


def extract_candidates(value: Optional[str]) -> List[str]:
    """URLs of a src or srcset value; srcset descriptors are dropped"""
    if not value:
        return []
    if "," in value:
        return [entry.strip().split(" ")[0] for entry in value.split(",") if entry.strip()]
    return [value.strip()]


def is_explicit_http(candidate: str) -> bool:
    """Only literal http:// references count, scheme-relative ones inherit https"""
    return candidate.lower().startswith("http://")


def vendor_category(url: str, registrable: Optional[str]) -> str:
    """Taxonomy category of a resource, tried on the URL then its registrable domain"""
    category = PatternClassifier.first_match(url, VENDOR_CATEGORIES)
    if category is None and registrable:
        category = PatternClassifier.first_match(registrable, VENDOR_CATEGORIES)
    return category.name if category else UNCATEGORIZED


@dataclass
class InventoryAccumulator:
    """Dedupes candidates by canonical URL and unions their provenances"""
    entries: Dict[str, Set[str]] = field(default_factory=dict)
    rels: Dict[str, str] = field(default_factory=dict)
    directives: Dict[str, Set[str]] = field(default_factory=dict)

    def add(self, candidate: Candidate) -> bool:
        """
        Args:
            candidate: Discovered URL

        Returns:
            True if new, False if duplicate
        """
        if not candidate.url:
            return False

        url = canonical_url(candidate.url) or candidate.url
        source = candidate.provenance.value
        if candidate.provenance == Provenance.LINK_HEADER and candidate.raw_text:
            self.rels.setdefault(url, candidate.raw_text)
        elif candidate.provenance == Provenance.ROBOTS_RULE and candidate.raw_text:
            self.directives.setdefault(url, set()).add(candidate.raw_text)

        if url in self.entries:
            self.entries[url].add(source)
            return False

        self.entries[url] = {source}
        return True

    def extend(self, candidates: List[Candidate]):
        for candidate in candidates:
            self.add(candidate)

    def __len__(self) -> int:
        return len(self.entries)

    def build(self, cap: int) -> Tuple[List[InventoryItem], bool]:
        """Items in discovery order, sources sorted, and whether the cap cut any"""
        items = [
            InventoryItem(
                url=url,
                sources=sorted(sources),
                rel=self.rels.get(url),
                directives=sorted(self.directives[url]) if url in self.directives else None,
            )
            for url, sources in self.entries.items()
        ]
        return items[:cap], len(items) > cap


@dataclass
class EndpointDiscovery:
    items: List[InventoryItem]
    total_count: int
    truncated: bool
    hints: Dict[str, object]


class ResourceDiscoveryAggregator:
    """Runs the endpoint discovery methods in a fixed order"""

    def __init__(self, fetcher: ResourceFetcher, config: ProbeConfig):
        self.fetcher = fetcher
        self.config = config
        self.logger = logger.bind(component="discovery_aggregator")

    async def discover_endpoints(
        self,
        target: ProbeTarget,
        soup: BeautifulSoup,
        origin_page: FetchResult,
        budget: TimeBudget
    ) -> EndpointDiscovery:
        """
        Collect API-like endpoints referenced by a page and its site metadata

        Args:
            target: Probe target
            soup: Parsed origin page
            origin_page: Origin fetch, for its Link header
            budget: Running time budget of the probe

        Returns:
            EndpointDiscovery with capped, deduplicated items
        """
        accumulator = InventoryAccumulator()

        html_endpoints = extract_html_endpoints(soup, target.origin)
        accumulator.extend(html_endpoints)

        link_header = origin_page.headers.get("link")
        accumulator.extend(parse_link_header(link_header, target.origin))

        robots_scanned = False
        sitemap_urls: List[str] = []
        if budget.allow("robots"):
            robots = await self.fetcher.fetch(
                f"{target.origin}/robots.txt",
                timeout_ms=self.config.robots_timeout_ms,
                accept=ROBOTS_ACCEPT,
                treat_error_status_as_data=True
            )
            if robots.ok and (robots.status_code or 0) < 500:
                robots_scanned = bool(robots.content)
                rules, sitemap_urls = parse_robots(robots.content, target.origin)
                accumulator.extend(rules)
                sitemap_urls = sitemap_urls[:self.config.max_sitemaps]

        sitemaps_checked = 0
        for sitemap_url in sitemap_urls:
            if not budget.allow("sitemap"):
                break
            sitemaps_checked += 1
            sitemap = await self.fetcher.fetch(
                sitemap_url,
                timeout_ms=self.config.inventory_sitemap_timeout_ms,
                max_bytes=self.config.sitemap_max_bytes,
                accept=SITEMAP_ACCEPT,
                treat_error_status_as_data=True
            )
            if sitemap.ok and (sitemap.status_code or 0) < 500:
                accumulator.extend(parse_sitemap_endpoints(sitemap.content, target.origin))

        manifest = soup.select_one('link[rel="manifest"][href]')
        if manifest is not None:
            manifest_url = absolute_url(target.origin, manifest["href"])
            if manifest_url and looks_like_api(manifest_url):
                accumulator.add(Candidate(url=manifest_url, provenance=Provenance.MANIFEST_LINK))

        items, truncated = accumulator.build(self.config.max_inventory_items)
        self.logger.info(
            "Endpoint discovery complete",
            url=target.url,
            endpoints=len(accumulator),
            truncated=truncated
        )

        return EndpointDiscovery(
            items=items,
            total_count=len(accumulator),
            truncated=truncated,
            hints={
                "linkHeader": bool(link_header),
                "robotsScanned": robots_scanned,
                "sitemapsChecked": sitemaps_checked,
                "htmlHints": len(html_endpoints),
            },
        )

    def third_party_resources(self, soup: BeautifulSoup, page_url: str) -> List[InventoryItem]:
        """
        Resources served from another registrable domain than the page

        Keyed by ``type:url``, so one URL used as script and as preload
        appears twice.
        """
        page_domain = registrable_domain(page_url)
        if not page_domain:
            return []

        resources: Dict[str, InventoryItem] = {}
        for selector, attribute, resource_type in THIRD_PARTY_SELECTORS:
            for element in soup.select(selector):
                raw = element.get(attribute)
                if not raw or raw.strip().lower().startswith("data:"):
                    continue

                url = absolute_url(page_url, raw)
                if not url:
                    continue

                registrable = registrable_domain(url)
                if not registrable or registrable == page_domain:
                    continue

                key = f"{resource_type}:{url}"
                if key in resources:
                    continue

                category = vendor_category(url, registrable)
                resources[key] = InventoryItem(
                    url=url,
                    type=resource_type,
                    element=selector.split("[")[0],
                    hostname=hostname_of(url),
                    registrable=registrable,
                    category=category,
                    category_label=CATEGORY_LABELS[category],
                )

        return list(resources.values())

    def mixed_content_resources(self, soup: BeautifulSoup) -> Tuple[List[InventoryItem], Dict[str, int]]:
        """
        Explicit http:// subresources and per-type reference totals

        Returns:
            (insecure references in document order, totals per resource type)
        """
        totals = {
            "script": 0, "stylesheet": 0, "image": 0, "media": 0,
            "iframe": 0, "object": 0, "embed": 0, "form": 0,
        }
        insecure = []

        for selector, attribute, resource_type in MIXED_CONTENT_SELECTORS:
            base_type = resource_type.replace("Set", "")
            element_name = selector.split("[")[0]
            for element in soup.select(selector):
                candidates = extract_candidates(element.get(attribute))

                if resource_type.endswith("Set"):
                    totals[base_type] += len(candidates)
                else:
                    totals[base_type] += 1

                for candidate in candidates:
                    if candidate and is_explicit_http(candidate):
                        insecure.append(InventoryItem(url=candidate, type=base_type, element=element_name))

        return insecure, totals
