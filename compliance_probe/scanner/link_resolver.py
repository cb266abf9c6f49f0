"""
Link Discovery Resolver

Locates a disclosure page that is not known in advance through an ordered
fallback chain, first success wins:

1. In-scope footer links (text, title, aria-label or href match)
2. Any in-scope link on the page
3. <loc> entries of /sitemap.xml (URL patterns only, entries carry no text)

The located page is then fetched so its text can be classified. Only the
origin page is mandatory; the sitemap and target fetches are optional
stages gated by the time budget and degrade to "not found" or
"unanalyzable" on failure.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog
from bs4 import BeautifulSoup

from compliance_probe.core.config import ProbeConfig
from compliance_probe.models.probe import ProbeTarget, Provenance
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.fetcher import ResourceFetcher
from compliance_probe.scanner.markup import (
    Anchor,
    absolute_url,
    body_text,
    extract_anchors,
    parse_html,
    sitemap_locations,
)
from compliance_probe.scanner.patterns.classifier import Category
from compliance_probe.scanner.scope import is_same_scope

logger = structlog.get_logger()

SITEMAP_ACCEPT = "application/xml, text/xml;q=0.9, */*;q=0.5"
SITEMAP_DETECTED_VIA = "Sitemap XML"


@dataclass(frozen=True)
class DiscoveryPatterns:
    """Link-text and URL-path tables for one kind of artifact"""
    link_text: Category
    url_path: Category

    def matches_anchor(self, anchor: Anchor) -> bool:
        return self.link_text.matches(anchor.combined_text) or self.url_path.matches(anchor.href)

    def matches_url(self, url: str) -> bool:
        return self.url_path.matches(url)


@dataclass
class Resolution:
    """Where the artifact was found and what its page contains"""
    found: bool = False
    href: Optional[str] = None
    target_url: Optional[str] = None
    provenance: Optional[Provenance] = None
    detected_via: Optional[str] = None
    content: Optional[str] = None
    analyzable: bool = False
    footer_links: List[Dict[str, str]] = field(default_factory=list)


class LinkDiscoveryResolver:
    """Footer → page → sitemap fallback chain"""

    def __init__(self, fetcher: ResourceFetcher, config: ProbeConfig):
        self.fetcher = fetcher
        self.config = config
        self.logger = logger.bind(component="link_resolver")

    async def resolve(
        self,
        target: ProbeTarget,
        soup: BeautifulSoup,
        patterns: DiscoveryPatterns,
        budget: TimeBudget
    ) -> Resolution:
        """
        Run the fallback chain against an already fetched origin page

        Args:
            target: Probe target
            soup: Parsed origin page
            patterns: Tables describing the artifact
            budget: Running time budget of the probe

        Returns:
            Resolution, ``found`` is False when every stage came up empty
        """
        anchors = [
            anchor for anchor in extract_anchors(soup)
            if is_same_scope(anchor.href, target.origin_domain, strict=self.config.strict_scope)
        ]

        resolution = Resolution(
            footer_links=[
                {"text": anchor.text, "href": anchor.href}
                for anchor in anchors if anchor.in_footer and anchor.text
            ][:self.config.max_footer_links_reported]
        )

        anchor = self._first_match((a for a in anchors if a.in_footer), patterns)
        provenance = Provenance.FOOTER_LINK
        if anchor is None:
            anchor = self._first_match(anchors, patterns)
            provenance = Provenance.BODY_LINK

        if anchor is not None:
            resolution.found = True
            resolution.href = anchor.href
            resolution.provenance = provenance
            resolution.detected_via = anchor.text or "URL pattern"
        else:
            sitemap_url = await self._search_sitemap(target, patterns, budget)
            if sitemap_url:
                resolution.found = True
                resolution.href = sitemap_url
                resolution.provenance = Provenance.SITEMAP
                resolution.detected_via = SITEMAP_DETECTED_VIA

        if not resolution.found:
            self.logger.info("Artifact not found", url=target.url)
            return resolution

        resolution.target_url = absolute_url(target.url, resolution.href)
        self.logger.info(
            "Artifact located",
            url=target.url,
            target_url=resolution.target_url,
            provenance=resolution.provenance.value
        )

        if resolution.target_url and budget.allow("target-fetch"):
            page = await self.fetcher.fetch(
                resolution.target_url,
                timeout_ms=self.config.target_timeout_ms
            )
            if page.ok:
                resolution.content = body_text(parse_html(page.content))
                resolution.analyzable = True
            else:
                self.logger.info("Artifact page unanalyzable", target_url=resolution.target_url, error=page.error)

        return resolution

    def _first_match(self, anchors, patterns: DiscoveryPatterns) -> Optional[Anchor]:
        for anchor in anchors:
            if patterns.matches_anchor(anchor):
                return anchor
        return None

    async def _search_sitemap(
        self,
        target: ProbeTarget,
        patterns: DiscoveryPatterns,
        budget: TimeBudget
    ) -> Optional[str]:
        if not budget.allow("sitemap"):
            return None

        sitemap = await self.fetcher.fetch(
            f"{target.origin}/sitemap.xml",
            timeout_ms=self.config.sitemap_timeout_ms,
            max_bytes=self.config.sitemap_max_bytes,
            accept=SITEMAP_ACCEPT
        )
        if not sitemap.ok:
            return None

        for location in sitemap_locations(sitemap.content, page_entries_only=True):
            if not is_same_scope(location, target.origin_domain, strict=self.config.strict_scope):
                continue
            if patterns.matches_url(location):
                return location
        return None
