"""
Cookie consent banner probe

Looks for a consent management library among the page scripts, falls back
to banner-like elements carrying consent wording, then scores the banner
features found in button labels and links.
"""

from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from compliance_probe.intelligence.recommendations import COOKIE_BANNER
from compliance_probe.intelligence.scorer import ComplianceScorer
from compliance_probe.models.probe import ProbeTarget
from compliance_probe.models.report import ComplianceReport
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.markup import parse_html
from compliance_probe.scanner.patterns.cookie_patterns import (
    BANNER_FEATURES,
    BANNER_SELECTORS,
    BANNER_TEXT,
    CONSENT_LIBRARIES,
    FEATURE_ISSUES,
    LIBRARY_OVERRIDES,
    LINK_FEATURES,
)
from compliance_probe.scanner.probes.base import BaseProbe

MAX_BANNER_ELEMENTS = 5


def detect_library(soup: BeautifulSoup) -> Optional[str]:
    """First known consent library referenced by a script[src]"""
    sources = " ".join(script["src"] for script in soup.find_all("script", src=True)).lower()
    for library in CONSENT_LIBRARIES:
        if library in sources:
            return library
    return None


def detect_custom_banner(soup: BeautifulSoup) -> List[Dict[str, str]]:
    """Elements of the first matching selector whose text reads like a consent banner"""
    for selector in BANNER_SELECTORS:
        elements = []
        for element in soup.select(selector):
            text = element.get_text(" ", strip=True).lower()
            if BANNER_TEXT.matches(text):
                elements.append({"selector": selector, "text": text[:150]})
        if elements:
            return elements
    return []


def detect_features(soup: BeautifulSoup) -> Dict[str, bool]:
    buttons = " ".join(
        element.get_text(" ", strip=True).lower()
        for element in soup.select('button, a, [role="button"]')
    )
    links = " ".join(
        f"{anchor.get_text(' ', strip=True).lower()} {anchor['href']}"
        for anchor in soup.find_all("a", href=True)
    )

    features = {}
    for category in BANNER_FEATURES:
        text = links if category.name in LINK_FEATURES else buttons
        features[category.name] = category.matches(text)
    return features


class CookieBannerProbe(BaseProbe):
    name = "cookie-banner"
    description = "Cookie consent banner presence and refusal options"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scorer = ComplianceScorer()

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ComplianceReport:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        banner_type, library, elements = self._detect_banner(soup)
        found = banner_type is not None

        features = {category.name: False for category in BANNER_FEATURES}
        if found:
            features = detect_features(soup)
            override = LIBRARY_OVERRIDES.get(library)
            if override:
                self.logger.debug("Library override applied", library=library)
                features.update(override)

        found_items = [name for name, present in features.items() if present]
        missing_items = [name for name, present in features.items() if not present]

        evaluation = self.scorer.evaluate(
            COOKIE_BANNER,
            score=self.scorer.score_features(features, BANNER_FEATURES) if found else 0,
            found=found,
            missing_items=missing_items,
            issue_for=FEATURE_ISSUES.get,
        )

        return ComplianceReport(
            probe=self.name,
            url=target.url,
            found=found,
            detected_via=library or (elements[0]["selector"] if elements else None),
            found_items=found_items,
            missing_items=missing_items,
            score=evaluation.score,
            level=evaluation.level,
            issues=evaluation.issues,
            recommendations=evaluation.recommendations,
            details={
                "bannerType": banner_type,
                "detectedLibrary": library,
                "bannerElements": elements[:MAX_BANNER_ELEMENTS],
                "features": features,
            },
        )

    def _detect_banner(self, soup: BeautifulSoup) -> Tuple[Optional[str], Optional[str], List[Dict[str, str]]]:
        library = detect_library(soup)
        if library:
            return "library", library, []

        elements = detect_custom_banner(soup)
        if elements:
            return "custom", None, elements

        return None, None, []
