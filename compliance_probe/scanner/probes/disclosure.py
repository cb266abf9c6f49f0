"""
Shared flow of the probes that locate a disclosure page and check its content

origin fetch → link discovery chain → target fetch → uniform section scoring
"""

from typing import Sequence

from compliance_probe.intelligence.scorer import ComplianceScorer, RecommendationTable
from compliance_probe.models.probe import ProbeTarget
from compliance_probe.models.report import ComplianceReport
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.link_resolver import DiscoveryPatterns, LinkDiscoveryResolver
from compliance_probe.scanner.markup import parse_html
from compliance_probe.scanner.patterns.classifier import Category, PatternClassifier
from compliance_probe.scanner.probes.base import BaseProbe


class DisclosurePageProbe(BaseProbe):
    """Subclasses provide the discovery patterns, the required sections and the wording"""

    patterns: DiscoveryPatterns
    sections: Sequence[Category] = ()
    recommendations: RecommendationTable

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.resolver = LinkDiscoveryResolver(self.fetcher, self.config)
        self.scorer = ComplianceScorer()

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ComplianceReport:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        resolution = await self.resolver.resolve(target, soup, self.patterns, budget)

        found_items = []
        missing_items = []
        score = 0
        if resolution.analyzable:
            classification = PatternClassifier.classify(resolution.content, self.sections)
            found_items = classification.found
            missing_items = classification.missing
            score = self.scorer.score_sections(len(found_items), len(self.sections))

        evaluation = self.scorer.evaluate(
            self.recommendations,
            score=score,
            found=resolution.found,
            missing_items=missing_items,
            analyzable=resolution.analyzable,
        )

        return ComplianceReport(
            probe=self.name,
            url=target.url,
            found=resolution.found,
            target_url=resolution.target_url,
            detected_via=resolution.detected_via,
            found_items=found_items,
            missing_items=missing_items,
            score=evaluation.score,
            level=evaluation.level,
            issues=evaluation.issues,
            recommendations=evaluation.recommendations,
            details={
                "provenance": resolution.provenance.value if resolution.provenance else None,
                "analyzable": resolution.analyzable,
                "footerLinks": resolution.footer_links,
            },
        )
