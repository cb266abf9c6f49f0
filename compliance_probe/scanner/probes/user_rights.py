"""
User rights probe

Reads the page plus up to two linked privacy/legal pages and checks which
data-subject rights are documented and how they can be exercised.
"""

from typing import List

from compliance_probe.intelligence.recommendations import NO_RIGHTS_MECHANISM, USER_RIGHTS
from compliance_probe.intelligence.scorer import ComplianceScorer
from compliance_probe.models.probe import ProbeTarget
from compliance_probe.models.report import ComplianceReport
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.markup import Anchor, absolute_url, body_text, extract_anchors, parse_html
from compliance_probe.scanner.patterns.classifier import PatternClassifier
from compliance_probe.scanner.patterns.rights_patterns import (
    RELEVANT_PAGE_LINK,
    RIGHTS_MECHANISMS,
    USER_RIGHTS as RIGHTS_TABLE,
)
from compliance_probe.scanner.probes.base import BaseProbe
from compliance_probe.scanner.scope import is_same_scope


class UserRightsProbe(BaseProbe):
    name = "user-rights"
    description = "Documented data-subject rights and ways to exercise them"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scorer = ComplianceScorer()

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ComplianceReport:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        texts = [body_text(soup)]
        analyzed_pages = [target.url]

        for anchor in self._relevant_links(target, soup)[:self.config.max_secondary_pages]:
            if not budget.allow("secondary-page"):
                break
            url = absolute_url(target.url, anchor.href)
            if not url:
                continue
            secondary = await self.fetcher.fetch(url, timeout_ms=self.config.secondary_page_timeout_ms)
            if secondary.ok:
                texts.append(body_text(parse_html(secondary.content)))
                analyzed_pages.append(url)
            else:
                self.logger.debug("Secondary page skipped", url=url, error=secondary.error)

        combined = " ".join(texts)
        rights = PatternClassifier.classify(combined, RIGHTS_TABLE)
        mechanisms = PatternClassifier.classify(combined, RIGHTS_MECHANISMS)

        score = self.scorer.score_sections(len(rights.found), len(RIGHTS_TABLE)) + mechanisms.found_weight

        evaluation = self.scorer.evaluate(
            USER_RIGHTS,
            score=score,
            missing_items=rights.missing,
            critical=not rights.found,
        )
        if not mechanisms.found and evaluation.level.value in NO_RIGHTS_MECHANISM:
            evaluation.recommendations.append(NO_RIGHTS_MECHANISM[evaluation.level.value])

        return ComplianceReport(
            probe=self.name,
            url=target.url,
            found=bool(rights.found),
            found_items=rights.found,
            missing_items=rights.missing,
            score=evaluation.score,
            level=evaluation.level,
            issues=evaluation.issues,
            recommendations=evaluation.recommendations,
            details={
                "mechanisms": mechanisms.found,
                "analyzedPages": analyzed_pages,
            },
        )

    def _relevant_links(self, target: ProbeTarget, soup) -> List[Anchor]:
        """In-scope links whose text points at privacy or legal content"""
        relevant = [
            anchor for anchor in extract_anchors(soup)
            if is_same_scope(anchor.href, target.origin_domain, strict=self.config.strict_scope)
            and RELEVANT_PAGE_LINK.matches(anchor.text)
        ]
        return relevant[:self.config.max_relevant_links]
