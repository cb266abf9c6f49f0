"""
Compliance Scoring

Two scoring modes, one level mapping:
- Weighted features: each detected feature adds its weight (cookie banner, PWA)
- Uniform sections: found / total scaled to 100, rounded half up
  (legal notices, privacy policy, user rights)

Levels derive from the score alone, except for two overrides: a failed
origin fetch is an analysis error, an artifact that was never found is
critical whatever the score says.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from compliance_probe.models.report import ComplianceLevel
from compliance_probe.scanner.patterns.classifier import Category

logger = structlog.get_logger()

CONFORME_THRESHOLD = 85
PARTIAL_THRESHOLD = 60


def clamp_score(score: float) -> int:
    return int(max(0, min(100, score)))


def level_for_score(score: float) -> ComplianceLevel:
    """≥85 Conforme, 60-84 Partiellement conforme, below Non conforme"""
    if score >= CONFORME_THRESHOLD:
        return ComplianceLevel.CONFORME
    if score >= PARTIAL_THRESHOLD:
        return ComplianceLevel.PARTIELLEMENT_CONFORME
    return ComplianceLevel.NON_CONFORME


@dataclass(frozen=True)
class RecommendationTable:
    """Issue and recommendation wording for one probe"""
    not_found_issue: str
    not_found: Tuple[str, ...]
    partial: Tuple[str, ...]
    non_conforme: Tuple[str, ...]
    conforme: Tuple[str, ...] = ()
    missing_item_issue: str = "{}"
    low_score_issue: Optional[str] = None
    unanalyzable_issue: Optional[str] = None

    def for_level(self, level: ComplianceLevel) -> List[str]:
        if level == ComplianceLevel.CRITIQUE:
            return list(self.not_found)
        if level == ComplianceLevel.CONFORME:
            return list(self.conforme)
        if level == ComplianceLevel.PARTIELLEMENT_CONFORME:
            return list(self.partial)
        if level == ComplianceLevel.NON_CONFORME:
            return list(self.non_conforme)
        return []


@dataclass
class Evaluation:
    score: int = 0
    level: ComplianceLevel = ComplianceLevel.NON_CONFORME
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


class ComplianceScorer:
    """Turns classification results into score, level, issues and recommendations"""

    def __init__(self):
        self.logger = logger.bind(component="compliance_scorer")

    @staticmethod
    def score_features(features: Dict[str, bool], categories: Sequence[Category]) -> int:
        """
        Sum the weights of the present features

        Args:
            features: Feature name -> detected
            categories: Feature table carrying the weights

        Returns:
            Score clamped to [0, 100]
        """
        total = sum(category.weight for category in categories if features.get(category.name))
        return clamp_score(total)

    @staticmethod
    def score_sections(found: int, total: int) -> int:
        """found * 100 / total, rounded half up"""
        if total <= 0:
            return 0
        return clamp_score(math.floor(found * 100 / total + 0.5))

    def evaluate(
        self,
        table: RecommendationTable,
        score: float = 0,
        found: bool = True,
        missing_items: Iterable[str] = (),
        analyzable: bool = True,
        origin_error: Optional[str] = None,
        issue_for: Optional[Callable[[str], str]] = None,
        critical: bool = False
    ) -> Evaluation:
        """
        Apply level mapping, overrides and wording

        Args:
            table: Probe wording
            score: Raw score, clamped here
            found: Whether the artifact was located at all
            missing_items: Items to report one issue each for
            analyzable: False when the artifact page could not be read
            origin_error: Set when the mandatory fetch failed
            issue_for: Per-item issue wording, defaults to the table template
            critical: Force Critique even though the artifact was found

        Returns:
            Evaluation
        """
        if origin_error is not None:
            return Evaluation(score=0, level=ComplianceLevel.ERREUR_ANALYSE)

        score = clamp_score(score)

        if not found or critical:
            return Evaluation(
                score=score,
                level=ComplianceLevel.CRITIQUE,
                issues=[table.not_found_issue],
                recommendations=table.for_level(ComplianceLevel.CRITIQUE),
            )

        level = level_for_score(score)
        describe = issue_for or table.missing_item_issue.format

        issues = []
        if not analyzable and table.unanalyzable_issue:
            issues.append(table.unanalyzable_issue)
        issues.extend(describe(item) for item in missing_items)
        if level == ComplianceLevel.NON_CONFORME and table.low_score_issue:
            issues.append(table.low_score_issue)

        return Evaluation(
            score=score,
            level=level,
            issues=issues,
            recommendations=table.for_level(level),
        )
