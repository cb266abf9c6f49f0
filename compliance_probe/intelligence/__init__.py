"""
Scoring of compliance probe results
"""

from .scorer import ComplianceScorer, Evaluation, RecommendationTable, level_for_score

__all__ = [
    "ComplianceScorer",
    "Evaluation",
    "RecommendationTable",
    "level_for_score",
]
