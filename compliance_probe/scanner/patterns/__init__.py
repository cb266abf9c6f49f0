"""
Pattern tables and the classifier that interprets them

Tables are module-level constants compiled once at import.
"""

from .classifier import Category, Classification, MatchMode, PatternClassifier

__all__ = [
    "Category",
    "Classification",
    "MatchMode",
    "PatternClassifier",
]
