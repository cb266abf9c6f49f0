"""
Data models for probe inputs, intermediate results and reports
"""

from compliance_probe.models.probe import Candidate, ClassifiedItem, FetchResult, ProbeTarget, Provenance
from compliance_probe.models.report import (
    ComplianceLevel,
    ComplianceReport,
    InventoryItem,
    ResourceInventory,
    ScanSummary,
)

__all__ = [
    "Candidate",
    "ClassifiedItem",
    "FetchResult",
    "ProbeTarget",
    "Provenance",
    "ComplianceLevel",
    "ComplianceReport",
    "InventoryItem",
    "ResourceInventory",
    "ScanSummary",
]
