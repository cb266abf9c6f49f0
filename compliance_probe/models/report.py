"""
Report models returned by probes

These are the only objects that leave the probe engine. Storage and
rendering layers read them by field name, so the serialised (camelCase)
names are a stable contract.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ComplianceLevel(str, Enum):
    """Discrete compliance tiers"""
    CONFORME = "Conforme"
    PARTIELLEMENT_CONFORME = "Partiellement conforme"
    NON_CONFORME = "Non conforme"
    CRITIQUE = "Critique"
    ERREUR_ANALYSE = "Erreur d'analyse"


class _ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ComplianceReport(_ReportModel):
    """Outcome of a compliance probe"""

    probe: str
    url: str
    timestamp: str = Field(default_factory=utc_timestamp)
    found: bool = False
    target_url: Optional[str] = None
    detected_via: Optional[str] = None
    found_items: List[str] = Field(default_factory=list)
    missing_items: List[str] = Field(default_factory=list)
    score: int = Field(0, ge=0, le=100)
    level: ComplianceLevel = ComplianceLevel.NON_CONFORME
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    elapsed_ms: int = 0
    exceeded_budget: bool = False
    error: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def analysis_error(cls, probe: str, url: str, error: str, elapsed_ms: int = 0) -> "ComplianceReport":
        """Fallback report for a failed origin fetch"""
        return cls(
            probe=probe,
            url=url,
            found=False,
            score=0,
            level=ComplianceLevel.ERREUR_ANALYSE,
            error=error,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class InventoryItem(_ReportModel):
    """One deduplicated resource reference"""

    url: str
    sources: List[str] = Field(default_factory=list)
    type: Optional[str] = None
    element: Optional[str] = None
    hostname: Optional[str] = None
    registrable: Optional[str] = None
    category: Optional[str] = None
    category_label: Optional[str] = None
    rel: Optional[str] = None
    directives: Optional[List[str]] = None


class ResourceInventory(_ReportModel):
    """Outcome of a discovery probe"""

    probe: str
    url: str
    timestamp: str = Field(default_factory=utc_timestamp)
    items: List[InventoryItem] = Field(default_factory=list)
    total_count: int = 0
    truncated: bool = False
    elapsed_ms: int = 0
    exceeded_budget: bool = False
    error: Optional[str] = None
    level: Optional[ComplianceLevel] = None
    score: Optional[int] = Field(None, ge=0, le=100)
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def analysis_error(cls, probe: str, url: str, error: str, elapsed_ms: int = 0) -> "ResourceInventory":
        """Fallback inventory for a failed origin fetch"""
        return cls(
            probe=probe,
            url=url,
            error=error,
            level=ComplianceLevel.ERREUR_ANALYSE,
            score=0,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(by_alias=True, mode="json", exclude={"items"})
        data["items"] = [
            item.model_dump(by_alias=True, mode="json", exclude_none=True)
            for item in self.items
        ]
        return data


class ScanSummary(BaseModel):
    """Per-scan counters stored by the persistence layer"""

    critical_count: int = 0
    warning_count: int = 0
    improvement_count: int = 0
    numeric_score: int = Field(0, ge=0, le=100)
    probes: Dict[str, Optional[str]] = Field(default_factory=dict)
