"""
Probe implementations, keyed by probe name
"""

from typing import Dict, Type

from .base import BaseProbe
from .cookie_banner import CookieBannerProbe
from .inventory import ApiSurfaceProbe, MixedContentProbe, ThirdPartyProbe
from .legal_notices import LegalNoticesProbe
from .privacy_policy import PrivacyPolicyProbe
from .pwa_audit import PwaAuditProbe
from .user_rights import UserRightsProbe

PROBES: Dict[str, Type[BaseProbe]] = {
    probe.name: probe
    for probe in (
        CookieBannerProbe,
        LegalNoticesProbe,
        PrivacyPolicyProbe,
        UserRightsProbe,
        ApiSurfaceProbe,
        ThirdPartyProbe,
        MixedContentProbe,
        PwaAuditProbe,
    )
}

__all__ = [
    "PROBES",
    "BaseProbe",
    "CookieBannerProbe",
    "LegalNoticesProbe",
    "PrivacyPolicyProbe",
    "UserRightsProbe",
    "ApiSurfaceProbe",
    "ThirdPartyProbe",
    "MixedContentProbe",
    "PwaAuditProbe",
]
