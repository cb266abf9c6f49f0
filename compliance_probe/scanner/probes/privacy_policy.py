"""
Privacy policy probe
"""

from compliance_probe.intelligence.recommendations import PRIVACY_POLICY
from compliance_probe.scanner.link_resolver import DiscoveryPatterns
from compliance_probe.scanner.patterns.privacy_patterns import (
    PRIVACY_LINK_TEXT,
    PRIVACY_REQUIRED_SECTIONS,
    PRIVACY_URL_PATH,
)
from compliance_probe.scanner.probes.disclosure import DisclosurePageProbe


class PrivacyPolicyProbe(DisclosurePageProbe):
    name = "privacy-policy"
    description = "Privacy policy page and its required sections"

    patterns = DiscoveryPatterns(link_text=PRIVACY_LINK_TEXT, url_path=PRIVACY_URL_PATH)
    sections = PRIVACY_REQUIRED_SECTIONS
    recommendations = PRIVACY_POLICY
