"""
Legal notices probe (mentions légales, CGU)
"""

from compliance_probe.intelligence.recommendations import LEGAL_NOTICES
from compliance_probe.scanner.link_resolver import DiscoveryPatterns
from compliance_probe.scanner.patterns.legal_patterns import (
    LEGAL_LINK_TEXT,
    LEGAL_REQUIRED_INFO,
    LEGAL_URL_PATH,
)
from compliance_probe.scanner.probes.disclosure import DisclosurePageProbe


class LegalNoticesProbe(DisclosurePageProbe):
    name = "legal-notices"
    description = "Legal notice page and mandatory publisher information"

    patterns = DiscoveryPatterns(link_text=LEGAL_LINK_TEXT, url_path=LEGAL_URL_PATH)
    sections = LEGAL_REQUIRED_INFO
    recommendations = LEGAL_NOTICES
