"""
Registrable-domain resolution backed by the public suffix list
"""

from typing import Optional
from urllib.parse import urlparse

import tldextract

# Bundled suffix-list snapshot only, no network fetch at runtime
_extractor = tldextract.TLDExtract(suffix_list_urls=())


def hostname_of(value: str) -> Optional[str]:
    """Hostname of a URL, or the value itself when it is a bare host"""
    if "://" in value or value.startswith("//"):
        try:
            host = urlparse(value).hostname
        except ValueError:
            return None
        return host.lower() if host else None
    host = value.strip().lower().rstrip(".")
    return host or None


def registrable_domain(value: str) -> Optional[str]:
    """
    Effective TLD + 1 for a URL or hostname

    Falls back to the hostname for IPs and hosts without a known suffix.
    """
    host = hostname_of(value)
    if not host:
        return None

    extracted = _extractor(host)
    if extracted.domain and extracted.suffix:
        return f"{extracted.domain}.{extracted.suffix}"
    return host


def is_public_suffix(host: str) -> bool:
    """True when the host is a bare public suffix such as ``co.uk``"""
    extracted = _extractor(host.lower())
    return bool(extracted.suffix) and not extracted.domain
