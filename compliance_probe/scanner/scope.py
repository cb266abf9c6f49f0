"""
Domain scope filter

Decides whether a link found on a page belongs to the same site as the
page itself. Artifact-discovery probes only follow in-scope links.
"""

from urllib.parse import urlparse

from compliance_probe.scanner.domains import is_public_suffix


def is_same_scope(candidate_url: str, origin_domain: str, strict: bool = False) -> bool:
    """
    Check a candidate URL against the origin hostname

    Relative URLs are always in scope. An absolute URL is in scope when its
    host equals the origin, is a subdomain of it, or the origin is a
    subdomain of the host (www / non-www variance). All suffix checks are
    dot-anchored. With ``strict`` the reverse case refuses hosts that are a
    bare public suffix, so ``shop.example.co.uk`` does not admit ``co.uk``.

    Malformed URLs and non-web schemes are excluded.
    """
    if not candidate_url:
        return False

    try:
        parsed = urlparse(candidate_url.strip())
        hostname = parsed.hostname
    except ValueError:
        return False

    if not parsed.scheme and not parsed.netloc:
        return True

    if parsed.scheme and parsed.scheme.lower() not in ("http", "https"):
        return False

    if not hostname:
        return False

    host = hostname.lower().rstrip(".")
    origin = origin_domain.lower().rstrip(".")

    if host == origin or host.endswith("." + origin):
        return True

    if origin.endswith("." + host):
        if strict and is_public_suffix(host):
            return False
        return True

    return False
