"""
Test the domain scope filter
"""

from compliance_probe.scanner.scope import is_same_scope


def test_relative_urls_are_in_scope():
    """Links without a scheme stay on the page's site"""
    assert is_same_scope("/mentions-legales", "www.example.com"), "Relative path should be in scope"
    assert is_same_scope("legal.html", "www.example.com"), "Bare relative file should be in scope"


def test_exact_host_and_subdomains():
    assert is_same_scope("https://example.com/a", "example.com"), "Same host should be in scope"
    assert is_same_scope("https://sub.example.com/a", "example.com"), "Subdomain should be in scope"
    assert is_same_scope("https://EXAMPLE.com/a", "example.com"), "Host comparison ignores case"


def test_foreign_hosts_are_rejected():
    assert not is_same_scope("https://evil.example/x", "example.com"), "Unrelated host must be excluded"
    assert not is_same_scope("https://notexample.com/x", "example.com"), "Suffix match must be dot-anchored"
    assert not is_same_scope("https://example.com.evil.net/x", "example.com"), "Prefix match must be excluded"


def test_www_variance_through_reverse_clause():
    """The bare domain of a www site is accepted"""
    assert is_same_scope("https://example.com/legal", "www.example.com"), "Parent host should be in scope"


def test_strict_mode_rejects_public_suffix_hosts():
    """co.uk is a parent of shop.example.co.uk but not the same site"""
    assert is_same_scope("https://co.uk/x", "shop.example.co.uk"), "Lenient mode keeps the reverse clause"
    assert not is_same_scope("https://co.uk/x", "shop.example.co.uk", strict=True), (
        "Strict mode must reject a bare public suffix"
    )
    assert is_same_scope("https://example.co.uk/x", "shop.example.co.uk", strict=True), (
        "Strict mode still accepts the registrable parent"
    )


def test_scheme_relative_urls_are_host_checked():
    assert not is_same_scope("//cdn.other.com/lib.js", "www.example.com"), "Foreign scheme-relative URL"
    assert is_same_scope("//www.example.com/legal", "www.example.com"), "Own scheme-relative URL"


def test_malformed_and_non_web_urls_are_excluded():
    assert not is_same_scope("http://[invalid/", "example.com"), "Malformed URL must be excluded"
    assert not is_same_scope("mailto:dpo@example.com", "example.com"), "mailto must be excluded"
    assert not is_same_scope("javascript:void(0)", "example.com"), "javascript must be excluded"
    assert not is_same_scope("", "example.com"), "Empty href must be excluded"
