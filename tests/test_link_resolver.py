"""
Test the footer → page → sitemap discovery chain
"""

from compliance_probe.models.probe import ProbeTarget, Provenance
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.link_resolver import DiscoveryPatterns, LinkDiscoveryResolver
from compliance_probe.scanner.markup import parse_html
from compliance_probe.scanner.patterns.legal_patterns import LEGAL_LINK_TEXT, LEGAL_URL_PATH

URL = "https://www.example.com/"
LEGAL = DiscoveryPatterns(link_text=LEGAL_LINK_TEXT, url_path=LEGAL_URL_PATH)


async def _resolve(fetcher, probe_config, clock, html):
    resolver = LinkDiscoveryResolver(fetcher, probe_config)
    budget = TimeBudget(probe_config.budget_ms, clock=clock).start()
    return await resolver.resolve(ProbeTarget.from_url(URL), parse_html(html), LEGAL, budget), budget


async def test_footer_link_wins_over_body_link(fetcher, probe_config, clock):
    """A footer match is preferred even when a body link comes first"""
    html = """
    <html><body>
      <a href="/a-propos/legal-body">Informations légales</a>
      <footer><a href="/mentions-legales">Mentions légales</a></footer>
    </body></html>
    """
    fetcher.add(URL + "mentions-legales", "<body>Raison sociale ACME</body>")

    resolution, _ = await _resolve(fetcher, probe_config, clock, html)

    assert resolution.found
    assert resolution.provenance == Provenance.FOOTER_LINK
    assert resolution.target_url == "https://www.example.com/mentions-legales", "Target URL is absolute"
    assert resolution.detected_via == "mentions légales"
    assert resolution.analyzable
    assert "raison sociale" in resolution.content
    assert {"text": "mentions légales", "href": "/mentions-legales"} in resolution.footer_links


async def test_body_link_when_footer_has_none(fetcher, probe_config, clock):
    html = '<body><nav><a href="/cgu">CGU</a></nav><footer><a href="/blog">Blog</a></footer></body>'
    fetcher.add(URL + "cgu", "<body>conditions</body>")

    resolution, _ = await _resolve(fetcher, probe_config, clock, html)

    assert resolution.provenance == Provenance.BODY_LINK
    assert resolution.target_url == "https://www.example.com/cgu"


async def test_url_pattern_match_without_text(fetcher, probe_config, clock):
    html = '<body><footer><a href="/legal-notice"><img src="/icon.png"></a></footer></body>'

    resolution, _ = await _resolve(fetcher, probe_config, clock, html)

    assert resolution.found, "href alone should match the URL table"
    assert resolution.detected_via == "URL pattern"
    assert not resolution.analyzable, "Target page 404 leaves the content unanalyzable"


async def test_out_of_scope_links_are_ignored(fetcher, probe_config, clock):
    html = '<body><footer><a href="https://evil.example/mentions-legales">Mentions légales</a></footer></body>'

    resolution, _ = await _resolve(fetcher, probe_config, clock, html)

    assert not resolution.found, "Foreign legal page must not be followed"
    assert resolution.footer_links == [], "Foreign links are not reported"


async def test_sitemap_fallback(fetcher, probe_config, clock):
    """No matching link, the sitemap lists /mentions-legales"""
    fetcher.add(URL + "sitemap.xml", """<?xml version="1.0" encoding="UTF-8"?>
    <urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">
      <url><loc>https://www.example.com/produits</loc></url>
      <url><loc>https://www.example.com/mentions-legales</loc></url>
    </urlset>""")
    fetcher.add(URL + "mentions-legales", "<body>Hébergeur: OVH</body>")

    resolution, _ = await _resolve(fetcher, probe_config, clock, "<body><p>Accueil</p></body>")

    assert resolution.found
    assert resolution.provenance == Provenance.SITEMAP
    assert resolution.detected_via == "Sitemap XML"
    assert resolution.target_url == "https://www.example.com/mentions-legales"
    assert "hébergeur" in resolution.content
    assert fetcher.calls == [URL + "sitemap.xml", URL + "mentions-legales"], "Sitemap then target"


async def test_nothing_found(fetcher, probe_config, clock):
    resolution, _ = await _resolve(fetcher, probe_config, clock, "<body><a href='/blog'>Blog</a></body>")

    assert not resolution.found
    assert resolution.target_url is None
    assert fetcher.calls == [URL + "sitemap.xml"], "Only the sitemap stage ran"


async def test_exceeded_budget_skips_optional_stages(fetcher, probe_config, clock):
    resolver = LinkDiscoveryResolver(fetcher, probe_config)
    budget = TimeBudget(probe_config.budget_ms, clock=clock).start()
    clock.advance(probe_config.budget_ms + 1)

    resolution = await resolver.resolve(
        ProbeTarget.from_url(URL),
        parse_html('<footer><a href="/mentions-legales">Mentions légales</a></footer>'),
        LEGAL,
        budget,
    )

    assert resolution.found, "Link matching needs no network"
    assert not resolution.analyzable, "Target fetch is skipped"
    assert fetcher.calls == []
    assert budget.skipped_stages == ["target-fetch"]
