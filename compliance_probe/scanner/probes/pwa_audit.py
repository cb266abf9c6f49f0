"""
Progressive Web App audit

Scores the web app manifest, service worker registration and the install
metadata of the page.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from compliance_probe.intelligence.recommendations import PWA_AUDIT
from compliance_probe.intelligence.scorer import ComplianceScorer, clamp_score
from compliance_probe.models.probe import ProbeTarget
from compliance_probe.models.report import ComplianceReport
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.markup import absolute_url, parse_html
from compliance_probe.scanner.probes.base import BaseProbe

MANIFEST_ACCEPT = "application/manifest+json, application/json;q=0.9, */*;q=0.8"
SERVICE_WORKER_REGISTRATION = re.compile(r"navigator\.serviceWorker\.register\(", re.IGNORECASE)
ICON_SIZE = re.compile(r"(\d+)")
MIN_ICON_SIZE = 192
OFFLINE_READY_MANIFEST_SCORE = 50


def _largest_icon(icon: Any) -> int:
    if not isinstance(icon, dict):
        return 0
    sizes = [int(match) for match in ICON_SIZE.findall(str(icon.get("sizes") or ""))]
    return max(sizes) if sizes else 0


def evaluate_manifest(manifest: Any) -> Tuple[int, List[str]]:
    """
    Score a parsed manifest

    Args:
        manifest: Decoded JSON document

    Returns:
        (score out of 100, issues)
    """
    if not isinstance(manifest, dict):
        return 0, ["Manifest is not valid JSON."]

    score = 0
    issues = []

    if manifest.get("name") or manifest.get("short_name"):
        score += 25
    else:
        issues.append("Missing name or short_name.")

    if manifest.get("start_url"):
        score += 20
    else:
        issues.append("Missing start_url.")

    if manifest.get("display"):
        score += 15
    else:
        issues.append("Missing display property.")

    icons = manifest.get("icons")
    if isinstance(icons, list) and any(_largest_icon(icon) >= MIN_ICON_SIZE for icon in icons):
        score += 20
    else:
        issues.append("No icon ≥192px declared.")

    if manifest.get("theme_color") or manifest.get("background_color"):
        score += 10
    else:
        issues.append("Missing theme_color or background_color.")

    if manifest.get("scope"):
        score += 10
    else:
        issues.append("Missing scope.")

    return clamp_score(score), issues


def detect_service_worker(soup: BeautifulSoup) -> List[str]:
    """Inline scripts registering a service worker, first 200 chars of each"""
    snippets = []
    for script in soup.find_all("script"):
        content = script.string or script.get_text()
        if content and SERVICE_WORKER_REGISTRATION.search(content):
            snippets.append(content.strip()[:200])
    return snippets


def _meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    element = soup.find("meta", attrs={"name": name})
    return element.get("content") if element else None


class PwaAuditProbe(BaseProbe):
    name = "pwa-audit"
    description = "Web app manifest, service worker and install metadata"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scorer = ComplianceScorer()

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ComplianceReport:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        manifest_link = soup.select_one('link[rel="manifest"][href]')
        manifest_url = absolute_url(target.url, manifest_link["href"]) if manifest_link else None
        if manifest_link is None:
            manifest_data, manifest_score, manifest_issues = None, 0, ["Manifest not detected."]
        else:
            manifest_data, manifest_score, manifest_issues = await self._audit_manifest(manifest_url, budget)

        snippets = detect_service_worker(soup)
        theme_color = _meta_content(soup, "theme-color")
        offline_ready = bool(snippets) and manifest_score >= OFFLINE_READY_MANIFEST_SCORE

        breakdown = {
            "manifest": manifest_score,
            "serviceWorker": 25 if snippets else 0,
            "themeColor": 10 if theme_color else 0,
            "appleTouch": 10 if soup.select_one('link[rel="apple-touch-icon"]') else 0,
            "offlineReady": 10 if offline_ready else 0,
        }
        score = clamp_score(sum(breakdown.values()))

        missing = list(manifest_issues)
        if not snippets:
            missing.append("No service worker registration found.")

        found = manifest_link is not None or bool(snippets)
        evaluation = self.scorer.evaluate(PWA_AUDIT, score=score, found=found, missing_items=missing)

        return ComplianceReport(
            probe=self.name,
            url=target.url,
            found=found,
            target_url=manifest_url,
            detected_via="link[rel=manifest]" if manifest_link else None,
            found_items=[name for name, points in breakdown.items() if points],
            missing_items=[name for name, points in breakdown.items() if not points],
            score=evaluation.score,
            level=evaluation.level,
            issues=evaluation.issues,
            recommendations=evaluation.recommendations,
            details={
                "manifest": {
                    "present": manifest_link is not None,
                    "url": manifest_url,
                    "data": manifest_data,
                    "issues": manifest_issues,
                    "valid": manifest_link is not None and not manifest_issues,
                    "score": manifest_score,
                },
                "serviceWorker": {
                    "detected": bool(snippets),
                    "snippetCount": len(snippets),
                    "samples": snippets[:3],
                },
                "offlineReady": offline_ready,
                "metadata": {
                    "themeColor": theme_color,
                    "appleMobileWebAppCapable": _meta_content(soup, "apple-mobile-web-app-capable"),
                    "appleStatusBarStyle": _meta_content(soup, "apple-mobile-web-app-status-bar-style"),
                    "viewport": _meta_content(soup, "viewport"),
                },
                "headers": {
                    "serviceWorkerAllowed": page.headers.get("service-worker-allowed"),
                    "crossOriginEmbedderPolicy": page.headers.get("cross-origin-embedder-policy"),
                },
                "scoreBreakdown": breakdown,
            },
        )

    async def _audit_manifest(
        self,
        manifest_url: Optional[str],
        budget: TimeBudget
    ) -> Tuple[Optional[Dict[str, Any]], int, List[str]]:
        """Fetch and score the manifest, (data, score, issues)"""
        if not manifest_url:
            return None, 0, ["Invalid manifest URL."]
        if not budget.allow("manifest"):
            return None, 0, ["Manifest not fetched, time budget exceeded."]

        response = await self.fetcher.fetch(
            manifest_url,
            timeout_ms=self.config.manifest_timeout_ms,
            max_bytes=self.config.manifest_max_bytes,
            accept=MANIFEST_ACCEPT
        )
        if not response.ok:
            return None, 0, ["Failed to fetch manifest."]

        try:
            data = json.loads(response.content)
        except ValueError:
            return None, 0, ["Manifest is not valid JSON."]

        score, issues = evaluate_manifest(data)
        return (data if isinstance(data, dict) else None), score, issues
