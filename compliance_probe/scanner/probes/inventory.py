"""
Resource inventory probes: exposed endpoints, third-party vendors, mixed content
"""

from collections import OrderedDict
from typing import Dict, List

from compliance_probe.models.probe import ProbeTarget
from compliance_probe.models.report import InventoryItem, ResourceInventory
from compliance_probe.scanner.aggregator import ResourceDiscoveryAggregator
from compliance_probe.scanner.budget import TimeBudget
from compliance_probe.scanner.domains import registrable_domain
from compliance_probe.scanner.markup import parse_html
from compliance_probe.scanner.probes.base import BaseProbe

MAX_VENDOR_HOSTNAMES = 5


class InventoryProbe(BaseProbe):
    report_class = ResourceInventory

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.aggregator = ResourceDiscoveryAggregator(self.fetcher, self.config)

    @property
    def origin_timeout_ms(self) -> int:
        return self.config.inventory_origin_timeout_ms


class ApiSurfaceProbe(InventoryProbe):
    name = "api-surface"
    description = "API-like endpoints referenced by the page, robots.txt and sitemaps"

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ResourceInventory:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        discovery = await self.aggregator.discover_endpoints(target, soup, page, budget)

        return ResourceInventory(
            probe=self.name,
            url=target.url,
            items=discovery.items,
            total_count=discovery.total_count,
            truncated=discovery.truncated,
            details={"hints": discovery.hints},
        )


class ThirdPartyProbe(InventoryProbe):
    name = "third-party"
    description = "Resources loaded from other registrable domains, grouped by vendor category"

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ResourceInventory:
        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        resources = self.aggregator.third_party_resources(soup, target.url)
        cap = self.config.max_inventory_items

        return ResourceInventory(
            probe=self.name,
            url=target.url,
            items=resources[:cap],
            total_count=len(resources),
            truncated=len(resources) > cap,
            details={
                "registrableDomain": registrable_domain(target.url),
                "categories": self._group_by_category(resources),
                "topVendors": self._top_vendors(resources),
                "headers": {
                    "contentSecurityPolicy": page.headers.get("content-security-policy"),
                    "permissionsPolicy": page.headers.get("permissions-policy"),
                },
            },
        )

    def _group_by_category(self, resources: List[InventoryItem]) -> Dict[str, dict]:
        groups: Dict[str, dict] = OrderedDict()
        for resource in resources:
            group = groups.setdefault(resource.category, {
                "label": resource.category_label,
                "count": 0,
                "items": [],
            })
            group["count"] += 1
            if len(group["items"]) < self.config.max_items_per_category:
                group["items"].append({
                    "url": resource.url,
                    "type": resource.type,
                    "hostname": resource.hostname,
                })
        return groups

    def _top_vendors(self, resources: List[InventoryItem]) -> List[dict]:
        vendors: Dict[str, dict] = OrderedDict()
        for resource in resources:
            vendor = vendors.setdefault(resource.registrable, {"count": 0, "hostnames": []})
            vendor["count"] += 1
            if resource.hostname not in vendor["hostnames"]:
                vendor["hostnames"].append(resource.hostname)

        # Stable sort keeps first-seen order among equal counts
        ranked = sorted(vendors.items(), key=lambda entry: entry[1]["count"], reverse=True)
        return [
            {
                "registrable": registrable,
                "count": vendor["count"],
                "hostnames": vendor["hostnames"][:MAX_VENDOR_HOSTNAMES],
            }
            for registrable, vendor in ranked[:self.config.max_top_vendors]
        ]


class MixedContentProbe(InventoryProbe):
    name = "mixed-content"
    description = "Explicit http:// subresources on an https page"

    async def analyze(self, target: ProbeTarget, budget: TimeBudget) -> ResourceInventory:
        if target.scheme != "https":
            self.logger.info("Mixed content check skipped for non-https page", url=target.url)
            return ResourceInventory(
                probe=self.name,
                url=target.url,
                details={
                    "secureContext": False,
                    "skipped": "Mixed content analysis applies only to HTTPS pages.",
                },
            )

        page = await self.fetch_origin(target)
        soup = parse_html(page.content)

        insecure, totals = self.aggregator.mixed_content_resources(soup)
        cap = self.config.max_inventory_items

        return ResourceInventory(
            probe=self.name,
            url=target.url,
            items=insecure[:cap],
            total_count=len(insecure),
            truncated=len(insecure) > cap,
            details={
                "secureContext": not insecure,
                "totals": totals,
                "responseHeaders": {
                    "contentType": page.headers.get("content-type"),
                    "contentLength": page.headers.get("content-length"),
                },
            },
        )
