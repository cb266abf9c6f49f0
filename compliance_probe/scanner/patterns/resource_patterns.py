"""
Resource, endpoint and vendor pattern tables
"""

from compliance_probe.scanner.patterns.classifier import Category

API_LIKE = Category.of("api-like", [
    r"/api/",
    r"wp-json",
    r"graphql",
    r"\.json(\?|$)",
    r"\.xml(\?|$)",
    r"\.well-known/",
])

# Vendor taxonomy, checked in order against the resource URL then its
# registrable domain; anything unmatched lands in "uncategorized"
VENDOR_CATEGORIES = (
    Category.of("analytics", [
        r"google-analytics\.com", r"googletagmanager\.com", r"segment\.com",
        r"mixpanel\.com", r"matomo", r"hotjar\.com",
    ]),
    Category.of("ads", [
        r"doubleclick\.net", r"googlesyndication\.com", r"adservice\.google\.com",
        r"taboola\.com", r"outbrain\.com", r"adnxs\.com",
    ]),
    Category.of("marketing", [
        r"hubspot\.com", r"marketo\.com", r"pardot\.com", r"salesforce\.com", r"mailchimp\.com",
    ]),
    Category.of("social", [
        r"facebook\.com", r"facebook\.net", r"twitter\.com", r"linkedin\.com",
        r"instagram\.com", r"tiktokcdn\.com",
    ]),
    Category.of("performance", [
        r"cdn\.", r"cloudflare\.com", r"akamaihd\.net", r"fastly\.net",
        r"stackpathcdn\.com", r"cloudfront\.net",
    ]),
    Category.of("security", [
        r"sentry\.io", r"datadoghq\.com", r"newrelic\.com", r"logrocket\.com", r"bugsnag\.com",
    ]),
)

UNCATEGORIZED = "uncategorized"

CATEGORY_LABELS = {
    "analytics": "Analytics & Tracking",
    "ads": "Advertising",
    "marketing": "Marketing Automation",
    "social": "Social & Widgets",
    "performance": "Performance & CDN",
    "security": "Security & Tag Managers",
    UNCATEGORIZED: "Uncategorized",
}

# (selector, attribute, resource type)
THIRD_PARTY_SELECTORS = (
    ("script[src]", "src", "script"),
    ('link[rel="stylesheet"]', "href", "stylesheet"),
    ('link[rel="preload"][as="style"]', "href", "stylesheet"),
    ('link[rel="preload"][as="script"]', "href", "script"),
    ('link[rel="preconnect"]', "href", "preconnect"),
    ('link[rel="dns-prefetch"]', "href", "dnsPrefetch"),
    ("iframe[src]", "src", "iframe"),
    ("img[src]", "src", "image"),
    ('script[type="application/ld+json"][src]', "src", "metadata"),
)

MIXED_CONTENT_SELECTORS = (
    ("script[src]", "src", "script"),
    ('link[rel="stylesheet"]', "href", "stylesheet"),
    ('link[rel="preload"][as="style"]', "href", "stylesheet"),
    ("img[src]", "src", "image"),
    ("img[srcset]", "srcset", "imageSet"),
    ("source[src]", "src", "media"),
    ("source[srcset]", "srcset", "mediaSet"),
    ("video[src]", "src", "media"),
    ("audio[src]", "src", "media"),
    ("iframe[src]", "src", "iframe"),
    ("object[data]", "data", "object"),
    ("embed[src]", "src", "embed"),
    ("form[action]", "action", "form"),
)
