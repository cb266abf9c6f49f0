"""
Cookie consent banner pattern tables
"""

from compliance_probe.scanner.patterns.classifier import Category

BANNER_TEXT = Category.of("banner-text", [
    r"cookies?",
    r"consent",
    r"accepter",
    r"refuser",
    r"personnalis",
    r"privacy",
    r"confidentialité",
    r"données personnelles",
    r"rgpd|gdpr",
    r"gestion.*cookies",
    r"préférences.*cookies",
    r"cookie.*polic",
])

BANNER_SELECTORS = (
    '[class*="cookie"]',
    '[id*="cookie"]',
    '[class*="consent"]',
    '[id*="consent"]',
    '[class*="gdpr"]',
    '[id*="gdpr"]',
    '[class*="privacy"]',
    '[id*="privacy"]',
    '[role="dialog"][aria-label*="cookie" i]',
    '[role="alertdialog"]',
)

# Consent management platforms, detected from script[src]
CONSENT_LIBRARIES = (
    "cookiebot",
    "onetrust",
    "didomi",
    "axeptio",
    "tarteaucitron",
    "cookie-consent",
    "cookieconsent",
)

# Feature tables, weights in points out of 100
BANNER_FEATURES = (
    Category.of("Bouton Accepter", [r"accept|accepter|j'accepte|d'accord|\bok\b"], weight=25),
    Category.of("Bouton Refuser", [r"refus|reject|non merci|decline"], weight=35),
    Category.of("Option de personnalisation", [r"personnalis|customize|paramètr|préférences|gérer"], weight=25),
    Category.of("Lien politique cookies", [
        r"cookie.*polic",
        r"politique.*cookie",
        r"gestion.*cookie",
        r"\bcookies?\b",
        r"cookie-policy",
        r"politique-cookies",
        r"charte.*cookies",
        r"préférence.*cookies",
    ], weight=15),
)

FEATURE_ISSUES = {
    "Bouton Accepter": 'Bouton "Accepter" manquant',
    "Bouton Refuser": 'Bouton "Refuser" manquant ou difficile à trouver',
    "Option de personnalisation": "Option de personnalisation manquante",
    "Lien politique cookies": "Lien vers politique cookies manquant",
}

# Libraries whose banner is injected at runtime; their markup is not in the
# static HTML, so every feature is assumed present when they are detected
LIBRARY_OVERRIDES = {
    "tarteaucitron": {category.name: True for category in BANNER_FEATURES},
}

# Checked against anchor text and href, the other features against button labels
LINK_FEATURES = ("Lien politique cookies",)
