"""
User rights (RGPD) pattern tables
"""

from compliance_probe.scanner.patterns.classifier import Category

USER_RIGHTS = (
    Category.of("Droit d'accès", [r"droit.*accès|access.*right", r"consulter.*données"]),
    Category.of("Droit de rectification", [r"rectification|modifier|corriger"]),
    Category.of("Droit d'effacement", [r"effacement|suppression|delete|droit.*oubli"]),
    Category.of("Droit d'opposition", [r"opposition|opposer", r"refuser.*traitement"]),
    Category.of("Droit à la portabilité", [r"portabilité|export.*données"]),
    Category.of("Droit de limitation", [r"limitation.*traitement"]),
)

# Ways to exercise the rights, each adds a bonus on top of the section score
RIGHTS_MECHANISMS = (
    Category.of("Formulaire de contact", [r"formulaire|form", r"contact"], weight=5),
    Category.of("Email dédié", [r"@.*\.(com|fr|net|org)", r"email|e-mail|courriel"], weight=5),
    Category.of("Espace utilisateur", [r"compte|account", r"espace.*client", r"mon.*profil"], weight=5),
)

# Anchor text worth following to collect more disclosure text
RELEVANT_PAGE_LINK = Category.of("rights-page-link", [
    r"privacy|confidentialit|données|legal|mention|rgpd|gdpr",
])
