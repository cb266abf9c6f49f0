"""
Legal notice (mentions légales / CGU) pattern tables
"""

from compliance_probe.scanner.patterns.classifier import Category

LEGAL_LINK_TEXT = Category.of("legal-link-text", [
    r"c\.?g\.?u\.?",            # C.G.U, CGU, cgu
    r"c\.?g\.?v\.?",
    r"mentions.*légales",
    r"legal.*notice",
    r"informations.*légales",
    r"avis.*légal",
    r"mentions\s*légales",
    r"legal\s*info",
    r"\blégal\b",
    r"\blegal\b",
    r"\bmentions\b",
    r"conditions.*utilisation",
    r"conditions.*générales",
    r"terms.*conditions",
    r"terms.*service",
    r"legal\s*terms",
])

LEGAL_URL_PATH = Category.of("legal-url-path", [
    r"/cgu$",
    r"/c\.g\.u$",
    r"cgu",
    r"cgv",
    r"c-g-u",
    r"c-g-v",
    r"c\.g\.u",
    r"c\.g\.v",
    r"mentions-legales",
    r"legal",
    r"informations-legales",
    r"avis-legal",
    r"mentions_legales",
    r"legal-notice",
    r"legal-info",
    r"conditions-utilisation",
    r"conditions-generales",
    r"terms-conditions",
    r"terms-of-service",
    r"tos\b",
])

LEGAL_REQUIRED_INFO = (
    Category.of("Raison sociale", [r"raison.*sociale", r"dénomination", r"société", r"company.*name"]),
    Category.of("Adresse du siège", [r"siège.*social", r"adresse", r"address"]),
    Category.of("Numéro SIRET/RCS", [r"siret|siren|rcs", r"registre.*commerce"]),
    Category.of("Responsable publication", [r"responsable.*publication", r"directeur.*publication"]),
    Category.of("Hébergeur", [r"hébergeur|hébergé|hosting", r"serveur"]),
    Category.of("Contact", [r"contact|email|téléphone|phone"]),
)
