"""
Privacy policy pattern tables
"""

from compliance_probe.scanner.patterns.classifier import Category, MatchMode

PRIVACY_LINK_TEXT = Category.of("privacy-link-text", [
    r"politique.*confidentialit",
    r"privacy.*polic",
    r"protection.*données",
    r"données.*personnelles",
    r"rgpd|gdpr",
    r"vie.*privée",
    r"\bconfidentialit",
    r"\bprivacy\b",
    r"private.*data",
    r"personal.*data",
    r"donnée.*perso",
    r"data.*protection",
    r"charte.*confidentialit",
])

PRIVACY_URL_PATH = Category.of("privacy-url-path", [
    r"privacy",
    r"confidentialit",
    r"donnees-personnelles",
    r"politique-confidentialite",
    r"rgpd",
    r"gdpr",
    r"personal-data",
    r"protection-donnees",
    r"charte-confidentialite",
    r"vie-privee",
    r"/cookies$",               # privacy info often lives on /cookies
    r"cookie.*polic",
])

# "Collecte de données" needs a collection verb and a data noun together,
# a lone "data" is on nearly every page
PRIVACY_REQUIRED_SECTIONS = (
    Category.of("Collecte de données", [r"collecte|collect", r"données|data"], match=MatchMode.ALL),
    Category.of("Finalités du traitement", [r"finalité|purpose", r"utilisation|use"]),
    Category.of("Droits des utilisateurs", [r"droits|rights", r"accès|access", r"rectification"]),
    Category.of("Durée de conservation", [r"conservation|retention", r"durée|duration"]),
    Category.of("Sécurité des données", [r"sécurité|security", r"protection"]),
    Category.of("Contact DPD/Responsable", [r"dpd|dpo|délégué", r"responsable|contact", r"protection.*données"]),
)
