"""
Test the pattern classifier and its tables
"""

from compliance_probe.scanner.patterns import Category, MatchMode, PatternClassifier
from compliance_probe.scanner.patterns.legal_patterns import LEGAL_LINK_TEXT, LEGAL_REQUIRED_INFO
from compliance_probe.scanner.patterns.privacy_patterns import PRIVACY_REQUIRED_SECTIONS


def test_or_category_needs_one_pattern():
    category = Category.of("contact", [r"email", r"téléphone"])
    assert category.matches("Notre EMAIL: info@example.com"), "Matching is case-insensitive"
    assert not category.matches("adresse postale"), "No pattern should match"


def test_and_category_needs_every_pattern():
    """Data collection needs a collection verb and a data noun together"""
    collection = PRIVACY_REQUIRED_SECTIONS[0]
    assert collection.match == MatchMode.ALL
    assert not collection.matches("nous collectons vos informations"), "Verb alone is not enough"
    assert not collection.matches("vos données sont chiffrées"), "Noun alone is not enough"
    assert collection.matches("la collecte des données personnelles"), "Both patterns present"


def test_classify_keeps_table_order():
    text = "hébergeur: ovh. contact: contact@example.com. raison sociale: acme sas"
    result = PatternClassifier.classify(text, LEGAL_REQUIRED_INFO)

    assert result.found == ["Raison sociale", "Hébergeur", "Contact"], "Found items follow the table order"
    assert result.missing == ["Adresse du siège", "Numéro SIRET/RCS", "Responsable publication"]
    assert len(result.items) == len(LEGAL_REQUIRED_INFO), "One item per category"


def test_found_weight_sums_matched_categories():
    table = (
        Category.of("a", [r"alpha"], weight=25),
        Category.of("b", [r"beta"], weight=35),
        Category.of("c", [r"gamma"], weight=15),
    )
    result = PatternClassifier.classify("alpha gamma", table)
    assert result.found_weight == 40, "Only matched weights count"


def test_link_text_helpers():
    assert LEGAL_LINK_TEXT.matches("mentions légales"), "Link text table matches French wording"
    assert LEGAL_LINK_TEXT.matches("CGU"), "Link text table matches the acronym"
    assert PatternClassifier.matches_any("terms of service", [LEGAL_LINK_TEXT]), "matches_any over a table"
    assert PatternClassifier.first_match("rien", [LEGAL_LINK_TEXT]) is None, "No match gives None"


def test_empty_text_never_matches():
    assert not Category.of("x", [r".*"]).matches(""), "Empty text matches nothing"
