"""
Test compliance scoring and level mapping
"""

from compliance_probe.intelligence import ComplianceScorer, level_for_score
from compliance_probe.intelligence.recommendations import COOKIE_BANNER, LEGAL_NOTICES
from compliance_probe.models.report import ComplianceLevel
from compliance_probe.scanner.patterns.cookie_patterns import BANNER_FEATURES


def test_level_boundaries():
    assert level_for_score(100) == ComplianceLevel.CONFORME
    assert level_for_score(85) == ComplianceLevel.CONFORME, "85 is the lowest Conforme score"
    assert level_for_score(84) == ComplianceLevel.PARTIELLEMENT_CONFORME
    assert level_for_score(60) == ComplianceLevel.PARTIELLEMENT_CONFORME, "60 is the lowest partial score"
    assert level_for_score(59) == ComplianceLevel.NON_CONFORME
    assert level_for_score(0) == ComplianceLevel.NON_CONFORME


def test_uniform_sections_round_half_up():
    assert ComplianceScorer.score_sections(6, 6) == 100
    assert ComplianceScorer.score_sections(5, 6) == 83, "83.33 rounds down"
    assert ComplianceScorer.score_sections(1, 6) == 17, "16.67 rounds up"
    assert ComplianceScorer.score_sections(1, 8) == 13, "12.5 rounds half up"
    assert ComplianceScorer.score_sections(0, 6) == 0
    assert ComplianceScorer.score_sections(3, 0) == 0, "Empty table scores zero"


def test_weighted_features():
    features = {"Bouton Accepter": True, "Bouton Refuser": True, "Option de personnalisation": False}
    assert ComplianceScorer.score_features(features, BANNER_FEATURES) == 60, "25 + 35"

    everything = {category.name: True for category in BANNER_FEATURES}
    assert ComplianceScorer.score_features(everything, BANNER_FEATURES) == 100


def test_scores_are_clamped():
    scorer = ComplianceScorer()
    assert scorer.evaluate(LEGAL_NOTICES, score=130).score == 100, "Upper clamp"
    assert scorer.evaluate(LEGAL_NOTICES, score=-5).score == 0, "Lower clamp"


def test_not_found_overrides_score():
    scorer = ComplianceScorer()
    evaluation = scorer.evaluate(LEGAL_NOTICES, score=90, found=False)

    assert evaluation.level == ComplianceLevel.CRITIQUE, "Missing artifact is critical"
    assert evaluation.issues == ["Aucune page de mentions légales détectée"]
    assert 1 <= len(evaluation.recommendations) <= 2


def test_origin_error_overrides_everything():
    evaluation = ComplianceScorer().evaluate(LEGAL_NOTICES, score=90, origin_error="Timeout after 5000ms")
    assert evaluation.level == ComplianceLevel.ERREUR_ANALYSE
    assert evaluation.score == 0, "Analysis errors score zero"


def test_one_issue_per_missing_item():
    evaluation = ComplianceScorer().evaluate(
        LEGAL_NOTICES,
        score=67,
        missing_items=["Hébergeur", "Responsable publication"],
    )
    assert evaluation.level == ComplianceLevel.PARTIELLEMENT_CONFORME
    assert evaluation.issues == [
        "Information manquante: Hébergeur",
        "Information manquante: Responsable publication",
    ]
    assert evaluation.recommendations == ["Compléter avec toutes les informations légales obligatoires"]


def test_low_score_adds_summary_issue():
    evaluation = ComplianceScorer().evaluate(COOKIE_BANNER, score=25, missing_items=["Bouton Refuser"])
    assert evaluation.level == ComplianceLevel.NON_CONFORME
    assert evaluation.issues == ["Bouton Refuser"], "Cookie wording has no summary issue"
    assert evaluation.recommendations == ["La bannière doit permettre un refus aussi simple que l'acceptation"]


def test_same_input_same_output():
    scorer = ComplianceScorer()
    first = scorer.evaluate(LEGAL_NOTICES, score=50, missing_items=["Contact"])
    second = scorer.evaluate(LEGAL_NOTICES, score=50, missing_items=["Contact"])
    assert first == second, "Scoring is deterministic"
