"""
Issue and recommendation wording per compliance probe
"""

from compliance_probe.intelligence.scorer import RecommendationTable

COOKIE_BANNER = RecommendationTable(
    not_found_issue="Aucune bannière de cookies détectée",
    not_found=("Implémenter une solution de gestion des cookies conforme APDP",),
    partial=("Améliorer les options de refus et personnalisation",),
    non_conforme=("La bannière doit permettre un refus aussi simple que l'acceptation",),
)

LEGAL_NOTICES = RecommendationTable(
    not_found_issue="Aucune page de mentions légales détectée",
    not_found=(
        "Créer une page mentions légales obligatoire en France et Monaco",
        "Inclure: raison sociale, siège, SIRET, responsable, hébergeur",
    ),
    partial=("Compléter avec toutes les informations légales obligatoires",),
    non_conforme=("Mentions légales incomplètes - risque de sanctions",),
    missing_item_issue="Information manquante: {}",
    low_score_issue="Mentions légales incomplètes",
    unanalyzable_issue="Impossible d'analyser le contenu des mentions légales",
)

PRIVACY_POLICY = RecommendationTable(
    not_found_issue="Aucune politique de confidentialité détectée",
    not_found=(
        "Créer une politique de confidentialité conforme APDP",
        "La rendre facilement accessible depuis toutes les pages",
    ),
    partial=("Compléter la politique avec toutes les sections obligatoires APDP",),
    non_conforme=("Réviser la politique pour inclure tous les éléments APDP obligatoires",),
    missing_item_issue="Section manquante: {}",
    low_score_issue="Politique incomplète - sections essentielles manquantes",
    unanalyzable_issue="Impossible d'analyser le contenu de la politique",
)

USER_RIGHTS = RecommendationTable(
    not_found_issue="Aucun droit RGPD mentionné",
    not_found=(
        "Documenter tous les droits RGPD des utilisateurs",
        "Fournir un moyen simple d'exercer ces droits",
    ),
    partial=("Compléter avec tous les droits RGPD obligatoires",),
    non_conforme=(
        "Implémenter et documenter tous les droits RGPD requis",
        "Créer un processus clair pour traiter les demandes des utilisateurs",
    ),
    missing_item_issue="Droit manquant: {}",
    low_score_issue="Documentation insuffisante des droits utilisateurs",
)

# Appended by the user-rights probe when no way to exercise the rights was found
NO_RIGHTS_MECHANISM = {
    "Conforme": "Bon! Considérer un formulaire dédié pour faciliter les demandes",
    "Partiellement conforme": "Ajouter un moyen clair d'exercer les droits (formulaire, email)",
}

PWA_AUDIT = RecommendationTable(
    not_found_issue="Manifest not detected.",
    not_found=("Add a web app manifest and register a service worker",),
    partial=("Complete the manifest and make the app work offline",),
    non_conforme=(
        "Declare a manifest with name, start_url, display and a 192px icon",
        "Register a service worker to enable offline support",
    ),
)
