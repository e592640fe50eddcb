from typing import List, Sequence

from allersafe.core.allergens import KnowledgeBase
from allersafe.models import AllergenDetection
from allersafe.utils.ingredient_text import dedupe

CRITICAL_WARNING = "⚠️ CRITICAL WARNING: This product contains allergens that match your allergy profile!"
DO_NOT_CONSUME = "Do NOT consume this product. Consult your healthcare provider immediately."
CARRY_MEDICATION = "Always carry your emergency medication (EpiPen) when trying new foods."

GENERAL_CAUTION = "This product contains common allergens that may affect some individuals."
CHECK_LABELS = "Check the full ingredient list and consult with an allergist if unsure."

ALL_CLEAR = "✅ No major allergens detected based on common allergen patterns."
CROSS_CONTAMINATION = (
    "However, always read full labels as manufacturing processes may introduce cross-contamination."
)


def compose_recommendations(detections: Sequence[AllergenDetection], user_match: bool) -> List[str]:
    """Return the recommendation lines for an analysis, most urgent first."""
    if user_match:
        return [CRITICAL_WARNING, DO_NOT_CONSUME, CARRY_MEDICATION]
    if detections:
        return [GENERAL_CAUTION, CHECK_LABELS]
    return [ALL_CLEAR, CROSS_CONTAMINATION]


def collect_alternatives(
    detections: Sequence[AllergenDetection],
    knowledge_base: KnowledgeBase
) -> List[str]:
    """Safe alternatives for every allergen that matched the user's profile."""
    alternatives: List[str] = []
    for detection in detections:
        if not detection.user_allergy:
            continue
        definition = knowledge_base.get(detection.allergen)
        if definition:
            alternatives.extend(definition.alternatives)
    return dedupe(alternatives)
