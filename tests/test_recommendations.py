from allersafe.models import AllergenDetection
from allersafe.services.recommendations import (
    ALL_CLEAR,
    CARRY_MEDICATION,
    CHECK_LABELS,
    CRITICAL_WARNING,
    CROSS_CONTAMINATION,
    DO_NOT_CONSUME,
    GENERAL_CAUTION,
    collect_alternatives,
    compose_recommendations,
)


def _detection(allergen, user_allergy=False):
    return AllergenDetection(
        allergen=allergen, confidence=0.9, source=allergen, severity="high",
        user_allergy=user_allergy, keyword=allergen
    )


def test_user_match_gets_critical_warning_first():
    lines = compose_recommendations([_detection("milk", user_allergy=True)], user_match=True)
    assert lines == [CRITICAL_WARNING, DO_NOT_CONSUME, CARRY_MEDICATION]


def test_detections_without_user_match_get_general_caution():
    lines = compose_recommendations([_detection("milk")], user_match=False)
    assert lines == [GENERAL_CAUTION, CHECK_LABELS]


def test_no_detections_is_all_clear():
    assert compose_recommendations([], user_match=False) == [ALL_CLEAR, CROSS_CONTAMINATION]


def test_alternatives_only_for_user_allergens(knowledge_base):
    detections = [_detection("wheat"), _detection("milk", user_allergy=True)]
    assert collect_alternatives(detections, knowledge_base) == list(knowledge_base.get("milk").alternatives)


def test_alternatives_are_deduplicated(knowledge_base):
    detections = [_detection("tree_nuts", user_allergy=True), _detection("peanuts", user_allergy=True)]
    alternatives = collect_alternatives(detections, knowledge_base)
    assert alternatives.count("sunflower seed butter") == 1
    assert alternatives.count("tahini") == 1
