import pytest

from allersafe.services.ingredient_matcher import MATCH_CONFIDENCE, IngredientMatcher, is_related_allergy


@pytest.fixture
def matcher(knowledge_base):
    return IngredientMatcher(knowledge_base)


def test_detects_allergens_in_input_order(matcher):
    detections = matcher.detect(["wheat flour", "sugar", "almonds"])
    assert [d.allergen for d in detections] == ["wheat", "tree_nuts"]
    assert detections[0].source == "wheat flour"
    assert detections[0].keyword == "wheat"
    assert detections[1].keyword == "almond"
    assert all(d.confidence == MATCH_CONFIDENCE for d in detections)


def test_one_detection_per_allergen(matcher):
    detections = matcher.detect(["Milk", "cheese", "butter"])
    assert len(detections) == 1
    assert detections[0].allergen == "milk"
    assert detections[0].source == "milk"


def test_single_token_can_hit_several_allergens(matcher):
    detections = matcher.detect(["almond flour"])
    assert [d.allergen for d in detections] == ["tree_nuts", "wheat"]


def test_no_detections_for_safe_ingredients(matcher):
    assert matcher.detect(["sugar", "salt", "water"]) == []
    assert matcher.detect([]) == []


def test_user_allergy_flag(matcher):
    detections = matcher.detect(["wheat flour", "almonds"], user_allergies=["nuts"])
    flags = {d.allergen: d.user_allergy for d in detections}
    assert flags == {"wheat": False, "tree_nuts": True}


def test_severity_copied_from_knowledge_base(matcher):
    detections = matcher.detect(["soy sauce", "shrimp"])
    assert {d.allergen: d.severity for d in detections} == {"soy": "medium", "shellfish": "high"}


@pytest.mark.parametrize("user_allergy,allergen,expected", [
    ("nuts", "tree_nuts", True),
    ("tree_nuts", "tree_nuts", True),
    ("Dairy", "milk", True),
    ("lactose intolerance", "milk", True),
    ("gluten", "wheat", True),
    ("crustaceans", "shellfish", True),
    ("milk", "eggs", False),
    ("", "milk", False),
    ("   ", "tree_nuts", False),
])
def test_is_related_allergy(knowledge_base, user_allergy, allergen, expected):
    assert is_related_allergy(user_allergy, knowledge_base.get(allergen)) is expected
