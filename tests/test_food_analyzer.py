import pytest

from allersafe.core.errors import InvalidInput
from allersafe.services.food_analyzer import ANALYSIS_METHOD, DEFAULT_FOOD_NAME, FoodAnalyzer
from allersafe.services.recommendations import ALL_CLEAR, CRITICAL_WARNING, GENERAL_CAUTION
from conftest import BlockingProvider, FailingProvider, StaticProvider


@pytest.fixture
def analyzer(knowledge_base, make_enrichment):
    return FoodAnalyzer(knowledge_base, make_enrichment())


def test_wheat_and_nuts_with_nut_allergy(analyzer):
    result = analyzer.analyze(["wheat flour", "sugar", "almonds"], allergies=["nuts"])

    assert [(d.allergen, d.severity, d.user_allergy) for d in result.allergens_detected] == [
        ("wheat", "medium", False),
        ("tree_nuts", "high", True),
    ]
    assert result.safety_score == 10
    assert result.user_allergies_detected is True
    assert result.recommendations[0] == CRITICAL_WARNING
    assert "sunflower seeds" in result.alternatives
    assert result.ingredients_analyzed == ["wheat flour", "sugar", "almonds"]


def test_safe_ingredients_score_100(analyzer):
    result = analyzer.analyze(["sugar", "salt", "water"], food_name="Brine")

    assert result.food_name == "Brine"
    assert result.safety_score == 100
    assert result.allergens_detected == []
    assert result.recommendations[0] == ALL_CLEAR
    assert result.alternatives == []
    assert result.analysis_method == ANALYSIS_METHOD


def test_detections_without_profile_get_caution(analyzer):
    result = analyzer.analyze(["wheat flour"])

    assert result.safety_score == 85
    assert result.user_allergies_detected is False
    assert result.recommendations[0] == GENERAL_CAUTION
    assert result.food_name == DEFAULT_FOOD_NAME


def test_user_match_lowers_score(analyzer):
    plain = analyzer.analyze(["almonds"])
    matched = analyzer.analyze(["almonds"], allergies=["nuts"])
    assert matched.safety_score < plain.safety_score


def test_entries_are_split_and_cleaned(analyzer):
    result = analyzer.analyze(["milk, eggs; 42", "  "], barcode="123")
    assert result.ingredients_analyzed == ["milk", "eggs"]
    assert result.barcode == "123"


@pytest.mark.parametrize("ingredients", [None, "milk, eggs", [1, 2], ["milk", None]])
def test_invalid_ingredients_rejected(analyzer, ingredients):
    with pytest.raises(InvalidInput) as excinfo:
        analyzer.analyze(ingredients)
    assert excinfo.value.error_code == "INVALID_INPUT"


def test_invalid_allergies_rejected(analyzer):
    with pytest.raises(InvalidInput):
        analyzer.analyze(["milk"], allergies="milk")


def test_enrichment_is_attached_as_insights(knowledge_base, make_enrichment):
    provider = StaticProvider("Watch for hidden whey.")
    analyzer = FoodAnalyzer(knowledge_base, make_enrichment(provider))

    result = analyzer.analyze(["milk chocolate"], allergies=["milk"])

    assert result.ai_enhanced is True
    assert result.ai_insights == "Watch for hidden whey."
    assert "milk chocolate" in provider.prompts[0]


def test_enrichment_failure_leaves_result_unchanged(knowledge_base, make_enrichment):
    baseline = FoodAnalyzer(knowledge_base, make_enrichment()).analyze(["almonds"], allergies=["nuts"])
    failing = FoodAnalyzer(
        knowledge_base, make_enrichment(FailingProvider(), StaticProvider("   "))
    ).analyze(["almonds"], allergies=["nuts"])

    assert failing.ai_enhanced is False
    assert failing.ai_insights is None
    assert failing.safety_score == baseline.safety_score
    assert failing.allergens_detected == baseline.allergens_detected
    assert failing.recommendations == baseline.recommendations


def test_enrichment_timeout_does_not_block_result(knowledge_base, make_enrichment):
    provider = BlockingProvider()
    analyzer = FoodAnalyzer(knowledge_base, make_enrichment(provider, timeout=0.1))
    try:
        result = analyzer.analyze(["almonds"], allergies=["nuts"])
    finally:
        provider.release.set()

    assert result.ai_enhanced is False
    assert result.safety_score == 25


def test_repeated_analysis_is_identical(analyzer):
    ingredients = ["wheat flour", "milk powder", "almonds", "soy lecithin"]
    first = analyzer.analyze(ingredients, allergies=["nuts", "milk"])
    second = analyzer.analyze(ingredients, allergies=["nuts", "milk"])

    assert first.safety_score == second.safety_score
    assert first.allergens_detected == second.allergens_detected
    assert first.recommendations == second.recommendations
    assert first.alternatives == second.alternatives
