import time
from datetime import datetime, timezone
from typing import Any, List, Optional

from allersafe.core.allergens import KnowledgeBase, get_knowledge_base
from allersafe.core.errors import InvalidInput
from allersafe.core.logging_config import get_logger
from allersafe.models import AnalysisResult
from allersafe.services.enrichment import EnrichmentService, build_analysis_prompt, enrichment_service
from allersafe.services.ingredient_matcher import IngredientMatcher
from allersafe.services.recommendations import collect_alternatives, compose_recommendations
from allersafe.services.safety_scorer import has_user_match, score_detections
from allersafe.utils.ingredient_text import clean_ingredient_list

ANALYSIS_METHOD = "keyword_pattern_matching"
DEFAULT_FOOD_NAME = "Unknown Food"

logger = get_logger(__name__)


def _require_string_list(value: Any, field: str, required: bool) -> List[str]:
    if value is None:
        if required:
            raise InvalidInput("INVALID_INPUT", f"{field} array is required")
        return []
    if not isinstance(value, list):
        raise InvalidInput("INVALID_INPUT", f"{field} must be a list of strings")
    if any(not isinstance(item, str) for item in value):
        raise InvalidInput("INVALID_INPUT", f"{field} must contain only strings")
    return list(value)


class FoodAnalyzer:
    def __init__(self, knowledge_base: KnowledgeBase, enrichment: EnrichmentService):
        self.knowledge_base = knowledge_base
        self.enrichment = enrichment
        self.matcher = IngredientMatcher(knowledge_base)

    def analyze(
        self,
        ingredients: Any,
        food_name: Optional[str] = None,
        allergies: Any = None,
        barcode: Optional[str] = None
    ) -> AnalysisResult:
        """Check an ingredient list against the knowledge base and a user's allergies.

        Args:
            ingredients: Ingredient strings; each entry may hold several
                separated ingredients.
            food_name: Display name of the food.
            allergies: The user's allergy names, free text.
            barcode: Barcode the ingredients came from, echoed back.

        Returns:
            AnalysisResult with detections, safety score and recommendations.
            AI insights are attached only when enrichment finished in time.

        Raises:
            InvalidInput: ingredients missing or not a list of strings, or
                allergies not a list of strings.
        """
        raw_ingredients = _require_string_list(ingredients, "Ingredients", required=True)
        user_allergies = _require_string_list(allergies, "Allergies", required=False)

        start = time.time()
        tokens = clean_ingredient_list(raw_ingredients)

        # Enrichment runs in the background while the deterministic result is built.
        pending = self.enrichment.submit(build_analysis_prompt(tokens, user_allergies))

        detections = self.matcher.detect(tokens, user_allergies)
        safety_score = score_detections(detections)
        user_match = has_user_match(detections)
        recommendations = compose_recommendations(detections, user_match)
        alternatives = collect_alternatives(detections, self.knowledge_base)

        enrichment = self.enrichment.collect(pending)

        result = AnalysisResult(
            food_name=food_name or DEFAULT_FOOD_NAME,
            barcode=barcode,
            allergens_detected=detections,
            ingredients_analyzed=tokens,
            safety_score=safety_score,
            recommendations=recommendations,
            alternatives=alternatives,
            user_allergies_detected=user_match,
            ai_enhanced=enrichment is not None,
            ai_insights=enrichment.text if enrichment else None,
            analysis_method=ANALYSIS_METHOD,
            analyzed_at=datetime.now(timezone.utc).isoformat()
        )

        logger.info(
            f"Food analysis completed: food_name={result.food_name!r} "
            f"allergens={len(detections)} safety_score={safety_score} "
            f"user_match={user_match} ai_enhanced={result.ai_enhanced} "
            f"({time.time() - start:.2f}s)"
        )
        return result


food_analyzer = FoodAnalyzer(get_knowledge_base(), enrichment_service)
