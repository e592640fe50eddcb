import copy
import time
from typing import Any, Dict, List, Sequence

from allersafe.core.allergens import KnowledgeBase, get_knowledge_base
from allersafe.core.errors import InvalidInput
from allersafe.core.guidance import (
    AI_GUIDANCE_TITLE,
    ALLERGY_SUPPLEMENTATION,
    GENERAL_SAFETY_CARD,
    GENERAL_SAFE_RECIPES,
    GENERIC_HEALTHY_PLAN,
    MEAL_SLOTS,
    PLAN_DAY_LABELS,
    SAFE_RECIPE_COOK_TIME,
    SAFE_RECIPE_INGREDIENTS,
)
from allersafe.core.logging_config import get_logger
from allersafe.models import DietaryPlan, GuidanceCard, PlanDay, PlannedMeal, SafeRecipe
from allersafe.services.enrichment import EnrichmentService, build_plan_prompt, enrichment_service
from allersafe.utils.ingredient_text import dedupe, format_allergen_name

logger = get_logger(__name__)


def _normalize_allergies(allergies: Any) -> List[str]:
    if allergies is None:
        return []
    if not isinstance(allergies, list) or any(not isinstance(a, str) for a in allergies):
        raise InvalidInput("INVALID_INPUT", "Allergies must be a list of strings")
    return [a.strip() for a in allergies if a.strip()]


def _general_safety_card() -> GuidanceCard:
    return GuidanceCard(**copy.deepcopy(GENERAL_SAFETY_CARD))


class DietaryPlanner:
    def __init__(self, knowledge_base: KnowledgeBase, enrichment: EnrichmentService):
        self.knowledge_base = knowledge_base
        self.enrichment = enrichment

    def generate_plan(self, allergies: Any) -> DietaryPlan:
        """Build a dietary plan and, when available, prefix an AI guidance card.

        Args:
            allergies: The user's allergy names, free text, in profile order.

        Returns:
            DietaryPlan. Restrictions, alternatives and meals are identical
            whether or not enrichment succeeded.
        """
        names = _normalize_allergies(allergies)
        start = time.time()

        pending = self.enrichment.submit(build_plan_prompt(names))
        plan = self.build_plan(names)
        enrichment = self.enrichment.collect(pending)

        if enrichment:
            plan.guidance.insert(0, GuidanceCard(
                id="ai-insights",
                category="AI Enhanced Recommendations",
                title=AI_GUIDANCE_TITLE,
                description=enrichment.text,
                allergen_specific=bool(names),
                ai_generated=True
            ))
            plan.ai_enhanced = True

        logger.info(
            f"Dietary plan generated for {len(names)} allergies "
            f"(unrecognized={len(plan.unrecognized_allergies)}, ai_enhanced={plan.ai_enhanced}) "
            f"in {time.time() - start:.2f}s"
        )
        return plan

    def build_plan(self, allergies: Sequence[str]) -> DietaryPlan:
        """Deterministic part of the plan, straight from the knowledge base."""
        names = [a.strip() for a in allergies if a and a.strip()]
        if not names:
            return self._generic_plan()

        restrictions: List[str] = []
        alternatives: List[str] = []
        guidance: List[GuidanceCard] = []
        unrecognized: List[str] = []
        buckets: Dict[str, List[str]] = {slot: [] for slot, _, _ in MEAL_SLOTS}

        for index, name in enumerate(names):
            definition = self.knowledge_base.resolve(name)
            if definition is None:
                logger.info(f"No knowledge base entry for allergy '{name}'; using generic restriction")
                restrictions.append(f"all {name} products")
                unrecognized.append(name)
                continue

            alternatives.extend(definition.alternatives)
            restrictions.extend(definition.avoid)
            for slot, _, _ in MEAL_SLOTS:
                buckets[slot].extend(getattr(definition.meals, slot))

            display_name = format_allergen_name(definition.key)
            guidance.append(GuidanceCard(
                id=f"rec-{index}",
                category=f"{display_name} Management",
                title=f"Safe Foods for {display_name} Allergy",
                description=(
                    f"Dietary guidance for managing {name} allergies with safe alternatives "
                    "and meal suggestions."
                ),
                foods=list(definition.alternatives),
                avoid=list(definition.avoid),
                tips=list(definition.tips),
                allergen_specific=True
            ))

        guidance.append(_general_safety_card())
        alternatives = dedupe(alternatives)

        return DietaryPlan(
            restrictions=dedupe(restrictions),
            alternatives=alternatives,
            supplementation=list(ALLERGY_SUPPLEMENTATION),
            meal_plan=self._rotate_meals(buckets),
            shopping_list=list(alternatives),
            guidance=guidance,
            unrecognized_allergies=unrecognized,
            ai_enhanced=False
        )

    def safe_alternatives(self, allergen: str) -> List[str]:
        definition = self.knowledge_base.resolve(allergen)
        return list(definition.alternatives) if definition else []

    def safe_recipes(self, allergies: Any) -> List[SafeRecipe]:
        """One simple bowl per known allergy, built on its first alternatives, then the general recipes."""
        recipes: List[SafeRecipe] = []
        for index, name in enumerate(_normalize_allergies(allergies)):
            alternatives = self.safe_alternatives(name)
            if not alternatives:
                continue
            recipes.append(SafeRecipe(
                id=f"recipe-{index}",
                name=f"{name}-Free {alternatives[0]} Bowl",
                category="Lunch" if index % 2 == 0 else "Dinner",
                description=(
                    f"A nutritious and safe meal featuring {alternatives[0]} as the main "
                    f"ingredient, completely free from {name}."
                ),
                ingredients=alternatives[:SAFE_RECIPE_INGREDIENTS],
                cook_time=SAFE_RECIPE_COOK_TIME
            ))
        recipes.extend(SafeRecipe(**copy.deepcopy(recipe)) for recipe in GENERAL_SAFE_RECIPES)
        return recipes

    def is_food_safe(self, food_item: str, allergies: Any) -> bool:
        """False when the food names an avoid-list item of any known allergy.

        Unknown allergy names contribute nothing, so this check is only as
        good as the knowledge base.
        """
        lowered = (food_item or "").lower()
        for name in _normalize_allergies(allergies):
            definition = self.knowledge_base.resolve(name)
            if definition and any(avoid.lower() in lowered for avoid in definition.avoid):
                return False
        return True

    def _rotate_meals(self, buckets: Dict[str, List[str]]) -> List[PlanDay]:
        """Slice each deduplicated bucket into consecutive per-day chunks."""
        unique = {slot: dedupe(items) for slot, items in buckets.items()}
        days: List[PlanDay] = []
        for day_index, label in enumerate(PLAN_DAY_LABELS):
            meals = []
            for slot, meal_name, per_day in MEAL_SLOTS:
                items = unique[slot][day_index * per_day:(day_index + 1) * per_day]
                if items:
                    meals.append(PlannedMeal(name=meal_name, items=items))
            if meals:
                days.append(PlanDay(day=label, meals=meals))
        return days

    def _generic_plan(self) -> DietaryPlan:
        template: Dict[str, Any] = copy.deepcopy(GENERIC_HEALTHY_PLAN)
        return DietaryPlan(
            restrictions=template["restrictions"],
            alternatives=template["alternatives"],
            supplementation=template["supplementation"],
            meal_plan=[PlanDay(**day) for day in template["meal_plan"]],
            shopping_list=list(template["alternatives"]),
            guidance=[_general_safety_card()],
            unrecognized_allergies=[],
            ai_enhanced=False
        )


dietary_planner = DietaryPlanner(get_knowledge_base(), enrichment_service)
