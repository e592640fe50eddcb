from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Optional, Tuple

SEVERITY_LOW = "low"
SEVERITY_MEDIUM = "medium"
SEVERITY_HIGH = "high"
SEVERITY_LEVELS = (SEVERITY_LOW, SEVERITY_MEDIUM, SEVERITY_HIGH)


@dataclass(frozen=True)
class MealSuggestions:
    breakfast: Tuple[str, ...] = ()
    lunch: Tuple[str, ...] = ()
    dinner: Tuple[str, ...] = ()
    snacks: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AllergenDefinition:
    key: str
    keywords: Tuple[str, ...]
    severity: str
    alternatives: Tuple[str, ...]
    avoid: Tuple[str, ...]
    meals: MealSuggestions
    aliases: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.severity not in SEVERITY_LEVELS:
            raise ValueError(f"Unknown severity '{self.severity}' for allergen '{self.key}'")


# --- Allergen Definitions ---
# Keyword lists drive ingredient matching; aliases are extra profile names that
# resolve to the allergen when building dietary plans.
ALLERGEN_DEFINITIONS: Tuple[AllergenDefinition, ...] = (
    AllergenDefinition(
        key="milk",
        keywords=("milk", "dairy", "lactose", "casein", "whey", "butter", "cream",
                  "cheese", "yogurt", "ghee", "buttermilk"),
        severity=SEVERITY_HIGH,
        aliases=("dairy", "lactose"),
        alternatives=("oat milk", "almond milk", "coconut milk", "rice milk", "soy milk",
                      "dairy-free cheese", "coconut yogurt"),
        avoid=("milk", "cheese", "butter", "cream", "yogurt", "ice cream", "whey protein", "casein"),
        meals=MealSuggestions(
            breakfast=("oatmeal with almond milk", "dairy-free smoothie", "avocado toast"),
            lunch=("quinoa salad", "hummus wrap", "dairy-free soup"),
            dinner=("grilled chicken with vegetables", "dairy-free pasta", "stir-fry with coconut milk"),
            snacks=("nuts", "fruits", "dairy-free crackers"),
        ),
        tips=("Read labels for hidden dairy", "Try fortified plant milks for calcium",
              'Look for "vegan" labels'),
    ),
    AllergenDefinition(
        key="eggs",
        keywords=("egg", "albumin", "lecithin", "mayonnaise", "meringue", "custard"),
        severity=SEVERITY_HIGH,
        aliases=("egg",),
        alternatives=("flax eggs", "chia eggs", "aquafaba", "applesauce", "mashed banana",
                      "tofu scramble"),
        avoid=("eggs", "mayonnaise", "custard", "meringue", "some baked goods", "egg noodles"),
        meals=MealSuggestions(
            breakfast=("chia pudding", "oatmeal", "smoothie bowl", "avocado toast"),
            lunch=("quinoa bowl", "lentil soup", "vegetable wrap"),
            dinner=("grilled fish with rice", "vegetable curry", "bean salad"),
            snacks=("fruit", "nuts", "veggie sticks with hummus"),
        ),
        tips=("Use flax eggs in baking", "Check vaccine ingredients",
              "Be careful with processed foods"),
    ),
    AllergenDefinition(
        key="fish",
        keywords=("fish", "salmon", "tuna", "cod", "anchovy", "sardine", "mackerel", "halibut"),
        severity=SEVERITY_HIGH,
        alternatives=("plant-based protein", "tofu", "tempeh", "legumes"),
        avoid=("salmon", "tuna", "cod", "anchovies", "fish sauce", "worcestershire sauce"),
        meals=MealSuggestions(
            breakfast=("oatmeal with berries", "avocado toast", "fruit smoothie"),
            lunch=("chicken salad wrap", "lentil soup", "quinoa bowl"),
            dinner=("roast chicken with vegetables", "bean chili", "tofu stir-fry"),
            snacks=("fresh fruit", "veggie sticks with hummus", "rice cakes"),
        ),
        tips=("Check dressings and sauces for anchovies",
              "Ask whether fryer oil is shared with fish",
              "Ask your doctor about algae-based omega-3 supplements"),
    ),
    AllergenDefinition(
        key="shellfish",
        keywords=("shellfish", "shrimp", "crab", "lobster", "clam", "oyster", "scallop", "mussels"),
        severity=SEVERITY_HIGH,
        aliases=("crustaceans",),
        alternatives=("mushrooms", "seaweed", "plant-based seafood"),
        avoid=("shrimp", "crab", "lobster", "oysters", "mussels", "scallops"),
        meals=MealSuggestions(
            breakfast=("scrambled tofu", "oatmeal with fruit", "yogurt parfait"),
            lunch=("grilled chicken salad", "mushroom risotto", "vegetable wrap"),
            dinner=("seaweed rice bowl", "roast turkey with vegetables", "mushroom stir-fry"),
            snacks=("fresh fruit", "seaweed snacks", "rice crackers"),
        ),
        tips=("Avoid seafood restaurants with shared cooking surfaces",
              "Check broths and stocks for shellfish",
              "Glucosamine supplements may be shellfish-derived"),
    ),
    AllergenDefinition(
        key="tree_nuts",
        keywords=("almond", "walnut", "cashew", "pecan", "pistachio", "brazil nut", "hazelnut",
                  "macadamia", "pine nuts"),
        severity=SEVERITY_HIGH,
        aliases=("nuts", "nut", "tree nuts"),
        alternatives=("sunflower seeds", "pumpkin seeds", "hemp seeds", "tahini",
                      "sunflower seed butter"),
        avoid=("almonds", "walnuts", "cashews", "pistachios", "hazelnuts", "pecans", "nut oils"),
        meals=MealSuggestions(
            breakfast=("seed butter toast", "oatmeal with seeds", "fruit smoothie"),
            lunch=("seed-based salad", "hummus wrap", "quinoa bowl"),
            dinner=("grilled protein with vegetables", "seed-crusted fish", "vegetable stir-fry"),
            snacks=("sunflower seeds", "pumpkin seeds", "safe granola bars"),
        ),
        tips=("Carry safe snacks", "Inform restaurants about tree nut allergies",
              "Check for cross-contamination"),
    ),
    AllergenDefinition(
        key="peanuts",
        keywords=("peanut", "groundnut", "arachis", "peanut butter", "peanut oil"),
        severity=SEVERITY_HIGH,
        aliases=("peanut",),
        alternatives=("sunflower seed butter", "almond butter", "tahini"),
        avoid=("peanuts", "peanut butter", "peanut oil", "groundnuts", "satay sauce"),
        meals=MealSuggestions(
            breakfast=("sunflower seed butter toast", "oatmeal with fruit", "banana smoothie"),
            lunch=("turkey sandwich", "chickpea salad", "vegetable soup"),
            dinner=("baked chicken with rice", "pasta primavera", "beef and vegetable stew"),
            snacks=("pumpkin seeds", "apple slices", "popcorn"),
        ),
        tips=("Ask about peanut oil in fried foods", "Avoid bulk bins with shared scoops",
              "Be cautious with Asian and African sauces"),
    ),
    AllergenDefinition(
        key="wheat",
        keywords=("wheat", "gluten", "flour", "bread", "pasta", "cereal", "barley", "rye", "spelt"),
        severity=SEVERITY_MEDIUM,
        aliases=("gluten",),
        alternatives=("rice flour", "quinoa", "gluten-free oats", "almond flour", "rice", "corn",
                      "potatoes", "coconut flour"),
        avoid=("wheat", "bread", "pasta", "cereal", "crackers", "beer", "soy sauce"),
        meals=MealSuggestions(
            breakfast=("rice porridge", "gluten-free oats", "quinoa breakfast bowl"),
            lunch=("rice bowl", "corn tortilla wrap", "potato salad"),
            dinner=("rice noodles", "quinoa pilaf", "baked potato with toppings"),
            snacks=("rice cakes", "corn chips", "fruits and vegetables"),
        ),
        tips=("Look for certified gluten-free products", "Use alternative flours for baking",
              "Check medication ingredients"),
    ),
    AllergenDefinition(
        key="soy",
        keywords=("soy", "soya", "tofu", "tempeh", "soy sauce", "edamame", "miso"),
        severity=SEVERITY_MEDIUM,
        aliases=("soya", "soybean"),
        alternatives=("coconut aminos", "chickpeas", "lentils", "hemp protein", "pea protein"),
        avoid=("soy sauce", "tofu", "tempeh", "edamame", "soy milk", "miso", "soy lecithin"),
        meals=MealSuggestions(
            breakfast=("pea protein smoothie", "oatmeal", "fruit bowl"),
            lunch=("chickpea salad", "lentil soup", "quinoa bowl"),
            dinner=("grilled meat with vegetables", "coconut curry", "bean-based dishes"),
            snacks=("nuts", "seeds", "fresh fruit"),
        ),
        tips=("Use coconut aminos instead of soy sauce",
              "Check processed foods for soy lecithin", "Read supplement labels"),
    ),
)


class KnowledgeBase:
    """Read-only table of allergen definitions.

    Iteration follows definition order, which is also the order the matcher
    tests allergens against each ingredient token.
    """

    def __init__(self, definitions: Iterable[AllergenDefinition]):
        self._definitions: Tuple[AllergenDefinition, ...] = tuple(definitions)
        by_key: Dict[str, AllergenDefinition] = {}
        by_name: Dict[str, AllergenDefinition] = {}
        for definition in self._definitions:
            key = definition.key.lower()
            if key in by_key:
                raise ValueError(f"Duplicate allergen key '{definition.key}'")
            by_key[key] = definition
        for definition in self._definitions:
            by_name[definition.key.lower()] = definition
            for alias in definition.aliases:
                # A canonical key always wins over another allergen's alias.
                by_name.setdefault(alias.lower(), definition)
        self._by_key = MappingProxyType(by_key)
        self._by_name = MappingProxyType(by_name)

    def __iter__(self) -> Iterator[AllergenDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, key: str) -> bool:
        return isinstance(key, str) and key.strip().lower() in self._by_key

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(d.key for d in self._definitions)

    def get(self, key: str) -> Optional[AllergenDefinition]:
        """Return the definition for a canonical allergen id."""
        if not isinstance(key, str):
            return None
        return self._by_key.get(key.strip().lower())

    def resolve(self, name: str) -> Optional[AllergenDefinition]:
        """Resolve a profile allergy name by exact, case-insensitive key or alias."""
        if not isinstance(name, str):
            return None
        return self._by_name.get(name.strip().lower())


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    """Return the process-wide knowledge base, built on first use."""
    return KnowledgeBase(ALLERGEN_DEFINITIONS)
