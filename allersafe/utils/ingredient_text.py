import re
from typing import Iterable, List, Optional

# A period separates only before whitespace or end of text; "0.5 mg" stays whole.
INGREDIENT_SEPARATORS = re.compile(r"[,;\n]|\.(?=\s|$)")
NUMERIC_ONLY = re.compile(r"^\d+$")


def split_ingredients_text(text: Optional[str]) -> List[str]:
    """Split raw ingredient text into trimmed tokens.

    Separators are comma, semicolon, newline and a period followed by
    whitespace or the end of the text. Empty tokens and
    tokens made only of digits are dropped.
    """
    if not text:
        return []
    tokens = []
    for part in INGREDIENT_SEPARATORS.split(text):
        token = part.strip()
        if token and not NUMERIC_ONLY.match(token):
            tokens.append(token)
    return tokens


def clean_ingredient_list(ingredients: Iterable[str]) -> List[str]:
    """Run each raw ingredient entry through the tokenizer and flatten the result."""
    tokens: List[str] = []
    for entry in ingredients:
        tokens.extend(split_ingredients_text(entry))
    return tokens


def parse_allergy_profile(symptoms: Optional[str]) -> List[str]:
    """Turn a stored 'symptoms/allergies' string into an ordered allergy list."""
    if not symptoms:
        return []
    return [name.strip() for name in symptoms.split(",") if name.strip()]


def format_allergen_name(allergen: str) -> str:
    """'tree_nuts' -> 'Tree Nuts'."""
    return " ".join(word[:1].upper() + word[1:] for word in allergen.split("_") if word)


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove duplicates preserving first-seen order."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique
