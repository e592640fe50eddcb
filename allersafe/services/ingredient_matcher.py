import re
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Tuple

from allersafe.core.allergens import AllergenDefinition, KnowledgeBase
from allersafe.models import AllergenDetection

# Keyword matching cannot tell an exact word from a substring hit, so every
# detection carries the same confidence.
MATCH_CONFIDENCE = 0.9


def is_related_allergy(user_allergy: str, definition: AllergenDefinition) -> bool:
    """Decide whether a free-text profile allergy refers to an allergen.

    Deliberately loose so that a near miss is flagged rather than missed:
    the name may equal, contain or be contained in the allergen id, contain
    any of its keywords, or equal one of its aliases. Blank names never match.
    """
    name = (user_allergy or "").strip().lower()
    if not name:
        return False
    key = definition.key.lower()
    if name in key or key in name:
        return True
    if any(keyword in name for keyword in definition.keywords):
        return True
    return name in (alias.lower() for alias in definition.aliases)


class IngredientMatcher:
    def __init__(self, knowledge_base: KnowledgeBase):
        self.knowledge_base = knowledge_base
        self._patterns: Dict[str, List[Tuple[str, Pattern]]] = {
            definition.key: [
                (keyword, re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE))
                for keyword in definition.keywords
            ]
            for definition in knowledge_base
        }

    def detect(
        self,
        tokens: Sequence[str],
        user_allergies: Optional[Iterable[str]] = None
    ) -> List[AllergenDetection]:
        """Find allergens in cleaned ingredient tokens.

        Args:
            tokens: Cleaned ingredient tokens, in input order.
            user_allergies: Free-text allergy names from the user's profile.

        Returns:
            One detection per allergen, ordered by first appearance in the input.
            The first matching token and keyword win.
        """
        allergies = list(user_allergies or [])
        detections: List[AllergenDetection] = []
        seen = set()

        for token in tokens:
            lowered = token.strip().lower()
            if not lowered:
                continue
            for definition in self.knowledge_base:
                if definition.key in seen:
                    continue
                keyword = self._match_keyword(lowered, definition)
                if keyword is None:
                    continue
                seen.add(definition.key)
                detections.append(AllergenDetection(
                    allergen=definition.key,
                    confidence=MATCH_CONFIDENCE,
                    source=lowered,
                    severity=definition.severity,
                    user_allergy=any(is_related_allergy(a, definition) for a in allergies),
                    keyword=keyword
                ))

        return detections

    def _match_keyword(self, token: str, definition: AllergenDefinition) -> Optional[str]:
        """Return the first keyword found in the token, as a substring or a whole word."""
        for keyword, pattern in self._patterns.get(definition.key, []):
            if keyword in token or pattern.search(token):
                return keyword
        return None
