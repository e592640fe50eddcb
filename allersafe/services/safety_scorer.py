from typing import Iterable

from allersafe.core.allergens import SEVERITY_HIGH
from allersafe.models import AllergenDetection

MAX_SCORE = 100
MIN_SCORE = 0
HIGH_SEVERITY_PENALTY = 25
DEFAULT_PENALTY = 15
USER_ALLERGY_MULTIPLIER = 3


def detection_penalty(detection: AllergenDetection) -> int:
    """Points removed from the safety score for a single detection.

    High-severity allergens cost more than the rest, and an allergen that
    matches the user's own profile costs three times its base penalty.
    """
    base = HIGH_SEVERITY_PENALTY if detection.severity == SEVERITY_HIGH else DEFAULT_PENALTY
    if detection.user_allergy:
        return base * USER_ALLERGY_MULTIPLIER
    return base


def score_detections(detections: Iterable[AllergenDetection]) -> int:
    """Score a set of detections from 0 (unsafe) to 100 (nothing found).

    Penalties are summed first and the floor is applied once, so the result
    does not depend on detection order.
    """
    total_penalty = sum(detection_penalty(d) for d in detections)
    return max(MIN_SCORE, MAX_SCORE - total_penalty)


def has_user_match(detections: Iterable[AllergenDetection]) -> bool:
    return any(d.user_allergy for d in detections)
