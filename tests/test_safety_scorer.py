from allersafe.models import AllergenDetection
from allersafe.services.safety_scorer import detection_penalty, has_user_match, score_detections


def _detection(allergen="milk", severity="high", user_allergy=False):
    return AllergenDetection(
        allergen=allergen,
        confidence=0.9,
        source=allergen,
        severity=severity,
        user_allergy=user_allergy,
        keyword=allergen
    )


def test_no_detections_scores_full_marks():
    assert score_detections([]) == 100


def test_penalties_by_severity():
    assert detection_penalty(_detection(severity="high")) == 25
    assert detection_penalty(_detection(severity="medium")) == 15
    assert detection_penalty(_detection(severity="low")) == 15


def test_user_allergy_triples_penalty():
    assert detection_penalty(_detection(severity="high", user_allergy=True)) == 75
    assert detection_penalty(_detection(severity="medium", user_allergy=True)) == 45


def test_mixed_detections():
    detections = [
        _detection("wheat", severity="medium"),
        _detection("tree_nuts", severity="high", user_allergy=True),
    ]
    assert score_detections(detections) == 10


def test_score_never_drops_below_zero():
    detections = [_detection(a, user_allergy=True) for a in ("milk", "eggs", "fish")]
    assert score_detections(detections) == 0


def test_score_does_not_depend_on_order():
    detections = [
        _detection("milk", user_allergy=True),
        _detection("eggs", user_allergy=True),
        _detection("wheat", severity="medium"),
    ]
    assert score_detections(detections) == score_detections(list(reversed(detections))) == 0


def test_has_user_match():
    assert has_user_match([_detection(), _detection("eggs", user_allergy=True)])
    assert not has_user_match([_detection()])
    assert not has_user_match([])
