from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from app.errors import ValidationError
from app.types import Dimension, DimensionResult, Question, Subscale

# =========================
# Scoring Constants
# =========================

RESPONSE_COUNT = 36
ITEMS_PER_SUBSCALE = 4
MIN_VALUE = 1
MAX_VALUE = 5

# Observable Behaviors count most, then Collective Systems, then Personal Discipline.
OB_WEIGHT = 0.55
CS_WEIGHT = 0.28
PD_WEIGHT = 0.17


def round_half_up(value: float, places: int = 0) -> float:
    """
    Round ties away from zero, on the shortest decimal form of the float.

    Built-in round() uses banker's rounding (12.5 -> 12), scores need 12.5 -> 13.
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


# =========================
# Scoring Steps
# =========================

def score_response(value: int, is_reversed: bool) -> int:
    """
    Apply reverse coding to a raw 1-5 response.

    Example:
      score_response(1, True) -> 5
      score_response(4, False) -> 4
    """
    return 6 - value if is_reversed else value


def subscale_score(values: Sequence[int]) -> int:
    """
    Map the mean of four scored values from 1..5 onto 0..100.

    Example:
      [3, 3, 3, 3] -> mean 3 -> 50
      [2, 3, 3, 3] -> mean 2.75 -> 43.75 -> 44
    """
    mean = sum(values) / ITEMS_PER_SUBSCALE
    return int(round_half_up(((mean - 1) / 4) * 100))


def dimension_composite(pd: int, cs: int, ob: int) -> float:
    return (OB_WEIGHT * ob) + (CS_WEIGHT * cs) + (PD_WEIGHT * pd)


def strength(composite: float) -> float:
    """
    Convert a 0..100 composite into the 1.0..10.0 strength shown to users.

    Example:
      31 -> 1 + 0.31 * 9 = 3.79 -> 3.8
    """
    return round_half_up(1 + (composite / 100) * 9, 1)


# =========================
# Full Submission
# =========================

def _validate(responses: Mapping[int, int], questions: Iterable[Question]) -> None:
    if len(responses) != RESPONSE_COUNT:
        raise ValidationError(f"expected exactly {RESPONSE_COUNT} responses, got {len(responses)}")

    for question_id, value in responses.items():
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_VALUE <= value <= MAX_VALUE:
            raise ValidationError(
                f"response for question {question_id} must be an integer between "
                f"{MIN_VALUE} and {MAX_VALUE}, got {value!r}"
            )

    known = {q.question_order for q in questions}
    for question_id in responses:
        if question_id not in known:
            raise ValidationError(f"response contains unknown question id {question_id!r}")

    for question_id in sorted(known):
        if question_id not in responses:
            raise ValidationError(f"missing response for question id {question_id}")


def score_all(responses: Mapping[int, int], questions: Sequence[Question]) -> Dict[Dimension, DimensionResult]:
    """
    Score a complete submission.

    Every question is reverse-scored as needed and grouped by
    (dimension, subscale). Each dimension then gets its three subscale
    scores, the weighted composite and the final strength.

    Raises ValidationError before any scoring happens if the response set is
    not exactly the 36 catalog ids with values in 1..5.
    """
    _validate(responses, questions)

    grouped: Dict[Tuple[Dimension, Subscale], List[int]] = {
        (dimension, subscale): [] for dimension in Dimension for subscale in Subscale
    }
    for question in questions:
        scored = score_response(responses[question.question_order], question.is_reversed)
        grouped[(question.dimension, question.subscale)].append(scored)

    results: Dict[Dimension, DimensionResult] = {}
    for dimension in Dimension:
        pd = subscale_score(grouped[(dimension, Subscale.PD)])
        cs = subscale_score(grouped[(dimension, Subscale.CS)])
        ob = subscale_score(grouped[(dimension, Subscale.OB)])
        composite = dimension_composite(pd, cs, ob)
        results[dimension] = DimensionResult(pd=pd, cs=cs, ob=ob, composite=composite, strength=strength(composite))
    return results
