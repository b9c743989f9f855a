"""
Per-participant question order.

The order is seeded from sha256("<participant id>:<secret>") so it is stable
for a participant and cannot be predicted by a client. Only display order
changes; which question feeds which subscale never does.
"""
import hashlib
import math
from typing import Callable, List, Optional, Sequence, TypeVar

from app.errors import ConfigurationError

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def _mulberry32(seed: int) -> Callable[[], float]:
    state = seed & _MASK32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & _MASK32
        t = state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    return next_float


def shuffle_seed(participant_id: str, secret: str) -> int:
    digest = hashlib.sha256(f"{participant_id}:{secret}".encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


def shuffle_with_seed(items: Sequence[T], seed: int) -> List[T]:
    result = list(items)
    random = _mulberry32(seed)
    for i in range(len(result) - 1, 0, -1):
        j = math.floor(random() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result


def shuffled_order(participant_id: str, secret: Optional[str], questions: Sequence[T]) -> List[T]:
    """
    Return a shuffled copy of ``questions`` for ``participant_id``.

    Raises ConfigurationError when ``secret`` is missing or blank.
    """
    if not secret or not secret.strip():
        raise ConfigurationError("RANDOMIZATION_SECRET is required for question shuffling")
    return shuffle_with_seed(questions, shuffle_seed(participant_id, secret))
