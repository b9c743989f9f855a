from dataclasses import dataclass
from enum import Enum


class Dimension(str, Enum):
    ALIGNMENT = "alignment"
    EXECUTION = "execution"
    ACCOUNTABILITY = "accountability"


class Subscale(str, Enum):
    PD = "pd"  # personal discipline
    CS = "cs"  # collective systems
    OB = "ob"  # observable behaviors


@dataclass(frozen=True)
class Question:
    question_order: int
    text: str
    dimension: Dimension
    subscale: Subscale
    is_reversed: bool = False

    def __post_init__(self):
        # Rejects anything outside the closed sets.
        object.__setattr__(self, "dimension", Dimension(self.dimension))
        object.__setattr__(self, "subscale", Subscale(self.subscale))


@dataclass(frozen=True)
class DimensionResult:
    pd: int
    cs: int
    ob: int
    composite: float
    strength: float

    def subscales(self) -> dict:
        return {"pd": self.pd, "cs": self.cs, "ob": self.ob}
