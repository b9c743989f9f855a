from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app.errors import ValidationError
from app.scoring import round_half_up
from app.types import Dimension, Subscale

NAME_PENDING = "(Name pending)"


@dataclass
class MemberScores:
    display_name: Optional[str]
    email: str
    strengths: Mapping[str, Optional[float]]
    subscales: Optional[Mapping[str, Mapping[str, int]]]

    @property
    def is_scored(self) -> bool:
        return self.subscales is not None and all(
            isinstance(self.strengths.get(d.value), (int, float)) for d in Dimension
        )


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def team_averages(members: Iterable[MemberScores]) -> Optional[Dict[str, float]]:
    """Mean strength per dimension, or None when nobody has been scored yet."""
    scored = [m for m in members if m.is_scored]
    if not scored:
        return None
    return {
        d.value: round_half_up(_mean([m.strengths[d.value] for m in scored]), 1)
        for d in Dimension
    }


def subscale_averages(members: Iterable[MemberScores]) -> Dict[str, Dict[str, int]]:
    scored = [m for m in members if m.is_scored]
    return {
        d.value: {
            s.value: int(round_half_up(_mean([m.subscales[d.value][s.value] for m in scored])))
            for s in Subscale
        }
        for d in Dimension
    }


def build_scores_json(members: Iterable[MemberScores], total_count: int, generated_at: datetime) -> dict:
    """
    Build the team report snapshot from completed members.

    Members missing any strength or the subscale breakdown are left out.
    Raises ValidationError if that leaves nobody to report on.
    """
    scored: List[MemberScores] = [m for m in members if m.is_scored]
    if not scored:
        raise ValidationError("no completed assessments with scores to report")

    return {
        "generated_at": generated_at.isoformat(),
        "completion_count": len(scored),
        "total_count": total_count,
        "team_averages": team_averages(scored),
        "subscale_averages": subscale_averages(scored),
        "individual_scores": [
            {
                "name": m.display_name or NAME_PENDING,
                "email": m.email,
                **{d.value: m.strengths[d.value] for d in Dimension},
            }
            for m in scored
        ],
    }
