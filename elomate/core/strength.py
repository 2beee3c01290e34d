"""Map a single ELO-like number to a search depth and a blunder probability."""

from dataclasses import dataclass
from typing import Tuple

MIN_ELO = 400
MAX_ELO = 2800


@dataclass(frozen=True)
class StrengthParams:
    depth: int
    blunder_probability: float


# (upper bound exclusive, params); the last band catches everything above
STRENGTH_BANDS: Tuple[Tuple[float, StrengthParams], ...] = (
    (900, StrengthParams(depth=1, blunder_probability=0.70)),
    (1100, StrengthParams(depth=2, blunder_probability=0.50)),
    (1400, StrengthParams(depth=2, blunder_probability=0.35)),
    (1700, StrengthParams(depth=3, blunder_probability=0.20)),
    (2000, StrengthParams(depth=4, blunder_probability=0.12)),
    (2300, StrengthParams(depth=5, blunder_probability=0.06)),
    (float("inf"), StrengthParams(depth=6, blunder_probability=0.02)),
)


def strength_params(elo: int) -> StrengthParams:
    """Total over all integers: values outside the table clamp to the end bands."""
    for upper, params in STRENGTH_BANDS:
        if elo < upper:
            return params
    return STRENGTH_BANDS[-1][1]
