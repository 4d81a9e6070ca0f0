from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .deck import color_counts
from .types import Card, Color, Winner, COLORS


@dataclass(frozen=True)
class ColorScore:
    color: Color
    count_a: int
    count_b: int
    flipped_a: bool
    flipped_b: bool


@dataclass(frozen=True)
class ScoreReport:
    penalty_a: int
    penalty_b: int
    total_a: int
    total_b: int
    winner: Winner
    details: Tuple[ColorScore, ...]


def calculate_final_scores(won_a: Sequence[Card], won_b: Sequence[Card]) -> ScoreReport:
    """Per color, the side holding strictly fewer cards flips them as penalty.

    Lower total penalty wins; equal penalties go to whoever won more cards.
    """
    counts_a = color_counts(won_a)
    counts_b = color_counts(won_b)
    details: List[ColorScore] = []
    penalty_a = 0
    penalty_b = 0
    for color in COLORS:
        ca = counts_a[color]
        cb = counts_b[color]
        flipped_a = ca < cb
        flipped_b = cb < ca
        if flipped_a:
            penalty_a += ca
        elif flipped_b:
            penalty_b += cb
        details.append(ColorScore(color=color, count_a=ca, count_b=cb, flipped_a=flipped_a, flipped_b=flipped_b))

    total_a = len(won_a)
    total_b = len(won_b)
    winner: Winner
    if penalty_a < penalty_b:
        winner = "A"
    elif penalty_b < penalty_a:
        winner = "B"
    elif total_a > total_b:
        winner = "A"
    elif total_b > total_a:
        winner = "B"
    else:
        winner = "tie"
    return ScoreReport(
        penalty_a=penalty_a,
        penalty_b=penalty_b,
        total_a=total_a,
        total_b=total_b,
        winner=winner,
        details=tuple(details),
    )
