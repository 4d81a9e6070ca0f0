from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .hand import find_playable_groups
from .track import calculate_token_position
from .types import Card, Color, Token


@dataclass(frozen=True)
class CandidateEval:
    color: Color
    count: int
    indices: Tuple[int, ...]
    position: int
    score: float


def _token_for(tokens: Sequence[Token], color: Color) -> Token:
    return next(t for t in tokens if t.color == color)


def score_play(position: int, count: int) -> float:
    # Track progress first, then prefer spending fewer cards
    return float(position * 2 - count)


def evaluate_plays(
    hand: Sequence[Card],
    tokens: Sequence[Token],
    excluded_color: Optional[Color] = None,
) -> Tuple[List[int], Optional[CandidateEval], List[CandidateEval]]:
    """Pick the play with the best heuristic score.

    Returns ``(indices, best, candidates)``. When only the excluded color is
    left, the smallest legal amount of its first run is played and the
    candidate list holds just that forced play. An empty hand yields
    ``([], None, [])``.
    """
    groups = find_playable_groups(hand, excluded_color)
    if not groups:
        fallback = find_playable_groups(hand)
        if not fallback:
            return [], None, []
        g = fallback[0]
        picked = g.indices[: g.min_play]
        token = _token_for(tokens, g.color)
        pos = calculate_token_position(token.position, len(picked), tokens, g.color)
        forced = CandidateEval(
            color=g.color,
            count=len(picked),
            indices=picked,
            position=pos,
            score=score_play(pos, len(picked)),
        )
        return list(picked), forced, [forced]

    candidates: List[CandidateEval] = []
    best: Optional[CandidateEval] = None
    for g in groups:
        token = _token_for(tokens, g.color)
        for count in range(g.min_play, g.max_play + 1):
            pos = calculate_token_position(token.position, count, tokens, g.color)
            cand = CandidateEval(
                color=g.color,
                count=count,
                indices=g.indices[:count],
                position=pos,
                score=score_play(pos, count),
            )
            candidates.append(cand)
            # Strict comparison keeps the first-found play on ties
            if best is None or cand.score > best.score:
                best = cand
    assert best is not None
    return list(best.indices), best, candidates
