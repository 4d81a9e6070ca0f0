from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .types import Card, Color, COLOR_MAP, MAX_PLAY, SPLIT_RUN_MIN, PlayableGroup, ValidationResult


def find_playable_groups(hand: Sequence[Card], excluded_color: Optional[Color] = None) -> List[PlayableGroup]:
    """One entry per maximal run of same-colored cards, in hand order.

    Runs shorter than SPLIT_RUN_MIN must be played whole; longer runs may give
    up 1..MAX_PLAY cards. Runs of ``excluded_color`` are skipped.
    """
    groups: List[PlayableGroup] = []
    i = 0
    n = len(hand)
    while i < n:
        color = hand[i].color
        start = i
        while i + 1 < n and hand[i + 1].color == color:
            i += 1
        i += 1
        if excluded_color is not None and color == excluded_color:
            continue
        indices = tuple(range(start, i))
        min_play = 1 if len(indices) >= SPLIT_RUN_MIN else len(indices)
        max_play = min(MAX_PLAY, len(indices))
        groups.append(PlayableGroup(color=color, indices=indices, min_play=min_play, max_play=max_play))
    return groups


def run_bounds(hand: Sequence[Card], start: int, end: int) -> Tuple[int, int]:
    # Grow [start, end] while the neighbours share the color at start
    color = hand[start].color
    lo, hi = start, end
    while lo > 0 and hand[lo - 1].color == color:
        lo -= 1
    while hi < len(hand) - 1 and hand[hi + 1].color == color:
        hi += 1
    return lo, hi


def validate_selection(
    hand: Sequence[Card],
    selected_indices: Sequence[int],
    excluded_color: Optional[Color] = None,
) -> ValidationResult:
    if len(selected_indices) == 0:
        return ValidationResult.reject("size", "Select at least one card.")
    if len(selected_indices) > MAX_PLAY:
        return ValidationResult.reject("size", f"At most {MAX_PLAY} cards can be played at once.")
    if any(i < 0 or i >= len(hand) for i in selected_indices):
        return ValidationResult.reject("range", "Selected card is not in the hand.")

    colors = {hand[i].color for i in selected_indices}
    if len(colors) > 1:
        return ValidationResult.reject("color", "Only cards of one color can be played together.")
    color = hand[selected_indices[0]].color

    if excluded_color is not None and color == excluded_color:
        # Waived when the hand holds nothing else
        if find_playable_groups(hand, excluded_color):
            return ValidationResult.reject(
                "exclusion",
                f"The second player must play a color other than {COLOR_MAP[excluded_color]}.",
            )

    ordered = sorted(selected_indices)
    for prev, cur in zip(ordered, ordered[1:]):
        if cur != prev + 1:
            return ValidationResult.reject("contiguity", "Selected cards must be next to each other in the hand.")

    lo, hi = run_bounds(hand, ordered[0], ordered[-1])
    run_len = hi - lo + 1
    if run_len < SPLIT_RUN_MIN and len(ordered) != run_len:
        return ValidationResult.reject(
            "run",
            f"The {run_len} adjacent {COLOR_MAP[color]} cards must be played together.",
        )
    if run_len >= SPLIT_RUN_MIN and ordered[0] != lo and ordered[-1] != hi:
        return ValidationResult.reject(
            "run",
            "Cards can only be split off the start or the end of a run.",
        )
    return ValidationResult.ok()


def legal_selections(hand: Sequence[Card], excluded_color: Optional[Color] = None) -> List[Tuple[int, ...]]:
    """Every selection ``validate_selection`` accepts, grouped by run."""
    groups = find_playable_groups(hand, excluded_color)
    if not groups:
        groups = find_playable_groups(hand)
    out: List[Tuple[int, ...]] = []
    for g in groups:
        if len(g.indices) < SPLIT_RUN_MIN:
            out.append(g.indices)
            continue
        for count in range(g.min_play, g.max_play + 1):
            out.append(g.indices[:count])
        for count in range(g.min_play, g.max_play + 1):
            out.append(g.indices[-count:])
    return out
