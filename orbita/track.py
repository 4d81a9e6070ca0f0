from __future__ import annotations

from typing import Dict, Optional, Sequence, Set

from .types import Color, Token, Winner, TRACK_LABELS, TRACK_LENGTH

# Labels read 1..7, 7+, 6+ .. 1+; an "n+" cell sits between n and n+1
_CELL_VALUES: Dict[int, float] = {
    1: 1.0,
    2: 2.0,
    3: 3.0,
    4: 4.0,
    5: 5.0,
    6: 6.0,
    7: 7.0,
    8: 7.5,
    9: 6.5,
    10: 5.5,
    11: 4.5,
    12: 3.5,
    13: 2.5,
    14: 1.5,
}


def is_on_track(position: Optional[int]) -> bool:
    return position is not None and 1 <= position <= TRACK_LENGTH


def is_escaped(position: Optional[int]) -> bool:
    return position is not None and position > TRACK_LENGTH


def position_value(position: Optional[int]) -> float:
    """Rank a landed position for round comparison.

    Off-track is 0, escaped tokens rank above every cell and further escapes
    rank higher still.
    """
    if position is None or position <= 0:
        return 0.0
    if is_escaped(position):
        return 8.0 + 0.1 * (position - TRACK_LENGTH)
    return _CELL_VALUES[position]


def track_label(position: Optional[int]) -> str:
    if position is None or position <= 0:
        return "waiting"
    if is_escaped(position):
        return f"escaped(+{position - TRACK_LENGTH})"
    return TRACK_LABELS[position - 1]


def _occupied_cells(all_tokens: Sequence[Token], moving_color: Color) -> Set[int]:
    cells: Set[int] = set()
    for t in all_tokens:
        if t.color == moving_color:
            continue
        if is_on_track(t.position):
            assert t.position is not None
            cells.add(t.position)
    return cells


def calculate_token_position(
    current_position: Optional[int],
    move_count: int,
    all_tokens: Sequence[Token],
    moving_color: Color,
) -> int:
    occupied = _occupied_cells(all_tokens, moving_color)
    pos = 0 if current_position is None else current_position
    # Entering from off-track lands on cell 1 after one step
    pos += move_count
    # Bump forward past other tokens; past the last cell nothing blocks
    while pos in occupied:
        pos += 1
    return pos


def determine_round_winner(position_a: Optional[int], position_b: Optional[int]) -> Winner:
    va = position_value(position_a)
    vb = position_value(position_b)
    if va > vb:
        return "A"
    if vb > va:
        return "B"
    return "tie"
