from dataclasses import replace
from typing import Dict, Optional, Tuple

import pytest

from orbita import (
    Card,
    GameState,
    PartyState,
    Token,
    apply_move,
    final_scores,
    initialize_game,
    is_game_over,
    resolve_round,
)

_LETTERS = {"w": "water", "f": "forest", "d": "desert", "g": "galaxy"}


def _hand(letters: str, tag: str) -> Tuple[Card, ...]:
    seen: Dict[str, int] = {}
    cards = []
    for ch in letters:
        color = _LETTERS[ch]
        n = seen.get(color, 0)
        seen[color] = n + 1
        cards.append(Card(id=f"{color}-{tag}{n}", color=color))  # type: ignore[arg-type]
    return tuple(cards)


def _table(hand_a: str, hand_b: str, first: str = "A",
           tokens: Optional[Tuple[Token, ...]] = None) -> GameState:
    state = initialize_game(seed=11, first_party=first)  # type: ignore[arg-type]
    state = replace(state, a=PartyState(hand=_hand(hand_a, "a")), b=PartyState(hand=_hand(hand_b, "b")))
    if tokens is not None:
        state = replace(state, tokens=tokens)
    return state


def test_winner_collects_both_plays_and_leads_next_round():
    state = _table("wwf", "dg")
    res = apply_move(state, "A", [0, 1])
    assert res.ok and res.new_position == 2
    assert res.state.phase == "b-turn"
    assert res.state.first_played_color == "water"
    res = apply_move(res.state, "B", [0])
    assert res.ok and res.new_position == 1
    assert res.state.phase == "round-end"

    state, result = resolve_round(res.state)
    assert result.winner == "A"
    assert result.position_a == 2 and result.position_b == 1
    assert sorted(c.id for c in state.a.won) == ["desert-b0", "water-a0", "water-a1"]
    assert state.b.won == ()
    assert state.round_number == 2
    assert state.first_party == "A" and state.current_party == "A"
    assert state.phase == "a-turn"
    assert state.first_played_color is None
    assert state.round_plays == ()
    assert state.last_round_result == result
    # Tokens stay where they landed
    assert state.token("water").position == 2
    assert state.token("desert").position == 1


def test_game_ends_when_hands_run_out():
    state = _table("wwf", "dg")
    state = apply_move(state, "A", [0, 1]).state
    state = apply_move(state, "B", [0]).state
    state, _ = resolve_round(state)

    # forest bumps over desert(1) and water(2); galaxy then over forest(3)
    res = apply_move(state, "A", [0])
    assert res.new_position == 3
    res = apply_move(res.state, "B", [0])
    assert res.new_position == 4
    state, result = resolve_round(res.state)
    assert result.winner == "B"
    assert result.round_number == 2
    assert is_game_over(state)
    report = final_scores(state)
    assert (report.penalty_a, report.penalty_b) == (0, 0)
    assert report.winner == "A"  # three cards won against two
    assert state.logs[-1] == "GAME_END: penalty A=0 B=0 winner=A"
    late = apply_move(state, "A", [0])
    assert not late.ok and late.rule == "phase"


def test_tie_discards_round_cards_and_keeps_first_player():
    tokens = (Token("water", 13), Token("forest", 12), Token("desert"), Token("galaxy"))
    state = _table("wwd", "fffg", tokens=tokens)
    state = apply_move(state, "A", [0, 1]).state
    res = apply_move(state, "B", [0, 1, 2])
    assert res.ok and res.new_position == 15
    state, result = resolve_round(res.state)
    assert result.winner == "tie"
    assert len(state.discarded) == 5
    assert state.a.won == () and state.b.won == ()
    assert state.first_party == "A"
    assert state.phase == "a-turn"
    assert not is_game_over(state)


def test_second_mover_excluded_from_first_color():
    state = _table("wd", "wwf")
    state = apply_move(state, "A", [0]).state
    res = apply_move(state, "B", [0, 1])
    assert not res.ok
    assert res.rule == "exclusion"
    assert res.state is state
    assert apply_move(state, "B", [2]).ok


def test_forced_repeat_of_first_color():
    state = _table("wd", "ww")
    state = apply_move(state, "A", [0]).state
    assert apply_move(state, "B", [0]).rule == "run"
    res = apply_move(state, "B", [0, 1])
    assert res.ok
    assert res.new_position == 3


def test_exclusion_follows_the_rounds_first_mover():
    state = _table("wwd", "wf", first="B")
    state = apply_move(state, "B", [0]).state
    assert state.current_party == "A"
    assert apply_move(state, "A", [0, 1]).rule == "exclusion"
    assert apply_move(state, "A", [2]).ok


def test_out_of_turn_and_unresolved_round_are_rejected():
    state = _table("wd", "fg")
    res = apply_move(state, "B", [0])
    assert not res.ok and res.rule == "turn"
    state = apply_move(state, "A", [0]).state
    state = apply_move(state, "B", [0]).state
    res = apply_move(state, "A", [0])
    assert not res.ok and res.rule == "phase"


def test_resolving_mid_round_is_a_programming_error():
    state = _table("wd", "fg")
    with pytest.raises(ValueError):
        resolve_round(state)


def test_previous_snapshot_is_not_modified():
    state = _table("wwf", "dg")
    before_hand = state.a.hand
    before_tokens = state.tokens
    res = apply_move(state, "A", [0, 1])
    assert res.ok
    assert state.a.hand == before_hand
    assert state.tokens == before_tokens
    assert state.phase == "a-turn"
    assert state.round_plays == ()


def test_game_ends_when_one_hand_empties_first():
    state = _table("w", "dgf")
    state = apply_move(state, "A", [0]).state
    res = apply_move(state, "B", [0])
    assert res.ok and res.new_position == 2  # desert bumps over water on cell 1
    state, result = resolve_round(res.state)
    assert result.winner == "B"
    assert state.a.hand == ()
    assert [c.color for c in state.b.hand] == ["galaxy", "forest"]
    assert state.phase == "game-over"
    assert is_game_over(state)
    report = final_scores(state)
    # cards left in B's hand are not scored
    assert (report.total_a, report.total_b) == (0, 2)
    assert sum(d.count_b for d in report.details) == 2
    assert report.winner == "B"
    assert state.logs[-1] == "GAME_END: penalty A=0 B=0 winner=B"
