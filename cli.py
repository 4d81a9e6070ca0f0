from __future__ import annotations

import sys
from typing import List, Optional, Sequence

from orbita import (
    Card,
    GameState,
    Party,
    COLOR_MAP,
    HOME_PARTY,
    initialize_game,
    apply_move,
    resolve_round,
    bot_move,
    final_scores,
    is_game_over,
    find_playable_groups,
    track_label,
)


# Seats for the console table
HUMAN_PARTY: Party = "A"
BOT_PARTY: Party = "B"
SEED: Optional[int] = None


def print_legend() -> None:
    items = ", ".join(f"{k[0].upper()}={v}" for k, v in COLOR_MAP.items())
    print(f"Legend: {items}")


def print_track(state: GameState) -> None:
    parts: List[str] = []
    for t in state.tokens:
        parts.append(f"{COLOR_MAP[t.color]}({HOME_PARTY[t.color]})={track_label(t.position)}")
    print("Track: " + "  ".join(parts))


def print_hand(hand: Sequence[Card], title: str = "") -> None:
    if title:
        print(f"--- {title} ---")
    print(" ".join(f"{i:>2}" for i in range(len(hand))))
    print(" ".join(f"{c.color[0].upper():>2}" for c in hand))
    runs = find_playable_groups(hand)
    print("Runs: " + ", ".join(f"{g.indices[0]}-{g.indices[-1]}:{g.min_play}..{g.max_play}" for g in runs))
    print()


def drain_logs(state: GameState, shown: int) -> int:
    for line in state.logs[shown:]:
        print(line)
    return len(state.logs)


def ask_indices() -> List[int]:
    while True:
        s = input("Card indices to play (space separated): ").strip().split()
        try:
            return [int(x) for x in s]
        except ValueError:
            print("Please input integers.")


def human_turn(state: GameState) -> GameState:
    party = state.current_party
    print()
    print_legend()
    print(f"Round {state.round_number}: party {party} to play")
    excluded = state.excluded_color()
    if excluded is not None:
        print(f"First color this round: {COLOR_MAP[excluded]} (play another if you can)")
    print_track(state)
    print_hand(state.party(party).hand, f"Party {party} hand")
    while True:
        res = apply_move(state, party, ask_indices())
        if res.ok:
            return res.state
        print(res.error)


def bot_turn(state: GameState) -> GameState:
    print()
    print(f"Round {state.round_number}: party {state.current_party} [BOT]")
    res = bot_move(state)
    assert res.ok, res.error
    return res.state


def print_scores(state: GameState) -> None:
    report = final_scores(state)
    print("\n=== Game Over ===")
    for d in report.details:
        flag_a = " (flipped)" if d.flipped_a else ""
        flag_b = " (flipped)" if d.flipped_b else ""
        print(f"{COLOR_MAP[d.color]:>7}: A={d.count_a}{flag_a}  B={d.count_b}{flag_b}")
    print(f"Penalty A={report.penalty_a} B={report.penalty_b}; cards A={report.total_a} B={report.total_b}")
    if report.winner == "tie":
        print("Result: tie")
    else:
        print(f"Winner: party {report.winner}")


def parse_seed(argv: Sequence[str]) -> Optional[int]:
    if "--seed" not in argv:
        return SEED
    i = argv.index("--seed") + 1
    if i >= len(argv):
        print("--seed needs a value; using a random seed.")
        return SEED
    try:
        return int(argv[i])
    except ValueError:
        print(f"Invalid seed {argv[i]!r}; using a random seed.")
        return SEED


def main() -> None:
    auto = "--auto" in sys.argv
    seed = parse_seed(sys.argv)
    print("ORBITA - Console Table (engine + adapter)")
    if not auto:
        print(f"You are party {HUMAN_PARTY}; the bot plays {BOT_PARTY}.")
    state = initialize_game(seed=seed)
    shown = drain_logs(state, 0)
    while not is_game_over(state):
        if state.phase == "round-end":
            state, _result = resolve_round(state)
        elif auto or state.current_party == BOT_PARTY:
            state = bot_turn(state)
        else:
            state = human_turn(state)
        shown = drain_logs(state, shown)
    print_scores(state)


if __name__ == "__main__":
    main()
