from orbita import bot_move, final_scores, initialize_game, is_game_over, play_out, resolve_round
from orbita.types import TRACK_LENGTH


def test_tokens_never_share_a_cell_and_cards_are_conserved():
    for seed in range(25):
        state = initialize_game(seed=seed)
        played = 0
        rounds = 0
        while not is_game_over(state):
            if state.phase == "round-end":
                state, _result = resolve_round(state)
                rounds += 1
                continue
            res = bot_move(state)
            assert res.ok, res.error
            state = res.state
            played += len(res.played_cards)
            cells = [t.position for t in state.tokens if t.position is not None and 1 <= t.position <= TRACK_LENGTH]
            assert len(cells) == len(set(cells))
        assert len(state.a.won) + len(state.b.won) + len(state.discarded) == played
        assert played + len(state.a.hand) + len(state.b.hand) == 28
        assert state.round_number == rounds + 1
        assert not state.a.hand or not state.b.hand
        assert state.logs[-1].startswith("GAME_END:")


def test_play_out_is_deterministic_per_seed():
    first = play_out(initialize_game(seed=5))
    second = play_out(initialize_game(seed=5))
    assert first == second
    assert final_scores(first) == final_scores(second)


def test_round_logs_follow_play_order():
    state = play_out(initialize_game(seed=8))
    kinds = [ln.split(": ", 1)[0].split(" ")[-1] for ln in state.logs]
    assert kinds[0] == "GAME_START"
    assert kinds[-1] == "GAME_END"
    assert kinds.count("ROUND_RESULT") * 2 == kinds.count("PLAY")
