from orbita import COLORS, build_deck, color_counts, deal, initialize_game
from orbita.deck import make_rng, ordered_deck, shuffle_deck


def test_deck_has_seven_cards_of_each_color_with_unique_ids():
    deck = build_deck(seed=7)
    assert len(deck) == 28
    assert len({c.id for c in deck}) == 28
    assert color_counts(deck) == {c: 7 for c in COLORS}


def test_same_seed_gives_same_order():
    assert build_deck(seed=42) == build_deck(seed=42)
    assert build_deck(seed=1) != build_deck(seed=2)


def test_shuffle_leaves_input_untouched():
    base = ordered_deck()
    snapshot = list(base)
    shuffled = shuffle_deck(base, make_rng(3))
    assert base == snapshot
    assert sorted(c.id for c in shuffled) == sorted(c.id for c in base)


def test_initialize_game_deals_fourteen_each_in_deck_order():
    deck = build_deck(seed=3)
    hand_a, hand_b = deal(deck)
    state = initialize_game(seed=3)
    assert state.a.hand == hand_a == tuple(deck[:14])
    assert state.b.hand == hand_b == tuple(deck[14:])
    assert state.a.won == () and state.b.won == ()
    assert all(t.position is None for t in state.tokens)
    assert [t.color for t in state.tokens] == list(COLORS)
    assert state.round_number == 1
    assert state.first_played_color is None
    assert state.logs[0].startswith("GAME_START:")


def test_first_party_is_random_per_seed_unless_forced():
    firsts = {initialize_game(seed=s).first_party for s in range(50)}
    assert firsts == {"A", "B"}
    state = initialize_game(seed=5, first_party="B")
    assert state.current_party == "B"
    assert state.first_party == "B"
    assert state.phase == "b-turn"
