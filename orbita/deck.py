from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple
import random

from .types import Card, Color, COLORS, CARDS_PER_COLOR, HAND_SIZE


def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


def ordered_deck() -> List[Card]:
    cards: List[Card] = []
    for color in COLORS:
        for i in range(CARDS_PER_COLOR):
            cards.append(Card(id=f"{color}-{i}", color=color))
    return cards


def shuffle_deck(cards: Sequence[Card], rng: random.Random) -> List[Card]:
    # Fisher-Yates on a copy; the input is left untouched
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def build_deck(seed: Optional[int] = None, *, rng: Optional[random.Random] = None) -> List[Card]:
    """Return the 28-card deck (7 per color) in uniformly random order.

    Pass either a ``seed`` or an existing ``rng``; the generator is the only
    source of randomness, so equal seeds give equal decks.
    """
    if rng is None:
        rng = make_rng(seed)
    return shuffle_deck(ordered_deck(), rng)


def deal(deck: Sequence[Card]) -> Tuple[Tuple[Card, ...], Tuple[Card, ...]]:
    # Deck order is kept inside each hand; it fixes the initial runs
    assert len(deck) == 2 * HAND_SIZE, "Deck must hold exactly two hands"
    return tuple(deck[:HAND_SIZE]), tuple(deck[HAND_SIZE:])


def color_counts(cards: Sequence[Card]) -> Dict[Color, int]:
    counts: Dict[Color, int] = {c: 0 for c in COLORS}
    for card in cards:
        counts[card.color] += 1
    return counts
