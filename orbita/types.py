from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple, TypeAlias

Color = Literal["water", "forest", "desert", "galaxy"]
Party = Literal["A", "B"]
Winner = Literal["A", "B", "tie"]

# Turn phases; "waiting" only exists before the first turn is handed out
Phase: TypeAlias = Literal[
    "waiting",
    "a-turn",
    "b-turn",
    "round-end",
    "game-over",
]

# Deck order (and score breakdown order)
COLORS: Tuple[Color, ...] = ("water", "forest", "desert", "galaxy")
PARTIES: Tuple[Party, ...] = ("A", "B")

COLOR_MAP: Dict[str, str] = {
    "water": "Water",
    "forest": "Forest",
    "desert": "Desert",
    "galaxy": "Galaxy",
}

# Display only; the rules let either party move any token
HOME_PARTY: Dict[str, Party] = {
    "water": "A",
    "forest": "A",
    "desert": "B",
    "galaxy": "B",
}

CARDS_PER_COLOR: int = 7
HAND_SIZE: int = 14
TRACK_LENGTH: int = 14
MAX_PLAY: int = 3
SPLIT_RUN_MIN: int = 4

# Movement order up the left leg, over the top and down the right leg
TRACK_LABELS: Tuple[str, ...] = (
    "1", "2", "3", "4", "5", "6", "7",
    "7+", "6+", "5+", "4+", "3+", "2+", "1+",
)


@dataclass(frozen=True)
class Card:
    id: str
    color: Color

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class Token:
    color: Color
    position: Optional[int] = None  # None = not yet on the track


@dataclass(frozen=True)
class PlayableGroup:
    color: Color
    indices: Tuple[int, ...]
    min_play: int
    max_play: int


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    message: str = ""
    rule: Optional[str] = None  # size | range | color | exclusion | contiguity | run

    @staticmethod
    def ok() -> "ValidationResult":
        return ValidationResult(valid=True)

    @staticmethod
    def reject(rule: str, message: str) -> "ValidationResult":
        return ValidationResult(valid=False, message=message, rule=rule)


def other_party(party: Party) -> Party:
    return "B" if party == "A" else "A"


def turn_phase(party: Party) -> Phase:
    return "a-turn" if party == "A" else "b-turn"
