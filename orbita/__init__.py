from .types import (
    Card,
    Color,
    Party,
    Phase,
    Token,
    Winner,
    PlayableGroup,
    ValidationResult,
    COLORS,
    COLOR_MAP,
    HOME_PARTY,
    PARTIES,
    other_party,
)
from .deck import build_deck, deal, color_counts
from .hand import find_playable_groups, validate_selection, legal_selections
from .track import (
    position_value,
    track_label,
    calculate_token_position,
    determine_round_winner,
)
from .scoring import ColorScore, ScoreReport, calculate_final_scores
from .ai import CandidateEval, evaluate_plays
from .core import (
    PartyState,
    RoundPlay,
    RoundResult,
    ExplainInfo,
    GameState,
    PlayOutcome,
    MoveResult,
    initialize_game,
    play_cards,
    apply_move,
    resolve_round,
    is_game_over,
    final_scores,
    ai_decide,
    choose_cards,
    bot_move,
    play_out,
    to_json,
    from_json,
)

__all__ = [
    "Card",
    "Color",
    "Party",
    "Phase",
    "Token",
    "Winner",
    "PlayableGroup",
    "ValidationResult",
    "COLORS",
    "COLOR_MAP",
    "HOME_PARTY",
    "PARTIES",
    "other_party",
    "build_deck",
    "deal",
    "color_counts",
    "find_playable_groups",
    "validate_selection",
    "legal_selections",
    "position_value",
    "track_label",
    "calculate_token_position",
    "determine_round_winner",
    "ColorScore",
    "ScoreReport",
    "calculate_final_scores",
    "CandidateEval",
    "evaluate_plays",
    "PartyState",
    "RoundPlay",
    "RoundResult",
    "ExplainInfo",
    "GameState",
    "PlayOutcome",
    "MoveResult",
    "initialize_game",
    "play_cards",
    "apply_move",
    "resolve_round",
    "is_game_over",
    "final_scores",
    "ai_decide",
    "choose_cards",
    "bot_move",
    "play_out",
    "to_json",
    "from_json",
]
