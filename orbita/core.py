from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, cast, get_args

from .types import (
    Card,
    Color,
    Party,
    Phase,
    Token,
    Winner,
    COLORS,
    PARTIES,
    other_party,
    turn_phase,
)
from .deck import build_deck, deal, make_rng, ordered_deck
from .hand import validate_selection
from .track import calculate_token_position, determine_round_winner, is_on_track, track_label
from .scoring import ScoreReport, calculate_final_scores
from .ai import CandidateEval, evaluate_plays


_PHASES: Tuple[str, ...] = get_args(Phase)


def _append_log(state: "GameState", msg: str) -> "GameState":
    return replace(state, logs=state.logs + (msg,))


@dataclass(frozen=True)
class PartyState:
    hand: Tuple[Card, ...] = ()
    won: Tuple[Card, ...] = ()


@dataclass(frozen=True)
class RoundPlay:
    party: Party
    cards: Tuple[Card, ...]
    position: int  # where the moved token landed

    @property
    def color(self) -> Color:
        return self.cards[0].color


@dataclass(frozen=True)
class RoundResult:
    round_number: int
    winner: Winner
    cards_a: Tuple[Card, ...]
    cards_b: Tuple[Card, ...]
    position_a: int
    position_b: int


@dataclass(frozen=True)
class ExplainInfo:
    topK: Tuple[CandidateEval, ...]
    pick_reason: str


@dataclass(frozen=True)
class GameState:
    seed: Optional[int]
    a: PartyState
    b: PartyState
    tokens: Tuple[Token, ...]
    current_party: Party
    first_party: Party  # first to move in the current round
    round_number: int = 1
    phase: Phase = "waiting"
    first_played_color: Optional[Color] = None
    round_plays: Tuple[RoundPlay, ...] = ()
    last_round_result: Optional[RoundResult] = None
    discarded: Tuple[Card, ...] = ()  # cards from tied rounds
    logs: Tuple[str, ...] = ()
    explain: Optional[ExplainInfo] = None

    def party(self, party: Party) -> PartyState:
        return self.a if party == "A" else self.b

    def token(self, color: Color) -> Token:
        return next(t for t in self.tokens if t.color == color)

    def excluded_color(self) -> Optional[Color]:
        # Binds the round's second mover only
        if self.current_party == self.first_party:
            return None
        return self.first_played_color


@dataclass(frozen=True)
class PlayOutcome:
    state: GameState
    played_cards: Tuple[Card, ...]
    new_position: int


@dataclass(frozen=True)
class MoveResult:
    ok: bool
    state: GameState
    error: str = ""
    rule: Optional[str] = None
    played_cards: Tuple[Card, ...] = ()
    new_position: Optional[int] = None


def _with_party(state: GameState, party: Party, ps: PartyState) -> GameState:
    if party == "A":
        return replace(state, a=ps)
    return replace(state, b=ps)


def initialize_game(seed: Optional[int] = None, first_party: Optional[Party] = None) -> GameState:
    rng = make_rng(seed)
    hand_a, hand_b = deal(build_deck(rng=rng))
    if first_party is None:
        first_party = "A" if rng.random() < 0.5 else "B"
    state = GameState(
        seed=seed,
        a=PartyState(hand=hand_a),
        b=PartyState(hand=hand_b),
        tokens=tuple(Token(color=c) for c in COLORS),
        current_party=first_party,
        first_party=first_party,
        round_number=1,
        phase=turn_phase(first_party),
    )
    return _append_log(state, f"GAME_START: seed={seed} first={first_party}")


def play_cards(state: GameState, party: Party, indices: Sequence[int]) -> PlayOutcome:
    """Move the played color's token and drop the cards from the hand.

    The selection must already have passed ``validate_selection``; nothing is
    checked here and turn bookkeeping is left to ``apply_move``.
    """
    ps = state.party(party)
    ordered = sorted(indices)
    played = tuple(ps.hand[i] for i in ordered)
    color = played[0].color
    dropped = set(ordered)
    new_hand = tuple(card for i, card in enumerate(ps.hand) if i not in dropped)
    new_pos = calculate_token_position(state.token(color).position, len(played), state.tokens, color)
    tokens = tuple(replace(t, position=new_pos) if t.color == color else t for t in state.tokens)
    new_state = replace(_with_party(state, party, replace(ps, hand=new_hand)), tokens=tokens)
    return PlayOutcome(state=new_state, played_cards=played, new_position=new_pos)


def _reject(state: GameState, rule: str, message: str) -> MoveResult:
    return MoveResult(ok=False, state=state, error=message, rule=rule)


def apply_move(state: GameState, party: Party, indices: Sequence[int]) -> MoveResult:
    if state.phase == "game-over":
        return _reject(state, "phase", "The game is over.")
    if state.phase == "round-end":
        return _reject(state, "phase", "The round must be resolved before the next move.")
    if state.phase != turn_phase(state.current_party):
        return _reject(state, "phase", "The game has not started.")
    if party != state.current_party:
        return _reject(state, "turn", f"It is party {state.current_party}'s turn.")

    check = validate_selection(state.party(party).hand, list(indices), state.excluded_color())
    if not check.valid:
        return _reject(state, cast(str, check.rule), check.message)

    out = play_cards(state, party, indices)
    ns = out.state
    color = out.played_cards[0].color
    plays = ns.round_plays + (RoundPlay(party=party, cards=out.played_cards, position=out.new_position),)
    if len(plays) == 1:
        nxt = other_party(party)
        ns = replace(ns, round_plays=plays, first_played_color=color, current_party=nxt, phase=turn_phase(nxt))
    else:
        ns = replace(ns, round_plays=plays, phase="round-end")
    ns = _append_log(
        ns,
        f"R{ns.round_number} PLAY: {party} {color} x{len(out.played_cards)} -> {track_label(out.new_position)}",
    )
    return MoveResult(ok=True, state=ns, played_cards=out.played_cards, new_position=out.new_position)


def resolve_round(state: GameState) -> Tuple[GameState, RoundResult]:
    if state.phase != "round-end":
        raise ValueError(f"No finished round to resolve (phase={state.phase})")
    assert len(state.round_plays) == 2, "A finished round holds exactly two plays"
    by_party = {p.party: p for p in state.round_plays}
    play_a = by_party["A"]
    play_b = by_party["B"]

    winner = determine_round_winner(play_a.position, play_b.position)
    pool = tuple(card for p in state.round_plays for card in p.cards)
    a, b, discarded = state.a, state.b, state.discarded
    if winner == "A":
        a = replace(a, won=a.won + pool)
    elif winner == "B":
        b = replace(b, won=b.won + pool)
    else:
        discarded = discarded + pool

    result = RoundResult(
        round_number=state.round_number,
        winner=winner,
        cards_a=play_a.cards,
        cards_b=play_b.cards,
        position_a=play_a.position,
        position_b=play_b.position,
    )
    first = state.first_party if winner == "tie" else cast(Party, winner)
    ns = replace(
        state,
        a=a,
        b=b,
        discarded=discarded,
        round_number=state.round_number + 1,
        first_party=first,
        current_party=first,
        phase=turn_phase(first),
        first_played_color=None,
        round_plays=(),
        last_round_result=result,
    )
    ns = _append_log(
        ns,
        f"R{state.round_number} ROUND_RESULT: winner={winner} "
        f"A={track_label(play_a.position)} B={track_label(play_b.position)} cards={len(pool)}",
    )
    if not ns.a.hand or not ns.b.hand:
        report = calculate_final_scores(ns.a.won, ns.b.won)
        ns = replace(ns, phase="game-over")
        ns = _append_log(ns, f"GAME_END: penalty A={report.penalty_a} B={report.penalty_b} winner={report.winner}")
    return ns, result


def is_game_over(state: GameState) -> bool:
    return state.phase == "game-over"


def final_scores(state: GameState) -> ScoreReport:
    return calculate_final_scores(state.a.won, state.b.won)


def ai_decide(state: GameState) -> Tuple[List[int], ExplainInfo]:
    excluded = state.excluded_color()
    indices, best, candidates = evaluate_plays(state.party(state.current_party).hand, state.tokens, excluded)
    # Stable sort: equal scores stay in evaluation order
    top = tuple(sorted(candidates, key=lambda ce: -ce.score)[:3])
    if best is None:
        reason = "BOT_PICK: nothing to play"
    elif excluded is not None and best.color == excluded:
        reason = f"BOT_PICK: forced {best.color} x{best.count} -> {track_label(best.position)}"
    else:
        reason = f"BOT_PICK: {best.color} x{best.count} -> {track_label(best.position)} score={best.score:.1f}"
    return indices, ExplainInfo(topK=top, pick_reason=reason)


def choose_cards(state: GameState) -> List[int]:
    indices, _info = ai_decide(state)
    return indices


def bot_move(state: GameState) -> MoveResult:
    indices, info = ai_decide(state)
    picked = _append_log(replace(state, explain=info), f"R{state.round_number} {info.pick_reason}")
    res = apply_move(picked, state.current_party, indices)
    if not res.ok:
        return replace(res, state=state)
    return res


def play_out(state: GameState) -> GameState:
    """Finish the game with the heuristic moving for both parties."""
    while not is_game_over(state):
        if state.phase == "round-end":
            state, _result = resolve_round(state)
            continue
        res = bot_move(state)
        assert res.ok, res.error
        state = res.state
    return state


# --- JSON serialization (pure, no I/O) ---

def _card_to_obj(card: Card) -> Dict[str, object]:
    return {"id": card.id, "color": card.color}


def _obj_to_card(obj: object) -> Card:
    assert isinstance(obj, dict), "Card must be an object"
    cid = obj.get("id")
    color = obj.get("color")
    assert isinstance(cid, str), "Card id must be a string"
    assert color in COLORS, f"Unknown card color: {color!r}"
    return Card(id=cid, color=cast(Color, color))


def _cards_to_list(cards: Sequence[Card]) -> List[Dict[str, object]]:
    return [_card_to_obj(c) for c in cards]


def _list_to_cards(obj: object) -> Tuple[Card, ...]:
    assert isinstance(obj, list), "Card list expected"
    return tuple(_obj_to_card(x) for x in obj)


def _party_obj(obj: object) -> Party:
    assert obj in PARTIES, f"Unknown party: {obj!r}"
    return cast(Party, obj)


def _result_to_obj(r: RoundResult) -> Dict[str, object]:
    return {
        "roundNumber": r.round_number,
        "winner": r.winner,
        "cardsA": _cards_to_list(r.cards_a),
        "cardsB": _cards_to_list(r.cards_b),
        "positionA": r.position_a,
        "positionB": r.position_b,
    }


def _obj_to_result(obj: Dict[str, Any]) -> RoundResult:
    winner = obj.get("winner")
    assert winner in ("A", "B", "tie"), "Invalid round winner"
    return RoundResult(
        round_number=int(obj["roundNumber"]),
        winner=cast(Winner, winner),
        cards_a=_list_to_cards(obj.get("cardsA")),
        cards_b=_list_to_cards(obj.get("cardsB")),
        position_a=int(obj["positionA"]),
        position_b=int(obj["positionB"]),
    )


def to_json(state: GameState) -> Dict[str, object]:
    parties_obj: Dict[str, object] = {}
    for p in PARTIES:
        ps = state.party(p)
        parties_obj[p] = {"hand": _cards_to_list(ps.hand), "won": _cards_to_list(ps.won)}

    plays_obj: List[Dict[str, object]] = []
    for play in state.round_plays:
        plays_obj.append({
            "party": play.party,
            "cards": _cards_to_list(play.cards),
            "position": play.position,
        })

    data: Dict[str, object] = {
        "schemaVersion": 1,
        "seed": state.seed,
        "parties": parties_obj,
        "tokens": [{"color": t.color, "position": t.position} for t in state.tokens],
        "currentParty": state.current_party,
        "firstParty": state.first_party,
        "roundNumber": state.round_number,
        "phase": state.phase,
        "firstPlayedColor": state.first_played_color,
        "roundPlays": plays_obj,
        "lastRoundResult": None if state.last_round_result is None else _result_to_obj(state.last_round_result),
        "discarded": _cards_to_list(state.discarded),
        "logs": list(state.logs),
    }
    if state.explain is not None:
        topk_list: List[Dict[str, object]] = []
        for ce in state.explain.topK:
            topk_list.append({
                "color": ce.color,
                "count": ce.count,
                "indices": list(ce.indices),
                "position": ce.position,
                "score": float(ce.score),
            })
        data["explain"] = {"topK": topk_list, "pick": {"reason": state.explain.pick_reason}}
    return data


def from_json(data: Dict[str, object]) -> GameState:
    assert isinstance(data, dict), "Data must be a dict"
    assert data.get("schemaVersion") == 1, "Unsupported schemaVersion"

    seed = data.get("seed")
    assert seed is None or isinstance(seed, int), "seed must be int or null"

    parties_obj = data.get("parties")
    assert isinstance(parties_obj, dict), "Missing parties"
    party_states: Dict[str, PartyState] = {}
    for p in PARTIES:
        pobj = parties_obj.get(p)
        assert isinstance(pobj, dict), f"Missing party {p}"
        party_states[p] = PartyState(hand=_list_to_cards(pobj.get("hand")), won=_list_to_cards(pobj.get("won")))

    tokens_obj = data.get("tokens")
    assert isinstance(tokens_obj, list) and len(tokens_obj) == len(COLORS), "Four tokens required"
    tokens: List[Token] = []
    for tobj in tokens_obj:
        assert isinstance(tobj, dict), "Invalid token"
        color = tobj.get("color")
        pos = tobj.get("position")
        assert color in COLORS, "Invalid token color"
        assert pos is None or (isinstance(pos, int) and pos >= 1), "Invalid token position"
        tokens.append(Token(color=cast(Color, color), position=pos))
    assert {t.color for t in tokens} == set(COLORS), "One token per color required"
    cells = [t.position for t in tokens if is_on_track(t.position)]
    assert len(cells) == len(set(cells)), "Tokens cannot share a track cell"

    phase = data.get("phase")
    assert phase in _PHASES, "Invalid phase"
    round_number = data.get("roundNumber")
    assert isinstance(round_number, int) and round_number >= 1, "roundNumber must be a positive int"
    fpc = data.get("firstPlayedColor")
    assert fpc is None or fpc in COLORS, "Invalid firstPlayedColor"

    plays_obj = data.get("roundPlays", [])
    assert isinstance(plays_obj, list) and len(plays_obj) <= 2, "At most two plays per round"
    plays: List[RoundPlay] = []
    for pobj in plays_obj:
        assert isinstance(pobj, dict), "Invalid round play"
        cards = _list_to_cards(pobj.get("cards"))
        assert cards, "Round play without cards"
        plays.append(RoundPlay(party=_party_obj(pobj.get("party")), cards=cards, position=int(pobj["position"])))
    first_party = _party_obj(data.get("firstParty"))
    assert len({p.party for p in plays}) == len(plays), "Each party plays once per round"
    if plays:
        assert plays[0].party == first_party, "The first play belongs to firstParty"
        assert plays[0].color == fpc, "firstPlayedColor must match the first play"

    lrr = data.get("lastRoundResult")
    last_result = None
    if lrr is not None:
        assert isinstance(lrr, dict), "Invalid lastRoundResult"
        last_result = _obj_to_result(lrr)

    discarded = _list_to_cards(data.get("discarded", []))
    logs_obj = data.get("logs", [])
    assert isinstance(logs_obj, list)

    explain: Optional[ExplainInfo] = None
    exp = data.get("explain")
    if isinstance(exp, dict):
        topk: List[CandidateEval] = []
        for itm in exp.get("topK", []):
            assert isinstance(itm, dict), "Invalid explain entry"
            assert itm.get("color") in COLORS, "Invalid explain color"
            topk.append(CandidateEval(
                color=cast(Color, itm["color"]),
                count=int(itm["count"]),
                indices=tuple(int(i) for i in itm["indices"]),
                position=int(itm["position"]),
                score=float(itm["score"]),
            ))
        pick = exp.get("pick", {})
        reason = str(pick.get("reason", "")) if isinstance(pick, dict) else ""
        explain = ExplainInfo(topK=tuple(topk), pick_reason=reason)

    # Every card of the deck sits in exactly one place
    expected = {c.id: c.color for c in ordered_deck()}
    located: List[Card] = []
    for ps in party_states.values():
        located.extend(ps.hand)
        located.extend(ps.won)
    located.extend(discarded)
    for play in plays:
        located.extend(play.cards)
    assert sorted(c.id for c in located) == sorted(expected), "Cards must cover the deck exactly once"
    assert all(expected[c.id] == c.color for c in located), "Card color does not match its id"

    return GameState(
        seed=seed,
        a=party_states["A"],
        b=party_states["B"],
        tokens=tuple(tokens),
        current_party=_party_obj(data.get("currentParty")),
        first_party=first_party,
        round_number=round_number,
        phase=cast(Phase, phase),
        first_played_color=cast(Optional[Color], fpc),
        round_plays=tuple(plays),
        last_round_result=last_result,
        discarded=discarded,
        logs=tuple(str(x) for x in logs_obj),
        explain=explain,
    )
