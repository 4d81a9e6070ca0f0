from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
import uuid

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from backend.models import (
    PartyId,
    NewGameReq,
    PlayReq,
    ValidateReq,
    StepReq,
    LoadReq,
    ValidateResp,
    LegalResp,
    ColorScoreOut,
    ScoreResp,
    GetStateResp,
    StateEnvelope,
)

from orbita.core import (
    GameState,
    initialize_game,
    apply_move,
    resolve_round,
    bot_move,
    final_scores,
    is_game_over,
    to_json,
    from_json,
)
from orbita.hand import legal_selections, validate_selection
from orbita.types import Color, Party


@dataclass
class Session:
    state: GameState
    bot_party: Optional[Party]  # which party the server moves itself


# In-memory session store
SESSIONS: Dict[str, Session] = {}


def _new_session_id() -> str:
    return uuid.uuid4().hex


def get_session(session_id: str) -> Session:
    session = SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def save_state(session_id: str, state: GameState) -> None:
    SESSIONS[session_id].state = state


def _exclusion_for(state: GameState, party: Party) -> Optional[Color]:
    # A party asking out of turn is treated as the round's second mover
    if party == state.first_party:
        return None
    return state.first_played_color


app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@app.post("/new-game", response_model=StateEnvelope)
def new_game(req: NewGameReq) -> StateEnvelope:
    try:
        state = initialize_game(seed=req.seed, first_party=req.firstParty)
        sid = _new_session_id()
        SESSIONS[sid] = Session(state=state, bot_party=req.botParty)
        return StateEnvelope(sessionId=sid, botParty=req.botParty, state=to_json(state))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"new-game failed: {e}")


@app.post("/load", response_model=StateEnvelope)
def load_endpoint(req: LoadReq) -> StateEnvelope:
    try:
        state = from_json(req.state)
    except (AssertionError, KeyError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"invalid state: {e}")
    sid = _new_session_id()
    SESSIONS[sid] = Session(state=state, bot_party=req.botParty)
    return StateEnvelope(sessionId=sid, botParty=req.botParty, state=to_json(state))


@app.get("/state/{sessionId}", response_model=GetStateResp)
def get_state_endpoint(sessionId: str) -> GetStateResp:
    session = get_session(sessionId)
    return GetStateResp(state=to_json(session.state))


@app.post("/validate", response_model=ValidateResp)
def validate_endpoint(req: ValidateReq) -> ValidateResp:
    session = get_session(req.sessionId)
    state = session.state
    hand = state.party(req.party).hand
    res = validate_selection(hand, req.indices, _exclusion_for(state, req.party))
    return ValidateResp(valid=res.valid, message=res.message, rule=res.rule)


@app.get("/legal/{sessionId}/{party}", response_model=LegalResp)
def legal_endpoint(sessionId: str, party: PartyId) -> LegalResp:
    state = get_session(sessionId).state
    selections = legal_selections(state.party(party).hand, _exclusion_for(state, party))
    return LegalResp(party=party, selections=[list(s) for s in selections])


@app.post("/play", response_model=GetStateResp)
def play_endpoint(req: PlayReq) -> GetStateResp:
    session = get_session(req.sessionId)
    if session.bot_party == req.party:
        raise HTTPException(status_code=409, detail="That party is played by the server")
    res = apply_move(session.state, req.party, req.indices)
    if not res.ok:
        raise HTTPException(status_code=400, detail=res.error)
    save_state(req.sessionId, res.state)
    return GetStateResp(state=to_json(res.state))


@app.post("/step", response_model=GetStateResp)
def step_endpoint(req: StepReq) -> GetStateResp:
    """Resolve a finished round, or let the server party move."""
    session = get_session(req.sessionId)
    state = session.state
    try:
        if is_game_over(state):
            raise HTTPException(status_code=409, detail="The game is over")
        if state.phase == "round-end":
            state, _result = resolve_round(state)
        elif state.current_party == session.bot_party:
            res = bot_move(state)
            if not res.ok:
                raise HTTPException(status_code=400, detail=res.error)
            state = res.state
        else:
            raise HTTPException(status_code=409, detail="Nothing to step: waiting for a human move")
        save_state(req.sessionId, state)
        return GetStateResp(state=to_json(state))
    except HTTPException:
        raise
    except (AssertionError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"step failed: {e}")


@app.get("/score/{sessionId}", response_model=ScoreResp)
def score_endpoint(sessionId: str) -> ScoreResp:
    state = get_session(sessionId).state
    report = final_scores(state)
    return ScoreResp(
        final=is_game_over(state),
        penaltyA=report.penalty_a,
        penaltyB=report.penalty_b,
        totalA=report.total_a,
        totalB=report.total_b,
        winner=report.winner,
        details=[
            ColorScoreOut(
                color=d.color,
                countA=d.count_a,
                countB=d.count_b,
                flippedA=d.flipped_a,
                flippedB=d.flipped_b,
            )
            for d in report.details
        ],
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("backend.app:app", host="0.0.0.0", port=8000, reload=True)
