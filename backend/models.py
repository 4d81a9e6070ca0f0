from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# Domain primitives for JSON bridge
PartyId = Literal["A", "B"]
Color = Literal["water", "forest", "desert", "galaxy"]


class NewGameReq(BaseModel):
    seed: Optional[int] = None
    botParty: Optional[PartyId] = "B"  # null = both parties are human
    firstParty: Optional[PartyId] = None


class PlayReq(BaseModel):
    sessionId: str
    party: PartyId
    indices: List[int] = Field(default_factory=list)


class ValidateReq(BaseModel):
    sessionId: str
    party: PartyId
    indices: List[int] = Field(default_factory=list)


class StepReq(BaseModel):
    sessionId: str


class LoadReq(BaseModel):
    state: Dict[str, Any]
    botParty: Optional[PartyId] = "B"


class ValidateResp(BaseModel):
    valid: bool
    message: str
    rule: Optional[str] = None


class LegalResp(BaseModel):
    party: PartyId
    selections: List[List[int]]


class ColorScoreOut(BaseModel):
    color: Color
    countA: int
    countB: int
    flippedA: bool
    flippedB: bool


class ScoreResp(BaseModel):
    final: bool
    penaltyA: int
    penaltyB: int
    totalA: int
    totalB: int
    winner: Literal["A", "B", "tie"]
    details: List[ColorScoreOut]


class GetStateResp(BaseModel):
    state: Dict[str, Any]


class StateEnvelope(BaseModel):
    sessionId: str
    botParty: Optional[PartyId] = None
    state: Dict[str, Any]
