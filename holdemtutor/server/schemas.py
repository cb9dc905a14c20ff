"""
Pydantic schemas for API request/response validation.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from holdemtutor.core.rules import Difficulty, Language


# ============= Request Schemas =============

class ActionRequest(BaseModel):
    """Request to take an action for the human seat."""
    action_type: str = Field(..., description="Action type: FOLD, CHECK, CALL, RAISE, ALL_IN")
    amount: Optional[int] = Field(default=0, ge=0, description="Raise-to total for RAISE")


class SettingsRequest(BaseModel):
    """Change difficulty and/or language; omitted fields are left alone."""
    difficulty: Optional[Difficulty] = None
    language: Optional[Language] = None


# ============= Response Schemas =============

class CardSchema(BaseModel):
    """Card representation."""
    id: str
    rank: str
    suit: str
    text: str
    color: str


class PlayerSchema(BaseModel):
    """One seat. ``cards`` is null while hidden."""
    id: str
    name: str
    chips: int
    bet: int
    total_bet: int
    folded: bool
    is_teacher: bool
    cards: Optional[List[CardSchema]] = None


class ActionSchema(BaseModel):
    """Available action."""
    type: str
    amount: Optional[int] = None
    min: Optional[int] = None
    max: Optional[int] = None


class PendingSchema(BaseModel):
    """Transition the client should request via /advance after ``delay_ms``."""
    kind: str
    delay_ms: int


class LastActionSchema(BaseModel):
    seat: str
    action: str
    amount: int
    phase: str


class HandEvaluationSchema(BaseModel):
    category: str
    name: str
    description: str
    cards: List[str]
    kickers: List[int]


class HandResultSchema(BaseModel):
    """How the pot was resolved."""
    winners: List[str]
    payouts: Dict[str, int]
    by_fold: bool
    hands: Optional[Dict[str, HandEvaluationSchema]] = None


class GameStateSchema(BaseModel):
    """Complete game snapshot as seen by the human."""
    phase: str
    pot: int
    current_bet: int
    board: List[CardSchema]
    to_act: Optional[str] = None
    pending: Optional[PendingSchema] = None
    message: Optional[str] = None
    message_text: Optional[str] = None
    last_action: Optional[LastActionSchema] = None
    players: List[PlayerSchema]
    result: Optional[HandResultSchema] = None
    deck_remaining: int
    difficulty: str
    language: str
    legal_actions: List[ActionSchema] = []


class LegalActionsSchema(BaseModel):
    actions: List[ActionSchema]


class CancelResultSchema(BaseModel):
    """What /cancel discarded, if anything."""
    cancelled: Optional[PendingSchema] = None


class SettingsSchema(BaseModel):
    difficulty: str
    language: str
