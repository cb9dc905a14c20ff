"""
HTTP API Routes for HoldemTutor.

One trainer per application, shared by a single UI client. The server never
waits on its own: when a snapshot carries ``pending``, the client waits
``delay_ms`` and then calls ``/advance``.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request

from holdemtutor.core.errors import IllegalActionError
from holdemtutor.core.rules import ActionType
from holdemtutor.core.trainer import HoldemTrainer
from holdemtutor.server.schemas import (
    ActionRequest, CancelResultSchema, GameStateSchema, LegalActionsSchema,
    SettingsRequest, SettingsSchema,
)

router = APIRouter()


def get_trainer(request: Request) -> HoldemTrainer:
    """Get the application's trainer instance."""
    return request.app.state.trainer


def _snapshot(trainer: HoldemTrainer) -> Dict[str, Any]:
    try:
        return trainer.get_state()
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/new_game", response_model=GameStateSchema)
async def new_game(request: Request) -> Dict[str, Any]:
    """
    Deal a new hand.

    Any hand in progress is discarded together with its pending transition.
    """
    trainer = get_trainer(request)
    trainer.start_new_game()
    return _snapshot(trainer)


@router.get("/state", response_model=GameStateSchema)
async def get_state(request: Request) -> Dict[str, Any]:
    """Get the current game snapshot."""
    return _snapshot(get_trainer(request))


@router.get("/legal_actions", response_model=LegalActionsSchema)
async def get_legal_actions(request: Request) -> Dict[str, Any]:
    """Get legal actions for the human seat (empty when it is not their turn)."""
    trainer = get_trainer(request)
    try:
        return {"actions": trainer.legal_actions()}
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/action", response_model=GameStateSchema)
async def take_action(req: ActionRequest, request: Request) -> Dict[str, Any]:
    """
    Take an action for the human seat.

    Illegal actions are rejected with 400 and leave the state untouched.
    """
    trainer = get_trainer(request)

    try:
        action_type = ActionType(req.action_type.upper())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid action type: {req.action_type}")

    try:
        trainer.player_action(action_type, req.amount or 0)
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _snapshot(trainer)


@router.post("/advance", response_model=GameStateSchema)
async def advance(request: Request) -> Dict[str, Any]:
    """Resolve the pending transition (Teacher's turn, next street or showdown)."""
    trainer = get_trainer(request)
    try:
        trainer.resolve_pending()
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _snapshot(trainer)


@router.post("/cancel", response_model=CancelResultSchema)
async def cancel(request: Request) -> Dict[str, Any]:
    """Discard the pending transition without running it."""
    trainer = get_trainer(request)
    try:
        pending = trainer.cancel_pending()
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"cancelled": pending.to_dict() if pending else None}


@router.post("/settings", response_model=SettingsSchema)
async def update_settings(req: SettingsRequest, request: Request) -> Dict[str, Any]:
    """Change difficulty and/or language for the session."""
    trainer = get_trainer(request)
    if req.difficulty is not None:
        trainer.set_difficulty(req.difficulty)
    if req.language is not None:
        trainer.set_language(req.language)
    return {"difficulty": trainer.difficulty.value, "language": trainer.language.value}
