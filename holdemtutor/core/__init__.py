"""
HoldemTutor Core - Pure Python Heads-up Hold'em Logic

This module contains all game logic without any network dependencies.
"""

from holdemtutor.core.card import Card, Rank, Suit, create_deck, deal_cards, shuffle_deck
from holdemtutor.core.errors import IllegalActionError, InvariantViolation, PokerError
from holdemtutor.core.hand import HandCategory, HandEvaluation, compare_hands, evaluate_hand
from holdemtutor.core.player import Player
from holdemtutor.core.rules import ActionType, GamePhase, Seat, TableConfig
from holdemtutor.core.game import (
    Action, GameState, apply_action, determine_winner, legal_actions, new_hand, next_phase,
)
from holdemtutor.core.trainer import HoldemTrainer

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "create_deck",
    "deal_cards",
    "shuffle_deck",
    "PokerError",
    "IllegalActionError",
    "InvariantViolation",
    "HandCategory",
    "HandEvaluation",
    "compare_hands",
    "evaluate_hand",
    "Player",
    "ActionType",
    "GamePhase",
    "Seat",
    "TableConfig",
    "Action",
    "GameState",
    "apply_action",
    "determine_winner",
    "legal_actions",
    "new_hand",
    "next_phase",
    "HoldemTrainer",
]
