"""
HoldemTutor - Heads-up Texas Hold'em Trainer

The rules-and-decision core of a two-player poker trainer:
- Pure Python card model, hand evaluator and betting state machine
- A heuristic opponent (the Teacher) with three difficulty levels
- A small FastAPI layer for a single UI client

Usage:
    from holdemtutor import HoldemTrainer, TableConfig
    from holdemtutor.agents import TeacherAgent, RandomAgent
"""

__version__ = "0.1.0"

from holdemtutor.core.card import Card, create_deck
from holdemtutor.core.game import Action, GameState
from holdemtutor.core.hand import HandCategory, evaluate_hand
from holdemtutor.core.rules import TableConfig
from holdemtutor.core.trainer import HoldemTrainer

__all__ = [
    "Card",
    "create_deck",
    "Action",
    "GameState",
    "HandCategory",
    "evaluate_hand",
    "TableConfig",
    "HoldemTrainer",
    "__version__",
]
