"""
Base Agent Interface for HoldemTutor.

This module defines the abstract base class for anything that picks actions
for a seat: the Teacher's heuristic engine and the baseline agents used in
simulations and tests.

Agents only read the GameState they are given. They return a Decision whose
action the state machine must accept as-is; clamping to the seat's stack is
the agent's job.

Usage:
    class MyAgent(BaseAgent):
        def decide(self, state, seat):
            return Decision(Action.call())
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from holdemtutor.core.game import Action, GameState
from holdemtutor.core.rules import MessageTag, Seat


@dataclass(frozen=True)
class Decision:
    """An action plus the teaching-message tag explaining it."""
    action: Action
    message: Optional[MessageTag] = None


class BaseAgent(ABC):
    """
    Abstract base class for poker agents.

    Attributes:
        name: Human-readable name
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__

    @abstractmethod
    def decide(self, state: GameState, seat: Seat) -> Decision:
        """
        Choose an action for ``seat`` in ``state``.

        Must return an action that ``apply_action`` accepts without an
        all-in downgrade.
        """

    def act(self, state: GameState, seat: Seat) -> Action:
        """Convenience wrapper returning only the action."""
        return self.decide(state, seat).action

    def reset(self) -> None:
        """
        Reset the agent's internal state for a new hand.

        Override this method if your agent maintains state between hands.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
