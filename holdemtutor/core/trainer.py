"""
HoldemTrainer - driver for one human against the Teacher.

Owns the current GameState, the Teacher agent and the RNG, and resolves the
pending transitions the reducer schedules. Timing is left to the caller: a
UI reads ``pending.delay_ms``, waits, then calls ``resolve_pending``; a test
or script calls ``run_until_input`` and skips the waiting.

Usage:
    trainer = HoldemTrainer(TableConfig(seed=7))
    trainer.start_new_game()
    trainer.call()
    trainer.run_until_input()
"""

from __future__ import annotations
import logging
import random
from dataclasses import replace
from typing import Any, Dict, List, Optional

from holdemtutor.agents.base import BaseAgent
from holdemtutor.agents.teacher import TeacherAgent
from holdemtutor.core.errors import IllegalActionError
from holdemtutor.core.game import (
    Action, GameState, PendingTransition, apply_action, legal_actions,
    new_hand, resolve_pending,
)
from holdemtutor.core.rules import ActionType, Difficulty, Language, MessageTag, Seat, TableConfig
from holdemtutor.i18n import render_message


logger = logging.getLogger(__name__)

WIN_MESSAGES = (MessageTag.PLAYER_WINS, MessageTag.TEACHER_WINS)


class HoldemTrainer:
    """
    Single-table trainer session.

    Attributes:
        config: Table settings (stacks, blinds, difficulty, language, seed)
        rng: Source of all randomness (shuffles and Teacher decisions)
        teacher: Decision engine for the Teacher seat
        state: Current hand, or None before the first game
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        agent: Optional[BaseAgent] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or TableConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.teacher = agent or TeacherAgent(self.config.difficulty, rng=self.rng)
        self.state: Optional[GameState] = None
        self.hands_played = 0

    @property
    def language(self) -> Language:
        return self.config.language

    @property
    def difficulty(self) -> Difficulty:
        return self.config.difficulty

    def _require_state(self) -> GameState:
        if self.state is None:
            raise IllegalActionError("No game in progress, start a new game first")
        return self.state

    # ============= Game lifecycle =============

    def start_new_game(self) -> GameState:
        """Discard any hand in progress (and its pending transition) and deal a new one."""
        if self.state is not None and self.state.pending is not None:
            logger.debug(f"Discarding pending {self.state.pending.kind.value}")
        self.teacher.reset()
        self.state = new_hand(self.rng, self.config)
        self.hands_played += 1
        logger.info(f"Game #{self.hands_played} started ({self.difficulty.value})")
        return self.state

    def resolve_pending(self) -> GameState:
        """
        Resolve the scheduled transition now.

        Raises:
            IllegalActionError: If no game is running or nothing is pending
        """
        self.state = resolve_pending(self._require_state(), self.teacher)
        return self.state

    def run_until_input(self) -> GameState:
        """Resolve transitions until the human must act or the hand is over."""
        state = self._require_state()
        while state.pending is not None:
            state = self.resolve_pending()
        return state

    def cancel_pending(self) -> Optional[PendingTransition]:
        """
        Drop the scheduled transition without running it.

        The hand stays frozen until ``start_new_game``; this is what a UI
        does when it tears down its timers.
        """
        state = self._require_state()
        pending = state.pending
        if pending is not None:
            logger.debug(f"Cancelled pending {pending.kind.value}")
            self.state = replace(state, pending=None)
        return pending

    # ============= Human actions =============

    def player_action(self, action_type: ActionType, amount: int = 0) -> GameState:
        """
        Apply an action for the human seat.

        Raises:
            IllegalActionError: If the action is not legal now
        """
        state = self._require_state()
        self.state = apply_action(state, Seat.HUMAN, Action(action_type, amount))
        return self.state

    def fold(self) -> GameState:
        return self.player_action(ActionType.FOLD)

    def check(self) -> GameState:
        return self.player_action(ActionType.CHECK)

    def call(self) -> GameState:
        return self.player_action(ActionType.CALL)

    def raise_to(self, amount: int) -> GameState:
        return self.player_action(ActionType.RAISE, amount)

    def all_in(self) -> GameState:
        return self.player_action(ActionType.ALL_IN)

    def legal_actions(self) -> List[Dict[str, Any]]:
        return legal_actions(self._require_state(), Seat.HUMAN)

    # ============= Settings =============

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self.config = replace(self.config, difficulty=difficulty)
        if isinstance(self.teacher, TeacherAgent):
            self.teacher.set_difficulty(difficulty)
        logger.info(f"Difficulty set to {difficulty.value}")

    def set_language(self, language: Language) -> None:
        self.config = replace(self.config, language=language)

    # ============= Presentation =============

    def render_message(self) -> Optional[str]:
        """Current teaching message in the configured language."""
        state = self._require_state()
        description = ""
        if state.message in WIN_MESSAGES and state.result and state.result.evaluations:
            winner = state.result.winners[0]
            description = state.result.evaluations[winner].description
        return render_message(state.message, self.language, description=description)

    def get_state(self, reveal: bool = False) -> Dict[str, Any]:
        """Snapshot for the UI, with the rendered message and the human's legal actions."""
        state = self._require_state()
        snapshot = state.to_dict(reveal=reveal)
        snapshot.update({
            "message_text": self.render_message(),
            "difficulty": self.difficulty.value,
            "language": self.language.value,
            "legal_actions": legal_actions(state, Seat.HUMAN),
        })
        return snapshot
