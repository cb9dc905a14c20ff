"""
The Teacher: heuristic decision engine for the scripted opponent.

The Teacher reasons only in coarse terms:
- hand strength bucket (weak / medium / strong) from the hand evaluator,
- the amount it must call relative to its stack and to the pot (pot odds),
- an aggressiveness multiplier and a bluff roll drawn from its difficulty
  profile.

All randomness comes from the ``rng`` passed in, so a seeded
``random.Random`` pins every decision. Proposed raise sizes are increments
over the Teacher's own contribution; they are clamped to a legal action
before being returned, so the state machine never has to reject or
downgrade what the Teacher emits.
"""

from __future__ import annotations
import logging
import random
from typing import NamedTuple, Optional, Sequence

from holdemtutor.agents.base import BaseAgent, Decision
from holdemtutor.core.card import Card, Rank
from holdemtutor.core.game import Action, GameState
from holdemtutor.core.hand import HandStrength, classify_strength, evaluate_hand
from holdemtutor.core.rules import (
    DIFFICULTY_PROFILES, ActionType, Difficulty, DifficultyProfile, GamePhase,
    MessageTag, Seat, calculate_min_raise,
)


logger = logging.getLogger(__name__)


class _Intent(NamedTuple):
    """Unclamped choice: action type, raise increment and message tag."""
    action_type: ActionType
    amount: int
    message: MessageTag


class TeacherAgent(BaseAgent):
    """
    Scripted opponent that plays a simple, readable strategy.

    Difficulty scales the aggressiveness multiplier range and the bluff
    probability; hard mode also raises bigger and more often.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: Optional[random.Random] = None,
        name: Optional[str] = None,
    ):
        super().__init__(name or "Poker Master")
        self.difficulty = difficulty
        self.rng = rng or random.Random()

    @property
    def profile(self) -> DifficultyProfile:
        return DIFFICULTY_PROFILES[self.difficulty]

    def set_difficulty(self, difficulty: Difficulty) -> None:
        self.difficulty = difficulty

    def decide(self, state: GameState, seat: Seat = Seat.TEACHER) -> Decision:
        player = state.player(seat)
        evaluation = evaluate_hand(player.hole_cards, state.community_cards)
        strength = classify_strength(evaluation)

        chips_to_call = state.amount_to_call(seat)
        pot_odds = chips_to_call / (state.pot + chips_to_call) if state.pot + chips_to_call else 0.0

        profile = self.profile
        aggressiveness = self.rng.uniform(profile.aggressiveness_min, profile.aggressiveness_max)
        should_bluff = self.rng.random() < profile.bluff_chance

        if state.phase == GamePhase.PRE_FLOP:
            intent = self._pre_flop(
                player.hole_cards, chips_to_call, player.chips, aggressiveness, should_bluff
            )
        else:
            intent = self._post_flop(
                strength, chips_to_call, player.chips, state.pot,
                pot_odds, aggressiveness, should_bluff,
            )

        action = self._clamp(state, seat, intent)
        message = intent.message
        opponent_all_in = state.player(seat.opponent).chips == 0
        if action.type == ActionType.CALL and (
            intent.action_type == ActionType.RAISE
            or (opponent_all_in and message == MessageTag.RAISING)
        ):
            message = MessageTag.CALLING
        logger.debug(
            f"Teacher ({self.difficulty.value}) holds {evaluation.description} [{strength.value}], "
            f"to call ${chips_to_call}, pot odds {pot_odds:.2f}, bluff={should_bluff}: "
            f"{intent.action_type.value} {intent.amount} -> {action.type.value} {action.amount}"
        )
        return Decision(action, message)

    def _pre_flop(
        self,
        hand: Sequence[Card],
        chips_to_call: int,
        chips: int,
        aggressiveness: float,
        should_bluff: bool,
    ) -> _Intent:
        high_cards = [c for c in hand if c.rank >= Rank.JACK]
        is_pair = hand[0].rank == hand[1].rank
        is_suited = hand[0].suit == hand[1].suit
        hard = self.profile.hard_mode

        # Strong starting hands
        if is_pair or len(high_cards) == 2:
            if chips_to_call == 0:
                size = 0.15 if hard else 0.1
                return _Intent(ActionType.RAISE, int(chips * size * aggressiveness), MessageTag.STRONG_PRE_FLOP)
            re_raise_chance = 0.85 if hard else 0.7
            if self.rng.random() < re_raise_chance:
                return _Intent(ActionType.RAISE, int(chips_to_call * 2.5), MessageTag.GOOD_HAND)
            return _Intent(ActionType.CALL, chips_to_call, MessageTag.GOOD_HAND)

        # Medium hands
        if is_suited or len(high_cards) == 1:
            if chips_to_call == 0:
                if hard and self.rng.random() < 0.4:
                    return _Intent(ActionType.RAISE, int(chips * 0.08), MessageTag.MEDIUM_HAND)
                return _Intent(ActionType.CHECK, 0, MessageTag.MEDIUM_HAND)
            call_threshold = chips * (0.15 if hard else 0.1)
            if chips_to_call < call_threshold:
                return _Intent(ActionType.CALL, chips_to_call, MessageTag.CALLING)
            return _Intent(ActionType.FOLD, 0, MessageTag.FOLD)

        # Weak hands
        if should_bluff and chips_to_call == 0:
            size = 0.12 if hard else 0.05
            return _Intent(ActionType.RAISE, int(chips * size), MessageTag.BLUFF)
        if chips_to_call == 0:
            return _Intent(ActionType.CHECK, 0, MessageTag.WEAK_HAND)
        return _Intent(ActionType.FOLD, 0, MessageTag.FOLD)

    def _post_flop(
        self,
        strength: HandStrength,
        chips_to_call: int,
        chips: int,
        pot: int,
        pot_odds: float,
        aggressiveness: float,
        should_bluff: bool,
    ) -> _Intent:
        hard = self.profile.hard_mode

        if strength == HandStrength.STRONG:
            if chips_to_call == 0:
                if hard:
                    # 75%-125% of the pot
                    size = pot * (0.75 + self.rng.random() * 0.5) * aggressiveness
                else:
                    size = pot * 0.5 * aggressiveness
                return _Intent(ActionType.RAISE, int(size), MessageTag.STRONG_HAND)
            if chips_to_call < chips * 0.3:
                re_raise_chance = 0.95 if hard else 0.8
                multiplier = 2.5 if hard else 2
                if self.rng.random() < re_raise_chance:
                    return _Intent(ActionType.RAISE, int(chips_to_call * multiplier), MessageTag.RAISING)
                return _Intent(ActionType.CALL, chips_to_call, MessageTag.RAISING)
            return _Intent(ActionType.CALL, chips_to_call, MessageTag.CALLING)

        if strength == HandStrength.MEDIUM:
            if chips_to_call == 0:
                raise_chance = 0.65 if hard else 0.5
                if self.rng.random() < raise_chance:
                    size = pot * (0.5 if hard else 0.3)
                    return _Intent(ActionType.RAISE, int(size), MessageTag.MEDIUM_HAND)
                return _Intent(ActionType.CHECK, 0, MessageTag.MEDIUM_HAND)
            call_threshold = chips * (0.2 if hard else 0.15)
            if pot_odds < 0.3 or chips_to_call < call_threshold:
                return _Intent(ActionType.CALL, chips_to_call, MessageTag.CALLING)
            return _Intent(ActionType.FOLD, 0, MessageTag.FOLD)

        # Weak hands
        if should_bluff and chips_to_call == 0:
            if hard:
                # 60%-100% of the pot
                size = pot * (0.6 + self.rng.random() * 0.4)
            else:
                size = pot * 0.4
            return _Intent(ActionType.RAISE, int(size), MessageTag.BLUFF)

        if chips_to_call == 0:
            return _Intent(ActionType.CHECK, 0, MessageTag.WEAK_HAND)

        if hard and should_bluff and chips_to_call < chips * 0.15 and self.rng.random() < 0.3:
            return _Intent(ActionType.CALL, chips_to_call, MessageTag.POT_ODDS)

        if pot_odds < 0.15 and chips_to_call < chips * 0.05:
            return _Intent(ActionType.CALL, chips_to_call, MessageTag.POT_ODDS)

        return _Intent(ActionType.FOLD, 0, MessageTag.FOLD)

    def _clamp(self, state: GameState, seat: Seat, intent: _Intent) -> Action:
        """Turn an intent into an action the state machine accepts unchanged."""
        player = state.player(seat)
        chips_to_call = state.amount_to_call(seat)
        action_type = intent.action_type

        if action_type == ActionType.RAISE:
            # Nothing to raise into when the opponent has no chips behind
            if player.chips <= chips_to_call or state.player(seat.opponent).chips == 0:
                action_type = ActionType.CALL
            else:
                target = max(
                    player.current_bet + intent.amount,
                    calculate_min_raise(state.current_bet, state.big_blind),
                )
                if target >= player.chips + player.current_bet:
                    return Action.all_in()
                return Action.raise_to(target)

        if action_type == ActionType.CALL:
            if chips_to_call == 0:
                return Action.check()
            if chips_to_call >= player.chips:
                return Action.all_in() if player.chips > 0 else Action.fold()
            return Action.call()

        if action_type == ActionType.CHECK and chips_to_call > 0:
            return Action.fold()

        if action_type == ActionType.CHECK:
            return Action.check()

        return Action.fold()
