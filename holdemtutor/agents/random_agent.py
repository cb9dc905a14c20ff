"""
Random and calling baseline agents.

Useful for driving simulated hands in tests and for standing in for the
human seat when the trainer runs unattended.
"""

import random
from typing import Optional

from holdemtutor.agents.base import BaseAgent, Decision
from holdemtutor.core.game import Action, GameState, legal_actions
from holdemtutor.core.rules import ActionType, Seat


class RandomAgent(BaseAgent):
    """
    An agent that selects random legal actions.

    The agent has configurable tendencies:
    - fold_probability: How likely to fold when facing a bet
    - raise_probability: How likely to raise vs check/call
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        name: Optional[str] = None,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
    ):
        super().__init__(name or "Random")
        self.rng = rng or random.Random()
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability

    def decide(self, state: GameState, seat: Seat) -> Decision:
        actions = {a["type"]: a for a in legal_actions(state, seat)}
        if not actions:
            return Decision(Action.fold())

        roll = self.rng.random()

        # Only fold when there is something to call
        if ActionType.CALL.value in actions and roll < self.fold_probability:
            return Decision(Action.fold())

        if roll < self.fold_probability + self.raise_probability:
            if ActionType.RAISE.value in actions:
                raise_action = actions[ActionType.RAISE.value]
                amount = self.rng.randint(raise_action["min"], raise_action["max"])
                return Decision(Action.raise_to(amount))
            if ActionType.ALL_IN.value in actions:
                return Decision(Action.all_in())

        return Decision(_check_or_call(state, seat))


class CallAgent(BaseAgent):
    """An agent that always checks or calls (all-in when short)."""

    def __init__(self, name: Optional[str] = None):
        super().__init__(name or "Caller")

    def decide(self, state: GameState, seat: Seat) -> Decision:
        return Decision(_check_or_call(state, seat))


def _check_or_call(state: GameState, seat: Seat) -> Action:
    chips_to_call = state.amount_to_call(seat)
    if chips_to_call == 0:
        return Action.check()
    if chips_to_call > state.player(seat).chips:
        return Action.all_in()
    return Action.call()
