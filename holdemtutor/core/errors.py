"""
Error taxonomy for the trainer core.

Two families:
- IllegalActionError: the caller broke the action contract (checking while
  a bet is outstanding, acting out of turn, acting after the hand ended).
  These are rejected, never coerced.
- InvariantViolation: the engine itself is in an impossible state (deck
  underflow, duplicate cards, chips created or destroyed). These are bugs
  and must surface immediately.
"""


class PokerError(Exception):
    """Base class for all trainer errors."""


class IllegalActionError(PokerError, ValueError):
    """An action that is not legal in the current state."""


class InvariantViolation(PokerError, AssertionError):
    """A broken engine invariant (programmer error)."""


class InsufficientCardsError(InvariantViolation):
    """More cards were requested than remain in the deck."""

    def __init__(self, requested: int, remaining: int):
        super().__init__(f"Cannot deal {requested} cards, only {remaining} remain")
        self.requested = requested
        self.remaining = remaining


class DuplicateCardError(InvariantViolation):
    """The same card appears twice where all cards must be distinct."""
