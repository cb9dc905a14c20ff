"""
Player state for the heads-up trainer.

A Player is an immutable snapshot of one seat:
- Chip stack
- Hole cards
- Current-round contribution and whole-hand contribution
- Folded flag

Every chip movement returns a new Player; the state machine owns the only
live copy and the AI and UI only ever read snapshots.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple

from holdemtutor.core.card import Card


@dataclass(frozen=True)
class Player:
    """
    One seat at the table.

    Attributes:
        player_id: Unique identifier ("player" or "teacher")
        name: Display name
        chips: Chips behind (not yet in the pot)
        current_bet: Amount contributed in the current betting round
        total_bet: Amount contributed in the whole hand
        hole_cards: The player's private cards (2 cards)
        folded: Whether the player has folded this hand
        is_teacher: True for the scripted opponent
    """
    player_id: str
    name: str
    chips: int
    current_bet: int = 0
    total_bet: int = 0
    hole_cards: Tuple[Card, ...] = ()
    folded: bool = False
    is_teacher: bool = False

    def bet(self, amount: int) -> Player:
        """
        Move chips from the stack into the pot.

        The amount is capped at the stack; callers decide beforehand whether
        that cap turns the action into an all-in.
        """
        if amount < 0:
            raise ValueError(f"Bet amount cannot be negative: {amount}")
        actual = min(amount, self.chips)
        return replace(
            self,
            chips=self.chips - actual,
            current_bet=self.current_bet + actual,
            total_bet=self.total_bet + actual,
        )

    def refund(self, amount: int) -> Player:
        """Return an uncalled part of the current bet to the stack."""
        if not 0 <= amount <= self.current_bet:
            raise ValueError(f"Cannot refund {amount} from a bet of {self.current_bet}")
        return replace(
            self,
            chips=self.chips + amount,
            current_bet=self.current_bet - amount,
            total_bet=self.total_bet - amount,
        )

    def win(self, amount: int) -> Player:
        """Add pot winnings to the stack."""
        return replace(self, chips=self.chips + amount)

    def fold(self) -> Player:
        return replace(self, folded=True)

    def reset_for_new_round(self) -> Player:
        """Reset the per-street contribution (flop, turn, river)."""
        return replace(self, current_bet=0)

    @property
    def is_all_in(self) -> bool:
        """No chips behind while still in the hand."""
        return self.chips == 0 and not self.folded

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.player_id,
            "name": self.name,
            "chips": self.chips,
            "bet": self.current_bet,
            "total_bet": self.total_bet,
            "folded": self.folded,
            "is_teacher": self.is_teacher,
            "cards": None,
        }

        if not hide_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"Player {self.player_id} [{cards_str}] ${self.chips}"
