"""
Card and deck model for Texas Hold'em.

Cards are immutable value objects compared by (rank, suit). A deck is a plain
tuple of cards: it is created fresh for every hand, permuted once with an
injected random source, and consumed by sequential deals. Nothing here keeps
hidden state, so the state machine can hold the remaining deck inside its
immutable GameState.
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Sequence, Tuple

from holdemtutor.core.errors import InsufficientCardsError


class Suit(IntEnum):
    """Card suits in canonical deck order."""
    HEARTS = 0    # ♥
    DIAMONDS = 1  # ♦
    CLUBS = 2     # ♣
    SPADES = 3    # ♠


class Rank(IntEnum):
    """Card ranks, valued 2 (lowest) to 14 (Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


# String mappings
SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.HEARTS: "h",
    Suit.DIAMONDS: "d",
    Suit.CLUBS: "c",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "10",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_RANK["T"] = Rank.TEN  # Also accept "T"
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    """
    A playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10h")
      or Card.from_string("A♠")
    """

    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        # Normalise plain ints to enums; frozen, so go through object.__setattr__
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "10d", "2c" (rank + suit char)
        - "A♠", "K♥", "10♦", "2♣" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_part, suit_part = s[:-1].upper(), s[-1]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(CHAR_TO_RANK[rank_part], suit)

    @property
    def value(self) -> int:
        """Numeric rank value, 2..14."""
        return int(self.rank)

    @property
    def id(self) -> str:
        """Stable identifier such as 'spades-A'."""
        return f"{self.suit.name.lower()}-{RANK_CHARS[self.rank]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', '10h'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def __lt__(self, other: Card) -> bool:
        """Order by rank, then suit, consistent with equality."""
        return (self.rank, self.suit) < (other.rank, other.suit)

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "rank": RANK_CHARS[self.rank],
            "suit": self.suit.name.lower(),
            "text": str(self),
            "color": self.color,
        }


Deck = Tuple[Card, ...]


def create_deck() -> Deck:
    """Return the 52 cards in canonical order (suit by suit, ranks ascending)."""
    return tuple(Card(rank, suit) for suit in Suit for rank in Rank)


def shuffle_deck(deck: Sequence[Card], rng: random.Random) -> Deck:
    """
    Return a uniformly random permutation of the deck.

    The caller supplies the random source so a seeded ``random.Random`` pins
    the resulting order. The input sequence is left untouched.
    """
    cards = list(deck)
    rng.shuffle(cards)
    return tuple(cards)


def deal_cards(deck: Sequence[Card], n: int) -> Tuple[Deck, Deck]:
    """
    Deal n cards from the top of the deck.

    Returns:
        Tuple of (dealt cards, remaining deck)

    Raises:
        InsufficientCardsError: If not enough cards remain.
    """
    if n < 0:
        raise ValueError(f"Cannot deal a negative number of cards: {n}")
    if n > len(deck):
        raise InsufficientCardsError(n, len(deck))
    return tuple(deck[:n]), tuple(deck[n:])


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" or "As 10h" (space-separated)
    - "AsKhTd" (no separator, 2 chars each; use "T" for ten)
    - "A♠ K♥ T♦" (with symbols)
    """
    cards_str = cards_str.strip()

    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result
