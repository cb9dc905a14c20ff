"""
Hand Evaluation for Texas Hold'em.

This module scores any set of 2-7 cards and returns the best 5-card hand.
Every evaluation carries a comparison key: a tuple whose first element is
the hand category and whose remaining elements are the tiebreak ranks in
order of significance. Comparing two keys lexicographically reproduces
standard poker ranking, kickers included.

Hand Rankings (best to worst):
1. Royal Flush: A♠ K♠ Q♠ J♠ 10♠
2. Straight Flush: 5 consecutive cards of same suit
3. Four of a Kind: 4 cards of same rank
4. Full House: 3 of a kind + pair
5. Flush: 5 cards of same suit
6. Straight: 5 consecutive cards
7. Three of a Kind: 3 cards of same rank
8. Two Pair: 2 different pairs
9. One Pair: 2 cards of same rank
10. High Card: No made hand

Note: Ace can be low in A-2-3-4-5 straight (wheel), which is 5-high.

With fewer than five cards (pre-flop, hole cards only) a degraded evaluator
looks for a pair and otherwise reports the high card.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import Enum, IntEnum
from itertools import combinations
from typing import List, Optional, Sequence, Tuple

from holdemtutor.core.card import Card, Rank
from holdemtutor.core.errors import DuplicateCardError


class HandCategory(IntEnum):
    """Hand categories from worst (lowest value) to best (highest value)."""
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


class HandStrength(str, Enum):
    """Coarse bucket the decision engine reasons with."""
    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


# Hand category names for display
HAND_CATEGORY_NAMES = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.HIGH_CARD: "High Card",
}

HAND_SIZE = 5
MAX_CARDS = 7

WHEEL_RANKS = [Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO]


@dataclass(frozen=True, eq=False)
class HandEvaluation:
    """
    The result of scoring a set of cards.

    Attributes:
        category: Hand category
        key: Comparison key, (category, tiebreak ranks...), compared as a tuple
        cards: Cards making up the hand, most significant first
        description: Human-readable description
        kickers: Ranks of the unpaired cards used only to break ties
    """
    category: HandCategory
    key: Tuple[int, ...]
    cards: Tuple[Card, ...]
    description: str
    kickers: Tuple[int, ...] = ()

    @property
    def name(self) -> str:
        return HAND_CATEGORY_NAMES[self.category]

    # Equality and ordering follow the comparison key; the chosen cards and
    # suits never break a tie
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HandEvaluation):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __lt__(self, other: HandEvaluation) -> bool:
        return self.key < other.key

    def to_dict(self) -> dict:
        return {
            "category": self.category.name,
            "name": self.name,
            "description": self.description,
            "cards": [str(c) for c in self.cards],
            "kickers": list(self.kickers),
        }


def evaluate_hand(
    hole_cards: Sequence[Card],
    community_cards: Sequence[Card] = (),
) -> HandEvaluation:
    """
    Evaluate hole cards together with the community cards.

    With 5 or more cards in total, every 5-card subset is scored (21 subsets
    for 7 cards) and the best one is returned. With fewer than 5 cards the
    degraded partial-hand evaluator is used instead.

    Raises:
        ValueError: If more than 7 cards are provided
        DuplicateCardError: If a card appears twice
    """
    cards = list(hole_cards) + list(community_cards)

    if len(cards) > MAX_CARDS:
        raise ValueError(f"Need at most {MAX_CARDS} cards, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise DuplicateCardError(f"Duplicate cards in hand: {[str(c) for c in cards]}")

    if len(cards) < HAND_SIZE:
        return _evaluate_partial(cards)

    best: Optional[HandEvaluation] = None
    for combo in combinations(cards, HAND_SIZE):
        evaluation = evaluate_five(combo)
        if best is None or evaluation.key > best.key:
            best = evaluation
    return best


def evaluate_five(cards: Sequence[Card]) -> HandEvaluation:
    """Evaluate exactly 5 cards."""
    if len(cards) != HAND_SIZE:
        raise ValueError(f"Need exactly {HAND_SIZE} cards, got {len(cards)}")

    # Sort by rank descending
    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    ranks = [c.rank for c in sorted_cards]

    is_flush = len({c.suit for c in sorted_cards}) == 1
    straight_high = _straight_high(ranks)

    rank_counts = Counter(ranks)
    counts = sorted(rank_counts.values(), reverse=True)
    grouped = _sort_by_count(sorted_cards, rank_counts)

    if straight_high is not None and is_flush:
        if straight_high == Rank.ACE:
            return _make(HandCategory.ROYAL_FLUSH, [Rank.ACE], sorted_cards)
        return _make(HandCategory.STRAIGHT_FLUSH, [straight_high], _order_straight(sorted_cards))

    if counts == [4, 1]:
        quad = _ranks_with_count(rank_counts, 4)[0]
        kicker = _ranks_with_count(rank_counts, 1)
        return _make(HandCategory.FOUR_OF_A_KIND, [quad] + kicker, grouped, kicker)

    if counts == [3, 2]:
        trips = _ranks_with_count(rank_counts, 3)[0]
        pair = _ranks_with_count(rank_counts, 2)[0]
        return _make(HandCategory.FULL_HOUSE, [trips, pair], grouped)

    if is_flush:
        return _make(HandCategory.FLUSH, ranks, sorted_cards, ranks[1:])

    if straight_high is not None:
        return _make(HandCategory.STRAIGHT, [straight_high], _order_straight(sorted_cards))

    if counts == [3, 1, 1]:
        trips = _ranks_with_count(rank_counts, 3)[0]
        kickers = _ranks_with_count(rank_counts, 1)
        return _make(HandCategory.THREE_OF_A_KIND, [trips] + kickers, grouped, kickers)

    if counts == [2, 2, 1]:
        pairs = _ranks_with_count(rank_counts, 2)
        kicker = _ranks_with_count(rank_counts, 1)
        return _make(HandCategory.TWO_PAIR, pairs + kicker, grouped, kicker)

    if counts == [2, 1, 1, 1]:
        pair = _ranks_with_count(rank_counts, 2)[0]
        kickers = _ranks_with_count(rank_counts, 1)
        return _make(HandCategory.ONE_PAIR, [pair] + kickers, grouped, kickers)

    return _make(HandCategory.HIGH_CARD, ranks, sorted_cards, ranks[1:])


def _evaluate_partial(cards: List[Card]) -> HandEvaluation:
    """
    Degraded evaluator for fewer than five cards.

    Only pairs and high cards are recognised; used for pre-flop heuristics.
    """
    if not cards:
        return HandEvaluation(HandCategory.HIGH_CARD, (int(HandCategory.HIGH_CARD),), (), "No cards")

    sorted_cards = sorted(cards, key=lambda c: c.rank, reverse=True)
    rank_counts = Counter(c.rank for c in sorted_cards)
    paired = [r for r in sorted(rank_counts, reverse=True) if rank_counts[r] >= 2]

    if paired:
        pair = paired[0]
        kickers = [c.rank for c in sorted_cards if c.rank != pair]
        pair_cards = [c for c in sorted_cards if c.rank == pair]
        return _make(HandCategory.ONE_PAIR, [pair] + kickers, pair_cards, kickers)

    ranks = [c.rank for c in sorted_cards]
    return _make(HandCategory.HIGH_CARD, ranks, sorted_cards[:1], ranks[1:])


def _make(
    category: HandCategory,
    tiebreaks: Sequence[Rank],
    cards: Sequence[Card],
    kickers: Sequence[Rank] = (),
) -> HandEvaluation:
    key = (int(category),) + tuple(int(r) for r in tiebreaks)
    return HandEvaluation(
        category=category,
        key=key,
        cards=tuple(cards),
        description=_describe(category, tiebreaks),
        kickers=tuple(int(r) for r in kickers),
    )


def _straight_high(ranks: List[Rank]) -> Optional[Rank]:
    """Return the effective high card if the ranks form a straight."""
    unique_ranks = sorted(set(ranks), reverse=True)
    if len(unique_ranks) != HAND_SIZE:
        return None

    if unique_ranks[0] - unique_ranks[4] == 4:
        return unique_ranks[0]

    if unique_ranks == WHEEL_RANKS:
        return Rank.FIVE

    return None


def _ranks_with_count(rank_counts: Counter, count: int) -> List[Rank]:
    """Ranks appearing exactly 'count' times, highest first."""
    return sorted((r for r, c in rank_counts.items() if c == count), reverse=True)


def _sort_by_count(cards: List[Card], rank_counts: Counter) -> List[Card]:
    """Sort cards by count (descending), then by rank (descending)."""
    return sorted(cards, key=lambda c: (rank_counts[c.rank], c.rank), reverse=True)


def _order_straight(cards: List[Card]) -> List[Card]:
    """Put the Ace last in a wheel (5-4-3-2-A); other straights stay as sorted."""
    if [c.rank for c in cards] != WHEEL_RANKS:
        return cards
    return cards[1:] + cards[:1]


def compare_hands(a: HandEvaluation, b: HandEvaluation) -> int:
    """
    Compare two evaluations.

    Returns:
        1 if a is better, -1 if b is better, 0 if tie
    """
    if a.key > b.key:
        return 1
    if a.key < b.key:
        return -1
    return 0


def classify_strength(evaluation: HandEvaluation) -> HandStrength:
    """Bucket an evaluation into weak / medium / strong."""
    if evaluation.category >= HandCategory.FULL_HOUSE:
        return HandStrength.STRONG
    if evaluation.category >= HandCategory.THREE_OF_A_KIND:
        return HandStrength.MEDIUM
    return HandStrength.WEAK


def get_hand_description(evaluation: HandEvaluation) -> str:
    """Get a human-readable description of the evaluated hand."""
    return evaluation.description


def _describe(category: HandCategory, tiebreaks: Sequence[Rank]) -> str:
    if category == HandCategory.ROYAL_FLUSH:
        return "Royal Flush"
    elif category == HandCategory.STRAIGHT_FLUSH:
        return f"Straight Flush, {_rank_name(tiebreaks[0])} high"
    elif category == HandCategory.FOUR_OF_A_KIND:
        return f"Four of a Kind, {_plural(tiebreaks[0])}"
    elif category == HandCategory.FULL_HOUSE:
        return f"Full House, {_plural(tiebreaks[0])} full of {_plural(tiebreaks[1])}"
    elif category == HandCategory.FLUSH:
        return f"Flush, {_rank_name(tiebreaks[0])} high"
    elif category == HandCategory.STRAIGHT:
        if tiebreaks[0] == Rank.FIVE:
            return "Straight, Five high (Wheel)"
        return f"Straight, {_rank_name(tiebreaks[0])} high"
    elif category == HandCategory.THREE_OF_A_KIND:
        return f"Three of a Kind, {_plural(tiebreaks[0])}"
    elif category == HandCategory.TWO_PAIR:
        return f"Two Pair, {_plural(tiebreaks[0])} and {_plural(tiebreaks[1])}"
    elif category == HandCategory.ONE_PAIR:
        return f"Pair of {_plural(tiebreaks[0])}"
    else:
        return f"High Card, {_rank_name(tiebreaks[0])}"


def _rank_name(rank: Rank) -> str:
    """Get the name of a rank."""
    names = {
        Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
        Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven",
        Rank.EIGHT: "Eight", Rank.NINE: "Nine", Rank.TEN: "Ten",
        Rank.JACK: "Jack", Rank.QUEEN: "Queen", Rank.KING: "King",
        Rank.ACE: "Ace"
    }
    return names[Rank(rank)]


def _plural(rank: Rank) -> str:
    return "Sixes" if rank == Rank.SIX else f"{_rank_name(rank)}s"
