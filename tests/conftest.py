"""
Pytest configuration and shared fixtures for HoldemTutor tests.
"""

import random

import pytest
from holdemtutor.core.card import Card, Rank, Suit, create_deck, parse_cards
from holdemtutor.core.game import GameState, check_invariants, new_hand
from holdemtutor.core.player import Player
from holdemtutor.core.rules import GamePhase, Seat, TableConfig


def make_state(
    human="As Ad",
    teacher="Kc Kh",
    board="",
    phase=GamePhase.PRE_FLOP,
    human_chips=980,
    teacher_chips=990,
    human_bet=20,
    teacher_bet=10,
    human_total=None,
    teacher_total=None,
    to_act=Seat.HUMAN,
    **overrides,
):
    """
    Build a consistent GameState from card strings and stack numbers.

    The deck holds every card not in a hand or on the board, in canonical
    order, and ``total_stake`` is whatever the chips and pot add up to.
    Totals default to the current-street bets.
    """
    human_cards = tuple(parse_cards(human))
    teacher_cards = tuple(parse_cards(teacher))
    board_cards = tuple(parse_cards(board)) if board else ()
    used = set(human_cards) | set(teacher_cards) | set(board_cards)

    human_total = human_bet if human_total is None else human_total
    teacher_total = teacher_bet if teacher_total is None else teacher_total

    players = (
        Player("player", "You", human_chips, human_bet, human_total, human_cards),
        Player("teacher", "Poker Master", teacher_chips, teacher_bet, teacher_total,
               teacher_cards, is_teacher=True),
    )
    pot = human_total + teacher_total
    fields = dict(
        players=players,
        community_cards=board_cards,
        pot=pot,
        current_bet=max(human_bet, teacher_bet),
        phase=phase,
        deck=tuple(c for c in create_deck() if c not in used),
        to_act=to_act,
        total_stake=human_chips + teacher_chips + pot,
    )
    fields.update(overrides)
    state = GameState(**fields)
    check_invariants(state)
    return state


@pytest.fixture
def state_builder():
    """The make_state helper, for tests that set up exact positions."""
    return make_state


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def config():
    """Default table: 1000 chips each, blinds 10/20."""
    return TableConfig()


@pytest.fixture
def fresh_hand(rng, config):
    """A newly dealt hand with blinds posted."""
    return new_hand(rng, config)


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
