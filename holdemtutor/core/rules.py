"""
Texas Hold'em Rules and Constants for the heads-up trainer.

Table rules for the trainer:

1. Two seats only: the human and the Teacher. The Teacher posts the small
   blind, the human posts the big blind, and the human acts first on every
   street.

2. A raise names the new total contribution ("raise to"). It must exceed the
   current bet. A raise or call the stack cannot cover becomes an all-in.

3. Streets reveal 3 / 1 / 1 community cards. No burn cards are used.

4. Split pots: the human seat is resolved first and receives the floor of
   half the pot; the Teacher receives the remainder, so any odd chip goes
   to the Teacher.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Dict, Optional, Tuple


class GamePhase(Enum):
    """Phases of a Texas Hold'em hand."""
    PRE_FLOP = auto()   # After hole cards dealt, before flop
    FLOP = auto()       # After 3 community cards
    TURN = auto()       # After 4th community card
    RIVER = auto()      # After 5th community card
    SHOWDOWN = auto()   # Determine winner
    GAME_OVER = auto()  # Pot resolved, hand complete


BETTING_PHASES = (GamePhase.PRE_FLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)


class ActionType(Enum):
    """Possible player actions."""
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"
    ALL_IN = "ALL_IN"


class Seat(IntEnum):
    """Seat index into GameState.players."""
    HUMAN = 0
    TEACHER = 1

    @property
    def opponent(self) -> Seat:
        return Seat.TEACHER if self == Seat.HUMAN else Seat.HUMAN


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Language(Enum):
    EN = "en"
    ES = "es"


class PendingKind(Enum):
    """Transitions the core schedules instead of running on a timer."""
    AI_TURN = "AI_TURN"
    NEXT_PHASE = "NEXT_PHASE"
    DETERMINE_WINNER = "DETERMINE_WINNER"


class MessageTag(Enum):
    """Teaching-message context tags; text lives in holdemtutor.i18n."""
    WELCOME = "welcome"
    STRONG_PRE_FLOP = "strongPreFlop"
    GOOD_HAND = "goodHand"
    MEDIUM_HAND = "mediumHand"
    WEAK_HAND = "weakHand"
    STRONG_HAND = "strongHand"
    CALLING = "calling"
    RAISING = "raising"
    BLUFF = "bluff"
    FOLD = "fold"
    POT_ODDS = "potOdds"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"
    PLAYER_FOLDED = "playerFolded"
    TEACHER_FOLDED = "teacherFolded"
    PLAYER_WINS = "playerWins"
    TEACHER_WINS = "teacherWins"
    TIE = "tie"


@dataclass(frozen=True)
class DifficultyProfile:
    """AI tuning for one difficulty level."""
    aggressiveness_min: float
    aggressiveness_max: float
    bluff_chance: float
    hard_mode: bool = False


DIFFICULTY_PROFILES: Dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(0.5, 0.8, 0.05),
    Difficulty.MEDIUM: DifficultyProfile(0.7, 1.1, 0.15),
    Difficulty.HARD: DifficultyProfile(1.2, 2.0, 0.40, hard_mode=True),
}


# Default game settings
DEFAULT_STARTING_CHIPS = 1000
DEFAULT_SMALL_BLIND = 10
DEFAULT_BIG_BLIND = 20
NUM_SEATS = 2

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1

CARDS_FOR_NEXT_PHASE: Dict[GamePhase, Tuple[GamePhase, int]] = {
    GamePhase.PRE_FLOP: (GamePhase.FLOP, FLOP_CARDS),
    GamePhase.FLOP: (GamePhase.TURN, TURN_CARDS),
    GamePhase.TURN: (GamePhase.RIVER, RIVER_CARDS),
    GamePhase.RIVER: (GamePhase.SHOWDOWN, 0),
}

# Pacing delays (ms) attached to pending transitions
AI_TURN_DELAY_MS = 1000
NEXT_PHASE_DELAY_MS = 1500
FOLD_RESOLVE_DELAY_MS = 2000
SHOWDOWN_RESOLVE_DELAY_MS = 1000

ENV_PREFIX = "HOLDEMTUTOR_"


@dataclass(frozen=True)
class TableConfig:
    """Table settings for a trainer session."""
    starting_chips: int = DEFAULT_STARTING_CHIPS
    small_blind: int = DEFAULT_SMALL_BLIND
    big_blind: int = DEFAULT_BIG_BLIND
    difficulty: Difficulty = Difficulty.MEDIUM
    language: Language = Language.EN
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not 0 < self.small_blind <= self.big_blind:
            raise ValueError("Blinds must satisfy 0 < small_blind <= big_blind")
        if self.starting_chips <= self.big_blind:
            raise ValueError("starting_chips must exceed the big blind")

    @property
    def total_stake(self) -> int:
        return self.starting_chips * NUM_SEATS

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> TableConfig:
        """
        Build a config from HOLDEMTUTOR_* environment variables.

        Recognised: STARTING_CHIPS, SMALL_BLIND, BIG_BLIND, DIFFICULTY,
        LANGUAGE, SEED. Missing variables keep their defaults.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            return env.get(ENV_PREFIX + name)

        kwargs = {}
        for name, field_name in (
            ("STARTING_CHIPS", "starting_chips"),
            ("SMALL_BLIND", "small_blind"),
            ("BIG_BLIND", "big_blind"),
            ("SEED", "seed"),
        ):
            value = get(name)
            if value is not None:
                kwargs[field_name] = int(value)
        if get("DIFFICULTY"):
            kwargs["difficulty"] = Difficulty(get("DIFFICULTY").lower())
        if get("LANGUAGE"):
            kwargs["language"] = Language(get("LANGUAGE").lower())
        return cls(**kwargs)


def split_pot(pot: int) -> Tuple[int, int]:
    """
    Split a tied pot between the two seats.

    Returns:
        Tuple of (human share, teacher share); the odd chip goes to the Teacher.
    """
    if pot < 0:
        raise ValueError(f"Pot cannot be negative: {pot}")
    human_share = pot // 2
    return human_share, pot - human_share


def calculate_min_raise(current_bet: int, big_blind: int) -> int:
    """
    Smallest sensible raise-to amount: one big blind over the current bet.

    The state machine only requires a raise to exceed the current bet; this
    is the sizing floor the Teacher uses and the UI offers as the minimum.
    """
    return current_bet + big_blind
