"""
Texas Hold'em Game Engine - Heads-up State Machine.

This module implements the betting and phase logic of the trainer as a pure
reducer over an immutable GameState:

    state = new_hand(rng)
    state = apply_action(state, Seat.HUMAN, Action.raise_to(60))
    state = resolve_pending(state, teacher_agent)   # AI_TURN
    ...

It handles:
- Blind posting and hole-card dealing
- Player actions (fold, check, call, raise, all-in) with all-in downgrades
- Turn alternation between the human and the Teacher
- Street advances (flop, turn, river) and the showdown
- Uncalled-bet refunds and run-outs when a side is all-in

Pacing between steps is never a timer here: a transition that should happen
"after a while" is stored as ``GameState.pending`` and resolved by whoever
drives the game (HoldemTrainer, the HTTP layer, or a test).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
import logging
import random

from holdemtutor.core.card import DECK_SIZE, Card, Deck, create_deck, deal_cards, shuffle_deck
from holdemtutor.core.errors import DuplicateCardError, IllegalActionError, InvariantViolation
from holdemtutor.core.hand import HandEvaluation, compare_hands, evaluate_hand
from holdemtutor.core.player import Player
from holdemtutor.core.rules import (
    BETTING_PHASES, CARDS_FOR_NEXT_PHASE, DEFAULT_BIG_BLIND, HOLE_CARDS,
    AI_TURN_DELAY_MS, FOLD_RESOLVE_DELAY_MS, NEXT_PHASE_DELAY_MS, SHOWDOWN_RESOLVE_DELAY_MS,
    ActionType, GamePhase, MessageTag, PendingKind, Seat, TableConfig,
    calculate_min_raise, split_pot,
)

if TYPE_CHECKING:
    from holdemtutor.agents.base import BaseAgent


logger = logging.getLogger(__name__)


PHASE_MESSAGES = {
    GamePhase.FLOP: MessageTag.FLOP,
    GamePhase.TURN: MessageTag.TURN,
    GamePhase.RIVER: MessageTag.RIVER,
}


@dataclass(frozen=True)
class Action:
    """A player action. ``amount`` is the raise-to total for RAISE only."""
    type: ActionType
    amount: int = 0

    @classmethod
    def fold(cls) -> Action:
        return cls(ActionType.FOLD)

    @classmethod
    def check(cls) -> Action:
        return cls(ActionType.CHECK)

    @classmethod
    def call(cls) -> Action:
        return cls(ActionType.CALL)

    @classmethod
    def raise_to(cls, amount: int) -> Action:
        return cls(ActionType.RAISE, amount)

    @classmethod
    def all_in(cls) -> Action:
        return cls(ActionType.ALL_IN)


@dataclass(frozen=True)
class PendingTransition:
    """A transition the driver should resolve after ``delay_ms``."""
    kind: PendingKind
    delay_ms: int

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "delay_ms": self.delay_ms}


@dataclass(frozen=True)
class ActionRecord:
    """An applied action, after any all-in downgrade."""
    seat: Seat
    action_type: ActionType
    amount: int  # Chips moved into the pot
    phase: GamePhase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seat": self.seat.name.lower(),
            "action": self.action_type.value,
            "amount": self.amount,
            "phase": self.phase.name,
        }


@dataclass(frozen=True)
class HandResult:
    """How the pot was resolved."""
    winners: Tuple[Seat, ...]
    payouts: Tuple[int, int]  # Indexed by Seat
    by_fold: bool
    evaluations: Optional[Tuple[HandEvaluation, HandEvaluation]] = None

    @property
    def is_tie(self) -> bool:
        return len(self.winners) == 2

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "winners": [seat.name.lower() for seat in self.winners],
            "payouts": {seat.name.lower(): self.payouts[seat] for seat in Seat},
            "by_fold": self.by_fold,
            "hands": None,
        }
        if self.evaluations:
            result["hands"] = {
                seat.name.lower(): self.evaluations[seat].to_dict() for seat in Seat
            }
        return result


@dataclass(frozen=True)
class GameState:
    """
    Complete, immutable state of one heads-up hand.

    ``pot`` always equals the sum of both players' ``total_bet`` until the
    pot is paid out, and ``sum(chips) + pot`` always equals ``total_stake``.
    """
    players: Tuple[Player, Player]
    community_cards: Tuple[Card, ...] = ()
    pot: int = 0
    current_bet: int = 0
    phase: GamePhase = GamePhase.PRE_FLOP
    deck: Deck = ()
    to_act: Optional[Seat] = Seat.HUMAN
    pending: Optional[PendingTransition] = None
    message: Optional[MessageTag] = None
    last_action: Optional[ActionRecord] = None
    result: Optional[HandResult] = None
    total_stake: int = 0
    big_blind: int = DEFAULT_BIG_BLIND

    @property
    def human(self) -> Player:
        return self.players[Seat.HUMAN]

    @property
    def teacher(self) -> Player:
        return self.players[Seat.TEACHER]

    def player(self, seat: Seat) -> Player:
        return self.players[seat]

    def with_player(self, seat: Seat, player: Player) -> GameState:
        players = list(self.players)
        players[seat] = player
        return replace(self, players=tuple(players))

    def amount_to_call(self, seat: Seat) -> int:
        return max(0, self.current_bet - self.players[seat].current_bet)

    @property
    def folded_seat(self) -> Optional[Seat]:
        for seat in Seat:
            if self.players[seat].folded:
                return seat
        return None

    def is_hand_running(self) -> bool:
        """Check if betting can still happen in this hand."""
        return self.phase in BETTING_PHASES and self.folded_seat is None

    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    def to_dict(self, reveal: bool = False) -> Dict[str, Any]:
        """
        Read-only snapshot for the UI.

        The Teacher's hole cards stay hidden until a showdown is resolved,
        unless ``reveal`` is set.
        """
        show_teacher = reveal or (
            self.result is not None and not self.result.by_fold
        )
        return {
            "phase": self.phase.name,
            "pot": self.pot,
            "current_bet": self.current_bet,
            "board": [c.to_dict() for c in self.community_cards],
            "to_act": self.to_act.name.lower() if self.to_act is not None else None,
            "pending": self.pending.to_dict() if self.pending else None,
            "message": self.message.value if self.message else None,
            "last_action": self.last_action.to_dict() if self.last_action else None,
            "players": [
                self.human.to_dict(hide_cards=False),
                self.teacher.to_dict(hide_cards=not show_teacher),
            ],
            "result": self.result.to_dict() if self.result else None,
            "deck_remaining": len(self.deck),
        }


def new_hand(rng: random.Random, config: Optional[TableConfig] = None) -> GameState:
    """
    Start a new hand from scratch.

    The deck is shuffled with ``rng``; the human is dealt first, then the
    Teacher. The Teacher posts the small blind and the human the big blind,
    and the human acts first.
    """
    config = config or TableConfig()

    deck = shuffle_deck(create_deck(), rng)
    human_cards, deck = deal_cards(deck, HOLE_CARDS)
    teacher_cards, deck = deal_cards(deck, HOLE_CARDS)

    human = Player("player", "You", config.starting_chips, hole_cards=human_cards)
    teacher = Player(
        "teacher", "Poker Master", config.starting_chips,
        hole_cards=teacher_cards, is_teacher=True,
    )

    # Post blinds
    teacher = teacher.bet(config.small_blind)
    human = human.bet(config.big_blind)

    state = GameState(
        players=(human, teacher),
        pot=human.total_bet + teacher.total_bet,
        current_bet=max(human.current_bet, teacher.current_bet),
        phase=GamePhase.PRE_FLOP,
        deck=deck,
        to_act=Seat.HUMAN,
        message=MessageTag.WELCOME,
        total_stake=config.total_stake,
        big_blind=config.big_blind,
    )

    logger.info(
        f"New hand: SB={teacher.current_bet} (teacher) BB={human.current_bet} (player)"
    )
    check_invariants(state)
    return state


def validate_action(state: GameState, seat: Seat, action: Action) -> Action:
    """
    Check an action and return the action that will actually be applied.

    Calls and raises the stack cannot cover come back as ALL_IN.

    Raises:
        IllegalActionError: If the action is not legal for ``seat`` now
    """
    if not state.is_hand_running():
        raise IllegalActionError(f"No betting allowed in phase {state.phase.name}")
    if state.pending is not None:
        raise IllegalActionError(
            f"Cannot act while {state.pending.kind.value} is pending"
        )
    if state.to_act != seat:
        raise IllegalActionError(f"It is not {seat.name.lower()}'s turn to act")

    player = state.players[seat]
    chips_to_call = state.amount_to_call(seat)

    if action.type == ActionType.FOLD:
        return action

    if action.type == ActionType.CHECK:
        if chips_to_call > 0:
            raise IllegalActionError(f"Cannot check, must call ${chips_to_call}")
        return action

    if action.type == ActionType.CALL:
        if chips_to_call <= 0:
            raise IllegalActionError("Nothing to call, use CHECK")
        if chips_to_call > player.chips:
            return Action.all_in()
        return action

    if action.type == ActionType.RAISE:
        if action.amount <= state.current_bet:
            raise IllegalActionError(
                f"Raise must exceed the current bet of ${state.current_bet}"
            )
        if action.amount - player.current_bet > player.chips:
            if player.chips == 0:
                raise IllegalActionError("No chips left to raise with")
            return Action.all_in()
        return action

    if action.type == ActionType.ALL_IN:
        if player.chips == 0:
            raise IllegalActionError("Already all-in")
        return action

    raise IllegalActionError(f"Unknown action: {action.type}")


def is_legal(state: GameState, seat: Seat, action: Action) -> bool:
    """True if ``action`` would be accepted (possibly downgraded to all-in)."""
    try:
        validate_action(state, seat, action)
    except IllegalActionError:
        return False
    return True


def apply_action(state: GameState, seat: Seat, action: Action) -> GameState:
    """
    Apply an action for ``seat`` and return the next state.

    Raises:
        IllegalActionError: If the action is not legal
    """
    action = validate_action(state, seat, action)
    player = state.players[seat]
    previous_bet = state.current_bet

    if action.type == ActionType.FOLD:
        state = replace(
            state.with_player(seat, player.fold()),
            phase=GamePhase.SHOWDOWN,
            to_act=None,
            pending=PendingTransition(PendingKind.DETERMINE_WINNER, FOLD_RESOLVE_DELAY_MS),
            last_action=ActionRecord(seat, ActionType.FOLD, 0, state.phase),
        )
        logger.debug(f"{seat.name.lower()} folds")
        check_invariants(state)
        return state

    if action.type == ActionType.CHECK:
        updated = player
    elif action.type == ActionType.CALL:
        updated = player.bet(state.amount_to_call(seat))
    elif action.type == ActionType.RAISE:
        updated = player.bet(action.amount - player.current_bet)
    else:
        updated = player.bet(player.chips)

    moved = updated.total_bet - player.total_bet
    state = replace(
        state.with_player(seat, updated),
        pot=state.pot + moved,
        current_bet=max(state.current_bet, updated.current_bet),
        last_action=ActionRecord(seat, action.type, moved, state.phase),
    )
    logger.debug(f"{seat.name.lower()} {action.type.value} moves ${moved}, pot ${state.pot}")

    state = _next_to_act(state, seat, raised=state.current_bet > previous_bet)

    # Record what stayed in the pot after any uncalled-bet refund
    kept = state.players[seat].total_bet - player.total_bet
    if kept != moved:
        state = replace(state, last_action=replace(state.last_action, amount=kept))
    check_invariants(state)
    return state


def _next_to_act(state: GameState, seat: Seat, raised: bool) -> GameState:
    """
    Decide who acts next after ``seat`` acted.

    A raise always hands the action to the opponent. After the human acts the
    Teacher responds; after the Teacher acts the street ends once both
    contributions match.
    """
    if _closed_by_all_in(state):
        return _close_round(state)

    if seat == Seat.HUMAN:
        return replace(
            state,
            to_act=Seat.TEACHER,
            pending=PendingTransition(PendingKind.AI_TURN, AI_TURN_DELAY_MS),
        )

    if raised:
        return replace(state, to_act=Seat.HUMAN, pending=None)

    if state.human.current_bet == state.teacher.current_bet:
        return replace(
            state,
            to_act=None,
            pending=PendingTransition(PendingKind.NEXT_PHASE, NEXT_PHASE_DELAY_MS),
        )

    return replace(state, to_act=Seat.HUMAN, pending=None)


def _closed_by_all_in(state: GameState) -> bool:
    """A side is all-in and the other side has matched or exceeded it."""
    for seat in Seat:
        if state.players[seat].is_all_in:
            other = state.players[seat.opponent]
            if other.current_bet >= state.players[seat].current_bet:
                return True
    return False


def _close_round(state: GameState) -> GameState:
    """Refund any uncalled excess and schedule the next street."""
    human, teacher = state.players
    excess = abs(human.current_bet - teacher.current_bet)
    if excess:
        over = Seat.HUMAN if human.current_bet > teacher.current_bet else Seat.TEACHER
        refunded = state.players[over].refund(excess)
        state = replace(
            state.with_player(over, refunded),
            pot=state.pot - excess,
            current_bet=refunded.current_bet,
        )
        logger.debug(f"Returned uncalled ${excess} to {over.name.lower()}")

    return replace(
        state,
        to_act=None,
        pending=PendingTransition(PendingKind.NEXT_PHASE, NEXT_PHASE_DELAY_MS),
    )


def next_phase(state: GameState) -> GameState:
    """
    Advance to the next street.

    Reveals 3 / 1 / 1 community cards, resets both contributions and the
    current bet, and gives the human the first action. From the river the
    hand moves to SHOWDOWN and schedules the pot resolution. When a side is
    all-in, the following street is scheduled straight away.

    Raises:
        IllegalActionError: Outside a betting phase or with the round still open
    """
    if not state.is_hand_running():
        raise IllegalActionError(f"Cannot advance from phase {state.phase.name}")
    if state.human.current_bet != state.teacher.current_bet and not _closed_by_all_in(state):
        raise IllegalActionError("Betting round is not complete")
    if state.pending is not None and state.pending.kind != PendingKind.NEXT_PHASE:
        raise IllegalActionError(f"Cannot advance while {state.pending.kind.value} is pending")

    if _closed_by_all_in(state) and state.human.current_bet != state.teacher.current_bet:
        state = _close_round(state)

    new_phase, num_cards = CARDS_FOR_NEXT_PHASE[state.phase]
    dealt, deck = deal_cards(state.deck, num_cards)

    state = replace(
        state,
        players=tuple(p.reset_for_new_round() for p in state.players),
        community_cards=state.community_cards + dealt,
        deck=deck,
        current_bet=0,
        phase=new_phase,
    )
    logger.info(
        f"Phase {new_phase.name}: board {' '.join(str(c) for c in state.community_cards)}"
    )

    if new_phase == GamePhase.SHOWDOWN:
        state = replace(
            state,
            to_act=None,
            pending=PendingTransition(PendingKind.DETERMINE_WINNER, SHOWDOWN_RESOLVE_DELAY_MS),
        )
    elif any(p.is_all_in for p in state.players):
        # Nobody can bet any more; run out the board
        state = replace(
            state,
            to_act=None,
            pending=PendingTransition(PendingKind.NEXT_PHASE, NEXT_PHASE_DELAY_MS),
            message=PHASE_MESSAGES[new_phase],
        )
    else:
        state = replace(
            state,
            to_act=Seat.HUMAN,
            pending=None,
            message=PHASE_MESSAGES[new_phase],
        )

    check_invariants(state)
    return state


def determine_winner(state: GameState) -> GameState:
    """
    Resolve the pot at showdown.

    A folded side forfeits the pot without a hand comparison. Otherwise both
    hands are evaluated; the better one takes the pot and equal hands split
    it with ``split_pot`` (odd chip to the Teacher).

    Raises:
        IllegalActionError: If the hand is not at SHOWDOWN
    """
    if state.phase != GamePhase.SHOWDOWN:
        raise IllegalActionError(f"Cannot determine winner in phase {state.phase.name}")

    pot = state.pot
    folded = state.folded_seat
    evaluations = None

    if folded is not None:
        winners: Tuple[Seat, ...] = (folded.opponent,)
        payouts = [0, 0]
        payouts[folded.opponent] = pot
        message = MessageTag.PLAYER_FOLDED if folded == Seat.HUMAN else MessageTag.TEACHER_FOLDED
    else:
        evaluations = tuple(
            evaluate_hand(p.hole_cards, state.community_cards) for p in state.players
        )
        comparison = compare_hands(evaluations[Seat.HUMAN], evaluations[Seat.TEACHER])
        if comparison > 0:
            winners, payouts, message = (Seat.HUMAN,), [pot, 0], MessageTag.PLAYER_WINS
        elif comparison < 0:
            winners, payouts, message = (Seat.TEACHER,), [0, pot], MessageTag.TEACHER_WINS
        else:
            winners, payouts, message = (Seat.HUMAN, Seat.TEACHER), list(split_pot(pot)), MessageTag.TIE

    result = HandResult(
        winners=winners,
        payouts=(payouts[0], payouts[1]),
        by_fold=folded is not None,
        evaluations=evaluations,
    )
    state = replace(
        state,
        players=tuple(p.win(payouts[seat]) for seat, p in zip(Seat, state.players)),
        pot=0,
        phase=GamePhase.GAME_OVER,
        to_act=None,
        pending=None,
        result=result,
        message=message,
    )

    logger.info(
        f"Hand over: winners={[s.name.lower() for s in winners]} payouts={result.payouts}"
        + (f" ({evaluations[0].description} vs {evaluations[1].description})" if evaluations else " (fold)")
    )
    check_invariants(state)
    return state


def resolve_pending(state: GameState, agent: BaseAgent) -> GameState:
    """
    Resolve the scheduled transition, ignoring its delay.

    Args:
        state: State with a pending transition
        agent: Decision engine used for AI_TURN

    Raises:
        IllegalActionError: If nothing is pending
    """
    if state.pending is None:
        raise IllegalActionError("No transition is pending")

    kind = state.pending.kind
    state = replace(state, pending=None)

    if kind == PendingKind.AI_TURN:
        decision = agent.decide(state, Seat.TEACHER)
        state = apply_action(state, Seat.TEACHER, decision.action)
        return replace(state, message=decision.message or state.message)
    if kind == PendingKind.NEXT_PHASE:
        return next_phase(state)
    return determine_winner(state)


def legal_actions(state: GameState, seat: Seat) -> List[Dict[str, Any]]:
    """
    Get legal actions for ``seat``.

    Returns:
        List of action dicts with type and constraints
    """
    try:
        validate_action(state, seat, Action.fold())
    except IllegalActionError:
        return []

    player = state.players[seat]
    chips_to_call = state.amount_to_call(seat)

    actions: List[Dict[str, Any]] = [{"type": ActionType.FOLD.value}]

    if chips_to_call == 0:
        actions.append({"type": ActionType.CHECK.value})
    else:
        actions.append({
            "type": ActionType.CALL.value,
            "amount": min(chips_to_call, player.chips),
        })

    max_raise = player.chips + player.current_bet
    opponent_can_respond = state.players[seat.opponent].chips > 0
    if player.chips > chips_to_call and opponent_can_respond:
        actions.append({
            "type": ActionType.RAISE.value,
            "min": min(calculate_min_raise(state.current_bet, state.big_blind), max_raise),
            "max": max_raise,
        })

    if player.chips > 0:
        actions.append({
            "type": ActionType.ALL_IN.value,
            "amount": max_raise,
        })

    return actions


def check_invariants(state: GameState) -> None:
    """
    Verify chip conservation and deck integrity.

    Raises:
        InvariantViolation: On any broken invariant
    """
    for player in state.players:
        if player.chips < 0 or player.current_bet < 0:
            raise InvariantViolation(f"Negative chips for {player.player_id}: {player!r}")

    if state.phase != GamePhase.GAME_OVER:
        contributed = sum(p.total_bet for p in state.players)
        if state.pot != contributed:
            raise InvariantViolation(f"Pot ${state.pot} != contributions ${contributed}")

    total = sum(p.chips for p in state.players) + state.pot
    if total != state.total_stake:
        raise InvariantViolation(f"Chips not conserved: ${total} != ${state.total_stake}")

    cards = list(state.deck) + list(state.community_cards)
    for player in state.players:
        cards.extend(player.hole_cards)
    if len(set(cards)) != len(cards):
        raise DuplicateCardError("Duplicate card in deck, board or hands")
    if len(cards) != DECK_SIZE:
        raise InvariantViolation(f"Expected {DECK_SIZE} cards in play, found {len(cards)}")
