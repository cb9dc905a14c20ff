"""
Tests for the heads-up betting and phase state machine.
"""

import random
from dataclasses import replace

import pytest
from holdemtutor.agents.random_agent import CallAgent, RandomAgent
from holdemtutor.agents.teacher import TeacherAgent
from holdemtutor.core.card import create_deck, shuffle_deck
from holdemtutor.core.errors import IllegalActionError, InvariantViolation
from holdemtutor.core.game import (
    Action, apply_action, check_invariants, determine_winner, is_legal,
    legal_actions, new_hand, next_phase, resolve_pending,
)
from holdemtutor.core.hand import HandCategory
from holdemtutor.core.rules import (
    ActionType, Difficulty, GamePhase, MessageTag, PendingKind, Seat, TableConfig,
)


def clear_pending(state):
    """Stand in for the driver so the Teacher's seat can be played directly."""
    return replace(state, pending=None)


def play_out(state, human_agent, teacher_agent):
    """Run a hand to GAME_OVER, the human seat driven by ``human_agent``."""
    for _ in range(500):
        if state.is_game_over():
            return state
        if state.pending is not None:
            state = resolve_pending(state, teacher_agent)
        else:
            assert state.to_act == Seat.HUMAN
            state = apply_action(state, Seat.HUMAN, human_agent.act(state, Seat.HUMAN))
    raise AssertionError("Hand did not finish")


class TestNewHand:
    """Tests for dealing and blinds."""

    def test_blinds_posted(self, fresh_hand):
        assert fresh_hand.teacher.current_bet == 10
        assert fresh_hand.human.current_bet == 20
        assert fresh_hand.teacher.chips == 990
        assert fresh_hand.human.chips == 980
        assert fresh_hand.pot == 30
        assert fresh_hand.current_bet == 20

    def test_initial_state(self, fresh_hand):
        assert fresh_hand.phase == GamePhase.PRE_FLOP
        assert fresh_hand.to_act == Seat.HUMAN
        assert fresh_hand.pending is None
        assert fresh_hand.message == MessageTag.WELCOME
        assert fresh_hand.community_cards == ()
        assert len(fresh_hand.deck) == 48
        assert fresh_hand.total_stake == 2000

    def test_deal_order(self):
        """Human gets the first two cards, the Teacher the next two."""
        deck = shuffle_deck(create_deck(), random.Random(3))
        state = new_hand(random.Random(3))
        assert state.human.hole_cards == deck[:2]
        assert state.teacher.hole_cards == deck[2:4]
        assert state.deck == deck[4:]

    def test_same_seed_same_hand(self):
        assert new_hand(random.Random(9)) == new_hand(random.Random(9))

    def test_deck_integrity_over_many_seeds(self):
        for seed in range(300):
            state = new_hand(random.Random(seed))
            cards = list(state.deck) + list(state.human.hole_cards) + list(state.teacher.hole_cards)
            assert len(cards) == 52
            assert len(set(cards)) == 52

    def test_custom_config(self):
        config = TableConfig(starting_chips=500, small_blind=5, big_blind=10)
        state = new_hand(random.Random(1), config)
        assert state.human.chips == 490
        assert state.teacher.chips == 495
        assert state.total_stake == 1000
        assert state.big_blind == 10


class TestActionValidation:
    """Illegal actions are rejected, never coerced."""

    def test_out_of_turn(self, fresh_hand):
        with pytest.raises(IllegalActionError):
            apply_action(fresh_hand, Seat.TEACHER, Action.call())

    def test_call_with_nothing_owed(self, fresh_hand):
        # The big blind owes nothing pre-flop
        with pytest.raises(IllegalActionError):
            apply_action(fresh_hand, Seat.HUMAN, Action.call())

    def test_check_while_owing(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.check()))
        with pytest.raises(IllegalActionError):
            apply_action(state, Seat.TEACHER, Action.check())

    def test_raise_must_exceed_current_bet(self, fresh_hand):
        with pytest.raises(IllegalActionError):
            apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(20))

    def test_raise_one_chip_over_is_legal(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(21))
        assert state.current_bet == 21

    def test_acting_while_pending(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.check())
        assert state.pending.kind == PendingKind.AI_TURN
        with pytest.raises(IllegalActionError):
            apply_action(state, Seat.TEACHER, Action.call())

    def test_acting_after_fold(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.fold())
        with pytest.raises(IllegalActionError):
            apply_action(clear_pending(state), Seat.HUMAN, Action.check())

    def test_acting_after_game_over(self, fresh_hand):
        state = determine_winner(apply_action(fresh_hand, Seat.HUMAN, Action.fold()))
        assert state.is_game_over()
        with pytest.raises(IllegalActionError):
            apply_action(state, Seat.HUMAN, Action.check())

    def test_rejection_leaves_state_untouched(self, fresh_hand):
        before = fresh_hand
        with pytest.raises(IllegalActionError):
            apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(5))
        assert fresh_hand == before

    def test_is_legal(self, fresh_hand):
        assert is_legal(fresh_hand, Seat.HUMAN, Action.check())
        assert not is_legal(fresh_hand, Seat.HUMAN, Action.call())
        assert not is_legal(fresh_hand, Seat.TEACHER, Action.fold())


class TestAllInDowngrades:
    """Calls and raises the stack cannot cover become all-ins."""

    def test_raise_beyond_stack(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(5000))
        assert state.last_action.action_type == ActionType.ALL_IN
        assert state.human.chips == 0
        assert state.human.current_bet == 1000
        assert state.current_bet == 1000

    def test_call_beyond_stack(self, state_builder):
        state = state_builder(
            human_chips=50, human_bet=20, teacher_chips=1630, teacher_bet=300,
        )
        state = apply_action(state, Seat.HUMAN, Action.call())
        assert state.last_action.action_type == ActionType.ALL_IN
        assert state.last_action.amount == 50
        assert state.human.chips == 0

    def test_exact_stack_raise_is_not_downgraded(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(1000))
        assert state.last_action.action_type == ActionType.RAISE
        assert state.human.chips == 0


class TestTurnFlow:
    """Who acts next, and when the street closes."""

    def test_human_action_schedules_ai_turn(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.check())
        assert state.to_act == Seat.TEACHER
        assert state.pending.kind == PendingKind.AI_TURN
        assert state.pending.delay_ms == 1000

    def test_teacher_call_closes_street(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.check()))
        state = apply_action(state, Seat.TEACHER, Action.call())
        assert state.human.current_bet == state.teacher.current_bet == 20
        assert state.to_act is None
        assert state.pending.kind == PendingKind.NEXT_PHASE
        assert state.pending.delay_ms == 1500

    def test_teacher_raise_returns_action_to_human(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(60)))
        state = apply_action(state, Seat.TEACHER, Action.raise_to(120))
        assert state.to_act == Seat.HUMAN
        assert state.pending is None
        assert state.amount_to_call(Seat.HUMAN) == 60

    def test_teacher_acts_again_after_human_call(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(60)))
        state = apply_action(state, Seat.TEACHER, Action.raise_to(120))
        state = apply_action(state, Seat.HUMAN, Action.call())
        assert state.pending.kind == PendingKind.AI_TURN
        state = apply_action(clear_pending(state), Seat.TEACHER, Action.check())
        assert state.pending.kind == PendingKind.NEXT_PHASE
        assert state.pot == 240


class TestNextPhase:
    """Street advances."""

    def _closed_preflop(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.check()))
        return apply_action(state, Seat.TEACHER, Action.call())

    def test_flop(self, fresh_hand):
        closed = self._closed_preflop(fresh_hand)
        state = next_phase(closed)
        assert state.phase == GamePhase.FLOP
        assert state.community_cards == closed.deck[:3]
        assert len(state.deck) == 45
        assert state.current_bet == 0
        assert state.human.current_bet == state.teacher.current_bet == 0
        assert state.human.total_bet == 20
        assert state.pot == 40
        assert state.to_act == Seat.HUMAN
        assert state.pending is None
        assert state.message == MessageTag.FLOP

    def test_full_board_then_showdown(self, fresh_hand):
        state = next_phase(self._closed_preflop(fresh_hand))
        for expected_phase, board_size in ((GamePhase.TURN, 4), (GamePhase.RIVER, 5)):
            state = clear_pending(apply_action(state, Seat.HUMAN, Action.check()))
            state = next_phase(apply_action(state, Seat.TEACHER, Action.check()))
            assert state.phase == expected_phase
            assert len(state.community_cards) == board_size

        state = clear_pending(apply_action(state, Seat.HUMAN, Action.check()))
        state = next_phase(apply_action(state, Seat.TEACHER, Action.check()))
        assert state.phase == GamePhase.SHOWDOWN
        assert len(state.community_cards) == 5
        assert state.pending.kind == PendingKind.DETERMINE_WINNER
        assert state.pending.delay_ms == 1000

    def test_round_still_open(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(60))
        with pytest.raises(IllegalActionError):
            next_phase(clear_pending(state))

    def test_cannot_advance_after_game_over(self, fresh_hand):
        state = determine_winner(apply_action(fresh_hand, Seat.HUMAN, Action.fold()))
        with pytest.raises(IllegalActionError):
            next_phase(state)


class TestFold:
    """A fold short-circuits the hand."""

    def test_human_fold(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.fold())
        assert state.phase == GamePhase.SHOWDOWN
        assert state.pending.kind == PendingKind.DETERMINE_WINNER
        assert state.pending.delay_ms == 2000

        state = determine_winner(state)
        assert state.phase == GamePhase.GAME_OVER
        assert state.result.by_fold
        assert state.result.winners == (Seat.TEACHER,)
        assert state.teacher.chips == 1020
        assert state.human.chips == 980
        assert state.pot == 0
        assert state.message == MessageTag.PLAYER_FOLDED

    def test_teacher_fold(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.raise_to(100)))
        state = determine_winner(apply_action(state, Seat.TEACHER, Action.fold()))
        assert state.result.winners == (Seat.HUMAN,)
        assert state.human.chips == 1010
        assert state.teacher.chips == 990
        assert state.message == MessageTag.TEACHER_FOLDED

    def test_fold_keeps_teacher_cards_hidden(self, fresh_hand):
        state = determine_winner(apply_action(fresh_hand, Seat.HUMAN, Action.fold()))
        snapshot = state.to_dict()
        assert snapshot["players"][1]["cards"] is None
        assert snapshot["players"][0]["cards"] is not None
        assert snapshot["result"]["hands"] is None

    def test_determine_winner_outside_showdown(self, fresh_hand):
        with pytest.raises(IllegalActionError):
            determine_winner(fresh_hand)


class TestShowdown:
    """Pot resolution with both hands live."""

    def test_quad_kings_beat_aces_full(self, state_builder):
        state = state_builder(
            human="A♠ A♦", teacher="K♣ K♥", board="A♣ K♠ K♦ 2♣ 7♥",
            phase=GamePhase.SHOWDOWN, to_act=None,
            human_chips=500, teacher_chips=500, human_bet=0, teacher_bet=0,
            human_total=500, teacher_total=500,
        )
        state = determine_winner(state)

        assert state.result.winners == (Seat.TEACHER,)
        assert state.result.payouts == (0, 1000)
        human_eval, teacher_eval = state.result.evaluations
        assert human_eval.category == HandCategory.FULL_HOUSE
        assert teacher_eval.category == HandCategory.FOUR_OF_A_KIND
        assert state.teacher.chips == 1500
        assert state.message == MessageTag.TEACHER_WINS
        # Showdown reveals the Teacher's cards
        assert state.to_dict()["players"][1]["cards"] is not None

    def test_human_wins(self, state_builder):
        state = state_builder(
            human="K♣ K♥", teacher="A♠ A♦", board="A♣ K♠ K♦ 2♣ 7♥",
            phase=GamePhase.SHOWDOWN, to_act=None,
            human_chips=800, teacher_chips=800, human_bet=0, teacher_bet=0,
            human_total=200, teacher_total=200,
        )
        state = determine_winner(state)
        assert state.result.winners == (Seat.HUMAN,)
        assert state.human.chips == 1200
        assert state.message == MessageTag.PLAYER_WINS

    @pytest.mark.parametrize("human_total, teacher_total, human_share, teacher_share", [
        (250, 250, 250, 250),
        (250, 251, 250, 251),
    ])
    def test_tie_split(self, state_builder, human_total, teacher_total, human_share, teacher_share):
        """Equal hands split the pot; an odd chip goes to the Teacher."""
        state = state_builder(
            human="2h 3d", teacher="2c 3c", board="As Ks Qs Js 10s",
            phase=GamePhase.SHOWDOWN, to_act=None,
            human_chips=1000 - human_total, teacher_chips=1000 - teacher_total,
            human_bet=0, teacher_bet=0,
            human_total=human_total, teacher_total=teacher_total,
        )
        pot = state.pot
        state = determine_winner(state)

        assert state.result.is_tie
        assert state.result.payouts == (human_share, teacher_share)
        assert sum(state.result.payouts) == pot
        assert state.message == MessageTag.TIE


class TestAllInRunOut:
    """All-in handling: refunds and automatic run-outs."""

    def test_uncalled_excess_is_refunded(self, state_builder):
        state = state_builder(human_chips=1480, teacher_chips=490)
        state = clear_pending(apply_action(state, Seat.HUMAN, Action.raise_to(800)))
        state = apply_action(state, Seat.TEACHER, Action.all_in())

        assert state.teacher.chips == 0
        assert state.teacher.current_bet == 500
        assert state.human.current_bet == 500
        assert state.human.chips == 1000
        assert state.pot == 1000
        assert state.pending.kind == PendingKind.NEXT_PHASE

    def test_all_in_and_call_runs_out_board(self, fresh_hand):
        state = apply_action(fresh_hand, Seat.HUMAN, Action.all_in())
        assert state.pending.kind == PendingKind.AI_TURN
        state = apply_action(clear_pending(state), Seat.TEACHER, Action.call())
        assert state.teacher.chips == 0

        phases = []
        while state.pending is not None and state.pending.kind == PendingKind.NEXT_PHASE:
            state = next_phase(state)
            phases.append(state.phase)
        assert phases == [GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER, GamePhase.SHOWDOWN]
        assert len(state.community_cards) == 5

        state = determine_winner(state)
        assert state.human.chips + state.teacher.chips == 2000

    def test_all_in_for_less_closes_round(self, state_builder):
        state = state_builder(
            human_chips=50, human_bet=20, teacher_chips=1630, teacher_bet=300,
        )
        state = apply_action(state, Seat.HUMAN, Action.call())
        # Teacher's uncalled 230 goes back
        assert state.teacher.current_bet == 70
        assert state.pending.kind == PendingKind.NEXT_PHASE
        assert state.pot == 140

    def test_raise_into_all_in_records_kept_chips(self, state_builder):
        """Only the part of a raise the all-in side can match stays recorded."""
        state = state_builder(
            human="2s 3s", teacher="Kc Kh", board="Ks Ad As 9c 4h",
            phase=GamePhase.RIVER, to_act=Seat.TEACHER,
            human_chips=0, human_bet=100, human_total=300,
            teacher_chips=1400, teacher_bet=0, teacher_total=200,
        )
        state = apply_action(state, Seat.TEACHER, Action.raise_to(250))
        assert state.teacher.current_bet == 100
        assert state.teacher.chips == 1300
        assert state.last_action.action_type == ActionType.RAISE
        assert state.last_action.amount == 100
        assert state.pending.kind == PendingKind.NEXT_PHASE


class TestLegalActions:

    def test_big_blind_preflop(self, fresh_hand):
        actions = {a["type"]: a for a in legal_actions(fresh_hand, Seat.HUMAN)}
        assert set(actions) == {"FOLD", "CHECK", "RAISE", "ALL_IN"}
        assert actions["RAISE"]["min"] == 40
        assert actions["RAISE"]["max"] == 1000
        assert actions["ALL_IN"]["amount"] == 1000

    def test_facing_a_bet(self, fresh_hand):
        state = clear_pending(apply_action(fresh_hand, Seat.HUMAN, Action.check()))
        actions = {a["type"]: a for a in legal_actions(state, Seat.TEACHER)}
        assert actions["CALL"]["amount"] == 10
        assert "CHECK" not in actions

    def test_no_actions_out_of_turn(self, fresh_hand):
        assert legal_actions(fresh_hand, Seat.TEACHER) == []

    def test_no_raise_against_all_in_opponent(self, state_builder):
        state = state_builder(
            human="2s 3s", teacher="Kc Kh", board="Ks Ad As 9c 4h",
            phase=GamePhase.RIVER, to_act=Seat.TEACHER,
            human_chips=0, human_bet=100, human_total=300,
            teacher_chips=1400, teacher_bet=0, teacher_total=200,
        )
        types = [a["type"] for a in legal_actions(state, Seat.TEACHER)]
        assert types == ["FOLD", "CALL", "ALL_IN"]


class TestChipConservation:
    """Random legal play never creates or destroys chips."""

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_random_human_against_teacher(self, difficulty):
        for seed in range(60):
            rng = random.Random(seed)
            state = new_hand(rng)
            state = play_out(state, RandomAgent(rng), TeacherAgent(difficulty, rng=rng))
            assert state.human.chips + state.teacher.chips == 2000
            assert sum(state.result.payouts) == sum(p.total_bet for p in state.players)

    def test_random_against_random(self):
        for seed in range(150):
            rng = random.Random(seed)
            state = play_out(
                new_hand(rng),
                RandomAgent(rng, raise_probability=0.5),
                RandomAgent(rng, fold_probability=0.05),
            )
            assert state.human.chips + state.teacher.chips == 2000

    def test_calling_stations_reach_showdown(self):
        for seed in range(20):
            rng = random.Random(seed)
            state = play_out(new_hand(rng), CallAgent(), CallAgent())
            assert not state.result.by_fold
            assert len(state.community_cards) == 5
            assert state.human.chips + state.teacher.chips == 2000


class TestInvariants:

    def test_detects_created_chips(self, fresh_hand):
        broken = fresh_hand.with_player(Seat.HUMAN, fresh_hand.human.win(5))
        with pytest.raises(InvariantViolation):
            check_invariants(broken)

    def test_detects_missing_card(self, fresh_hand):
        with pytest.raises(InvariantViolation):
            check_invariants(replace(fresh_hand, deck=fresh_hand.deck[1:]))
