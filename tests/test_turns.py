"""Очередь ходов внутри сессии."""

import pytest

from duelroom import turns
from duelroom.board import empty_board, is_empty
from duelroom.sessions import Session
from duelroom.turns import SessionState


@pytest.fixture
def active():
    return Session(id="X", participants=["q1", "q2"], turn_holder="q1")


def _board_with(row, col, value):
    board = empty_board()
    board[row][col] = value
    return board


class TestSubmitTurn:
    def test_holder_moves_and_passes_turn(self, active):
        board = _board_with(2, 3, "fire")

        assert turns.submit_turn(active, "q1", board) is True
        assert active.board[2][3] == "fire"
        assert active.turn_holder == "q2"

    def test_turn_alternates(self, active):
        turns.submit_turn(active, "q1", empty_board())
        turns.submit_turn(active, "q2", empty_board())

        assert active.turn_holder == "q1"

    def test_stale_submission_is_ignored(self, active):
        turns.submit_turn(active, "q1", _board_with(2, 3, "fire"))
        before = [list(row) for row in active.board]

        assert turns.submit_turn(active, "q1", _board_with(0, 0, "water")) is False
        assert active.board == before
        assert active.turn_holder == "q2"

    def test_outsider_is_ignored(self, active):
        assert turns.submit_turn(active, "intruder", _board_with(0, 0, "x")) is False
        assert is_empty(active.board)

    def test_waiting_session_ignores_turns(self):
        s = Session(id="X", participants=["q1"])

        assert turns.submit_turn(s, "q1", _board_with(0, 0, "x")) is False
        assert s.turn_holder is None


class TestPlaceCell:
    def test_holder_places_without_passing_turn(self, active):
        assert turns.place_cell(active, "q1", 4, 4, {"color": "red"}) is True
        assert active.board[4][4] == {"color": "red"}
        assert active.turn_holder == "q1"

    def test_clear_cell(self, active):
        turns.place_cell(active, "q1", 1, 1, "red")
        turns.place_cell(active, "q1", 1, 1, None)

        assert is_empty(active.board)

    def test_out_of_range(self, active):
        assert turns.place_cell(active, "q1", 5, 0, "red") is False
        assert turns.place_cell(active, "q1", 0, -1, "red") is False
        assert is_empty(active.board)

    def test_not_holder(self, active):
        assert turns.place_cell(active, "q2", 0, 0, "red") is False


class TestResetAndDeparture:
    def test_reset_gives_turn_to_first_seat(self, active):
        turns.submit_turn(active, "q1", _board_with(1, 1, "x"))
        turns.reset(active)

        assert is_empty(active.board)
        assert active.turn_holder == "q1"

    def test_reset_waiting_session_keeps_holder(self):
        s = Session(id="X", participants=["q1"], board=_board_with(0, 0, "x"))
        turns.reset(s)

        assert is_empty(s.board)
        assert s.turn_holder is None

    @pytest.mark.parametrize("leaver,survivor", [("q1", "q2"), ("q2", "q1")])
    def test_departure_collapses_to_survivor(self, active, leaver, survivor):
        active.board = _board_with(2, 2, "earth")

        assert turns.remove_participant(active, leaver) is True
        assert active.participants == [survivor]
        assert active.turn_holder == survivor
        assert is_empty(active.board)
        assert turns.state_of(active) is SessionState.WAITING

    def test_survivor_cannot_move_alone(self, active):
        turns.remove_participant(active, "q2")

        assert active.turn_holder == "q1"
        assert turns.submit_turn(active, "q1", _board_with(0, 0, "x")) is False
        assert turns.place_cell(active, "q1", 0, 0, "x") is False
        assert is_empty(active.board)
        assert active.turn_holder == "q1"

    def test_last_departure_terminates(self):
        s = Session(id="X", participants=["q1"], turn_holder="q1")
        turns.remove_participant(s, "q1")

        assert s.turn_holder is None
        assert turns.state_of(s) is SessionState.TERMINATED

    def test_remove_absent(self, active):
        assert turns.remove_participant(active, "ghost") is False
        assert active.participants == ["q1", "q2"]


class TestStateOf:
    def test_states(self, active):
        assert turns.state_of(None) is SessionState.TERMINATED
        assert turns.state_of(Session(id="W", participants=["q1"])) is SessionState.WAITING
        assert turns.state_of(active) is SessionState.ACTIVE

    def test_next_holder(self, active):
        assert turns.next_holder(active) == "q2"
        active.turn_holder = None
        assert turns.next_holder(active) == "q1"
