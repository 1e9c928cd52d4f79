import threading

from logic.ai_player import AIPlayer
from logic.game_state import GameStateHolder, GameStatus, Mark
from pipeline.events import Phase
from pipeline.orchestrator import TurnOrchestrator

from conftest import parse_board


def record(orchestrator):
    events = []
    orchestrator.subscribe(events.append)
    return events


def steps(events):
    return [(e.agent, e.phase) for e in events]


def test_center_opening_gets_ai_reply(orchestrator):
    result = orchestrator.process_turn(4)

    assert result.error is None
    assert result.ai_move == 0
    assert result.winning_line is None
    state = result.state
    assert sum(cell is not None for cell in state.board) == 2
    assert state.board[4] == Mark.X
    assert state.board[0] == Mark.O
    assert state.status == GameStatus.ONGOING
    assert state.move_count == 2
    assert state.current_player == Mark.X


def test_human_win_stops_before_ai(make_orchestrator):
    orchestrator = make_orchestrator("XX_ OO_ ___")
    result = orchestrator.process_turn(2)

    assert result.state.status == GameStatus.WIN
    assert result.state.winner == Mark.X
    assert result.state.winning_line == (0, 1, 2)
    assert result.winning_line == (0, 1, 2)
    assert result.ai_move is None
    assert result.state.move_count == 5
    assert orchestrator.get_state().status == GameStatus.WIN


def test_human_fills_last_cell_for_draw(make_orchestrator):
    orchestrator = make_orchestrator("XOX XOO OX_")
    result = orchestrator.process_turn(8)

    assert result.state.status == GameStatus.DRAW
    assert result.state.winner is None
    assert result.state.winning_line is None
    assert result.winning_line is None
    assert result.ai_move is None


def test_ai_win(make_orchestrator):
    orchestrator = make_orchestrator("X__ _O_ XO_")
    result = orchestrator.process_turn(5)

    assert result.ai_move == 1
    assert result.state.status == GameStatus.WIN
    assert result.state.winner == Mark.O
    assert result.winning_line == (1, 4, 7)


def test_out_of_range_rejected(orchestrator):
    result = orchestrator.process_turn(9)

    assert "out of range" in result.error
    assert "9" in result.error
    assert result.state.board == [None] * 9
    assert orchestrator.get_state().board == [None] * 9


def test_occupied_cell_rejected(orchestrator):
    orchestrator.process_turn(0)
    before = orchestrator.get_state()

    result = orchestrator.process_turn(0)

    assert result.error == "Cell 0 is already occupied by 'X'."
    after = orchestrator.get_state()
    assert after.board == before.board
    assert after.move_count == before.move_count
    assert after.current_player == before.current_player


def test_move_after_game_over_rejected(make_orchestrator):
    orchestrator = make_orchestrator("XX_ OO_ ___")
    orchestrator.process_turn(2)

    result = orchestrator.process_turn(5)

    assert "already over" in result.error
    assert orchestrator.get_state().board[5] is None


def test_string_position_accepted(orchestrator):
    result = orchestrator.process_turn("4")
    assert result.error is None
    assert result.state.board[4] == Mark.X


def test_reset(make_orchestrator):
    orchestrator = make_orchestrator("XX_ OO_ ___")
    orchestrator.process_turn(2)
    events = record(orchestrator)

    result = orchestrator.reset_turn()

    state = result.state
    assert state.board == [None] * 9
    assert state.current_player == Mark.X
    assert state.status == GameStatus.ONGOING
    assert state.winner is None
    assert state.winning_line is None
    assert state.move_count == 0
    assert result.ai_move is None
    assert steps(events) == [
        ("Orchestrator", Phase.STARTED),
        ("GameStateHolder", Phase.STARTED),
        ("GameStateHolder", Phase.SUCCEEDED),
        ("Orchestrator", Phase.SUCCEEDED),
    ]


def test_events_for_full_turn(orchestrator):
    events = record(orchestrator)
    orchestrator.process_turn(4)

    assert steps(events) == [
        ("Orchestrator", Phase.STARTED),
        ("MoveValidator", Phase.STARTED),
        ("MoveValidator", Phase.SUCCEEDED),
        ("GameStateHolder", Phase.STARTED),
        ("GameStateHolder", Phase.SUCCEEDED),
        ("WinChecker", Phase.STARTED),
        ("WinChecker", Phase.SUCCEEDED),
        ("AIPlayer", Phase.STARTED),
        ("AIPlayer", Phase.SUCCEEDED),
        ("GameStateHolder", Phase.STARTED),
        ("GameStateHolder", Phase.SUCCEEDED),
        ("WinChecker", Phase.STARTED),
        ("WinChecker", Phase.SUCCEEDED),
        ("Orchestrator", Phase.SUCCEEDED),
    ]
    assert events[8].data["position"] == 0
    assert events[8].data["nodes_evaluated"] > 0


def test_events_for_rejection(orchestrator):
    events = record(orchestrator)
    orchestrator.process_turn(-3)

    assert steps(events) == [
        ("Orchestrator", Phase.STARTED),
        ("MoveValidator", Phase.STARTED),
        ("MoveValidator", Phase.FAILED),
        ("Orchestrator", Phase.FAILED),
    ]
    assert "out of range" in events[2].data["reason"]


def test_events_for_game_over(make_orchestrator):
    orchestrator = make_orchestrator("XX_ OO_ ___")
    events = record(orchestrator)
    orchestrator.process_turn(2)

    assert steps(events) == [
        ("Orchestrator", Phase.STARTED),
        ("MoveValidator", Phase.STARTED),
        ("MoveValidator", Phase.SUCCEEDED),
        ("GameStateHolder", Phase.STARTED),
        ("GameStateHolder", Phase.SUCCEEDED),
        ("WinChecker", Phase.STARTED),
        ("WinChecker", Phase.SUCCEEDED),
        ("Orchestrator", Phase.SUCCEEDED),
    ]
    assert events[6].data == {"winner": "X", "winning_line": [0, 1, 2]}
    assert "WIN" in events[7].message


def test_failing_observer_does_not_break_turn(orchestrator):
    def broken(event):
        raise ValueError("nope")

    orchestrator.subscribe(broken)
    events = record(orchestrator)

    result = orchestrator.process_turn(4)

    assert result.error is None
    assert result.ai_move == 0
    assert len(events) == 14


def test_unsubscribed_observer_stops_receiving(orchestrator):
    events = []
    unsubscribe = orchestrator.subscribe(events.append)
    orchestrator.process_turn(99)
    unsubscribe()
    orchestrator.process_turn(99)
    assert len(events) == 4


def test_observer_may_read_state_mid_turn(orchestrator):
    seen = []
    orchestrator.subscribe(lambda event: seen.append(orchestrator.get_state().move_count))
    orchestrator.process_turn(4)
    assert seen[0] == 0
    assert seen[-1] == 2


def test_search_runs_on_a_copy(orchestrator, monkeypatch):
    live_boards = []
    original = orchestrator.ai.get_best_move

    def spy(board):
        live_boards.append(board)
        return original(board)

    monkeypatch.setattr(orchestrator.ai, "get_best_move", spy)
    orchestrator.process_turn(4)

    board = live_boards[0]
    assert board is not orchestrator.holder._state.board
    assert board == parse_board("___ _X_ ___")


def test_to_dict(make_orchestrator):
    orchestrator = make_orchestrator("XX_ OO_ ___")
    rejected = orchestrator.process_turn(3).to_dict()
    assert set(rejected) == {"error", "state"}

    done = orchestrator.process_turn(2).to_dict()
    assert done["winning_line"] == [0, 1, 2]
    assert done["ai_move"] is None
    assert done["state"]["status"] == "win"


def test_concurrent_turns_are_serialized():
    orchestrator = TurnOrchestrator()
    results = []

    def play(position):
        results.append(orchestrator.process_turn(position))

    threads = [threading.Thread(target=play, args=(p,)) for p in (4, 4, 4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    accepted = [r for r in results if r.error is None]
    assert len(accepted) == 1
    state = orchestrator.get_state()
    assert state.move_count == 2
    assert state.current_player == Mark.X


def test_injected_components_are_used():
    holder = GameStateHolder()
    ai = AIPlayer(Mark.O)
    orchestrator = TurnOrchestrator(holder=holder, ai=ai)

    orchestrator.process_turn(4)

    assert holder.get_snapshot().board[0] == Mark.O
    assert ai.nodes_evaluated > 0


def test_observer_cannot_start_a_nested_turn(orchestrator):
    nested_errors = []

    def meddle(event):
        try:
            orchestrator.process_turn(0)
        except RuntimeError as exc:
            nested_errors.append(exc)
            raise

    orchestrator.subscribe(meddle)
    result = orchestrator.process_turn(0)

    assert nested_errors
    assert result.error is None
    state = orchestrator.get_state()
    assert state.move_count == 2
    assert sum(cell is not None for cell in state.board) == 2
    assert state.board[0] == Mark.X
    assert state.board[result.ai_move] == Mark.O


def test_observer_cannot_reset_mid_turn(orchestrator):
    orchestrator.subscribe(lambda event: orchestrator.reset_turn())
    result = orchestrator.process_turn(4)

    assert result.ai_move == 0
    assert orchestrator.get_state().move_count == 2


def test_turns_work_again_after_refused_nesting(orchestrator):
    unsubscribe = orchestrator.subscribe(lambda event: orchestrator.process_turn(8))
    orchestrator.process_turn(4)
    unsubscribe()

    result = orchestrator.process_turn(8)
    assert result.error is None
    assert orchestrator.get_state().move_count == 4


def test_refuses_turn_when_ai_is_to_move(make_orchestrator):
    orchestrator = make_orchestrator("X__ ___ ___")
    events = record(orchestrator)

    result = orchestrator.process_turn(4)

    assert "AI's turn" in result.error
    state = orchestrator.get_state()
    assert state.board == parse_board("X__ ___ ___")
    assert state.move_count == 1
    assert state.current_player == Mark.O
    assert steps(events) == [
        ("Orchestrator", Phase.STARTED),
        ("Orchestrator", Phase.FAILED),
    ]


def test_two_games_do_not_share_state():
    first = TurnOrchestrator()
    second = TurnOrchestrator()
    first.process_turn(4)
    assert second.get_state().move_count == 0
