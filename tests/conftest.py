from typing import List, Optional

import pytest

from logic.game_state import GameState, GameStateHolder, Mark
from pipeline.orchestrator import TurnOrchestrator


def parse_board(text: str) -> List[Optional[Mark]]:
    """'XX_OO____' -> board. Whitespace is ignored."""
    cells = [c for c in text if not c.isspace()]
    assert len(cells) == 9, text
    return [None if c == "_" else Mark(c) for c in cells]


def state_from(text: str) -> GameState:
    """Mid-game state for a board, with the side to move derived from the counts."""
    board = parse_board(text)
    x = board.count(Mark.X)
    o = board.count(Mark.O)
    return GameState(
        board=board,
        current_player=Mark.X if x == o else Mark.O,
        move_count=x + o,
    )


@pytest.fixture
def orchestrator():
    return TurnOrchestrator()


@pytest.fixture
def make_orchestrator():
    def _make(text: str) -> TurnOrchestrator:
        return TurnOrchestrator(holder=GameStateHolder(state_from(text)))
    return _make
