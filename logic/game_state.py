"""
Game state management for tic-tac-toe.
Tracks the board, current player, and game result.
"""

from enum import Enum
from typing import Optional, List, Tuple
from dataclasses import dataclass, field


BOARD_CELLS = 9


class Mark(Enum):
    """The two player marks."""
    X = "X"
    O = "O"

    def opposite(self) -> "Mark":
        """Get the opposite mark."""
        return Mark.O if self == Mark.X else Mark.X


class GameStatus(Enum):
    """Where the game stands."""
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


# A board is 9 cells in row-major order; None means empty
Board = List[Optional[Mark]]


def empty_board() -> Board:
    return [None] * BOARD_CELLS


def empty_cells(board: Board) -> List[int]:
    """Indices of all empty cells, ascending."""
    return [i for i, cell in enumerate(board) if cell is None]


@dataclass
class GameState:
    """
    The complete state of the tic-tac-toe game.

    Tracks:
    - The 9-cell board
    - Current player
    - Game status (ongoing, win, draw)
    - Winner and winning line (only when status is win)
    - Number of moves played
    """

    board: Board = field(default_factory=empty_board)

    # X always goes first
    current_player: Mark = Mark.X

    status: GameStatus = GameStatus.ONGOING
    winner: Optional[Mark] = None
    winning_line: Optional[Tuple[int, int, int]] = None

    move_count: int = 0

    @property
    def is_game_over(self) -> bool:
        return self.status != GameStatus.ONGOING

    def copy(self) -> "GameState":
        """Create a deep copy of the game state."""
        return GameState(
            board=list(self.board),
            current_player=self.current_player,
            status=self.status,
            winner=self.winner,
            winning_line=self.winning_line,
            move_count=self.move_count,
        )

    def to_dict(self) -> dict:
        """Serialize to plain values (marks as "X"/"O", empty cells as None)."""
        return {
            "board": [cell.value if cell is not None else None for cell in self.board],
            "current_player": self.current_player.value,
            "status": self.status.value,
            "winner": self.winner.value if self.winner is not None else None,
            "winning_line": list(self.winning_line) if self.winning_line is not None else None,
            "move_count": self.move_count,
        }

    def print_board(self):
        """Print the board to console. Empty cells show their index."""
        print()
        for row in range(3):
            cells = []
            for col in range(3):
                index = row * 3 + col
                mark = self.board[index]
                cells.append(mark.value if mark is not None else str(index))
            print(" " + " | ".join(cells))
            if row < 2:
                print("---+---+---")

        if self.status == GameStatus.WIN:
            print(f"\n{self.winner.value} WINS via {list(self.winning_line)}!")
        elif self.status == GameStatus.DRAW:
            print("\nIt's a DRAW!")
        else:
            print(f"\nCurrent turn: {self.current_player.value} (move {self.move_count + 1})")


class GameStateHolder:
    """
    Owns the one live GameState.

    Callers only ever get copies back. No validation happens here;
    legality checks live in MoveValidator and it is up to the caller
    not to apply moves after the game has ended.
    """

    def __init__(self, initial: Optional[GameState] = None):
        """
        Args:
            initial: Starting state (copied). Defaults to a fresh game.
        """
        self._state = initial.copy() if initial is not None else GameState()

    def get_snapshot(self) -> GameState:
        return self._state.copy()

    def apply_move(self, position: int, mark: Mark) -> GameState:
        """
        Place a mark and hand the turn to the other player.

        Args:
            position: Cell index (0-8).
            mark: Mark to place.

        Returns:
            Snapshot after the move.
        """
        self._state.board[position] = mark
        self._state.move_count += 1
        self._state.current_player = mark.opposite()
        return self.get_snapshot()

    def set_result(
        self,
        status: GameStatus,
        winner: Optional[Mark] = None,
        winning_line: Optional[Tuple[int, int, int]] = None
    ) -> GameState:
        """Record the game outcome without touching the board."""
        self._state.status = status
        self._state.winner = winner
        self._state.winning_line = tuple(winning_line) if winning_line is not None else None
        return self.get_snapshot()

    def reset(self) -> GameState:
        """Start a fresh game."""
        self._state = GameState()
        return self.get_snapshot()
