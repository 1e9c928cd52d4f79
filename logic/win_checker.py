"""
Win checker for tic-tac-toe.
Checks if a player has won or if the game is a draw.
"""

from typing import Optional, Tuple
from dataclasses import dataclass
from .game_state import Board, GameStatus, Mark


# All possible winning lines (board indices)
WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    # Rows
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # Columns
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # Diagonals
    (0, 4, 8),
    (2, 4, 6),
)


@dataclass(frozen=True)
class Outcome:
    """Result of evaluating a board."""
    status: GameStatus
    winner: Optional[Mark] = None
    winning_line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.status != GameStatus.ONGOING


class WinChecker:
    """
    Checks for win conditions in tic-tac-toe.

    Win condition: 3 of the same mark in a row
    (horizontally, vertically, or diagonally).
    Lines are scanned rows first, then columns, then diagonals; in a legal
    game only one mark can ever own a completed line, so the first match
    is the answer.
    """

    def evaluate(self, board: Board) -> Outcome:
        """
        Evaluate a board.

        Args:
            board: 9-cell board.

        Returns:
            Outcome with status, and winner/winning line when won.
        """
        line = self.get_winning_line(board)
        if line is not None:
            return Outcome(GameStatus.WIN, board[line[0]], line)

        if self.is_full(board):
            return Outcome(GameStatus.DRAW)

        return Outcome(GameStatus.ONGOING)

    def check_winner(self, board: Board) -> Optional[Mark]:
        """
        Check if there's a winner.

        Returns:
            The winning Mark, or None if no winner yet.
        """
        for a, b, c in WINNING_LINES:
            mark = board[a]
            if mark is not None and mark == board[b] and mark == board[c]:
                return mark
        return None

    def get_winning_line(self, board: Board) -> Optional[Tuple[int, int, int]]:
        """Get the first completed line, or None."""
        for line in WINNING_LINES:
            a, b, c = line
            if board[a] is not None and board[a] == board[b] and board[a] == board[c]:
                return line
        return None

    def is_full(self, board: Board) -> bool:
        return all(cell is not None for cell in board)
