"""
AI player for tic-tac-toe.
Uses the Minimax algorithm to choose the best move.
"""

import logging
from typing import Dict
from .game_state import Board, Mark, empty_cells
from .win_checker import WinChecker


logger = logging.getLogger(__name__)

WIN_SCORE = 10


class PreconditionViolation(AssertionError):
    """The search was asked to move on a full or already finished board."""


class AIPlayer:
    """
    An AI that plays tic-tac-toe using exhaustive Minimax.

    The AI's mark is the maximizing side, the opponent minimizes.
    Scores are depth-adjusted (win = 10 - depth, loss = depth - 10,
    draw = 0) so the AI takes the fastest win and delays a loss it
    cannot avoid. It will never lose; at worst it draws.
    """

    def __init__(self, player: Mark = Mark.O):
        """
        Initialize the AI player.

        Args:
            player: Which mark the AI plays (default: O)
        """
        self.player = player
        self.opponent = player.opposite()
        self.win_checker = WinChecker()

        # Positions visited by the last search (for debugging)
        self.nodes_evaluated = 0

    def get_best_move(self, board: Board) -> int:
        """
        Get the best move for the current position.

        Args:
            board: Current board. Not modified.

        Returns:
            Index of the best empty cell. Ties go to the lowest index.

        Raises:
            PreconditionViolation: board is full or already won.
        """
        scores = self.score_moves(board)

        best_score = float('-inf')
        best_move = None
        for position, score in scores.items():
            if score > best_score:
                best_score = score
                best_move = position

        logger.info(
            "AI evaluated %d positions. Best move: %d (score: %d)",
            self.nodes_evaluated, best_move, best_score
        )
        return best_move

    def score_moves(self, board: Board) -> Dict[int, int]:
        """
        Minimax score of every empty cell for the AI, in ascending index order.

        Raises:
            PreconditionViolation: board is full or already won.
        """
        if self.win_checker.check_winner(board) is not None:
            raise PreconditionViolation("Cannot search a board that is already won")

        candidates = empty_cells(board)
        if not candidates:
            raise PreconditionViolation("Cannot search a full board")

        # Scratch copy: the search mutates it and puts every cell back
        scratch = list(board)
        self.nodes_evaluated = 0

        scores = {}
        for position in candidates:
            scratch[position] = self.player
            try:
                scores[position] = self._minimax(scratch, is_maximizing=False, depth=1)
            finally:
                scratch[position] = None
            logger.debug("Position %d -> score: %d", position, scores[position])

        return scores

    def _minimax(self, board: Board, is_maximizing: bool, depth: int) -> int:
        """
        Minimax over the whole remaining game tree.

        Args:
            board: Scratch board, restored before returning.
            is_maximizing: True if it's the AI's turn.
            depth: Plies played since the root position.

        Returns:
            The score of the position.
        """
        self.nodes_evaluated += 1

        winner = self.win_checker.check_winner(board)
        if winner == self.player:
            return WIN_SCORE - depth
        if winner == self.opponent:
            return depth - WIN_SCORE

        candidates = empty_cells(board)
        if not candidates:
            return 0

        mark = self.player if is_maximizing else self.opponent
        best = float('-inf') if is_maximizing else float('inf')

        for position in candidates:
            board[position] = mark
            try:
                score = self._minimax(board, not is_maximizing, depth + 1)
            finally:
                board[position] = None

            if is_maximizing:
                best = max(best, score)
            else:
                best = min(best, score)

        return best
