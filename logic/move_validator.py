"""
Move validator for tic-tac-toe.
Validates that moves follow the rules.
"""

import logging
from typing import Optional, Any
from dataclasses import dataclass
from .game_state import Board, GameStatus, Mark, BOARD_CELLS


logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of move validation."""
    is_valid: bool
    error_message: Optional[str] = None
    position: Optional[int] = None


def normalize_position(position: Any) -> Optional[int]:
    """
    Turn a submitted position into an int.

    Accepts ints, integral floats and digit strings ("4", " 4 ").
    Returns None for anything else (None, bools, 3.5, "abc", ...).
    """
    if position is None or isinstance(position, bool):
        return None
    if isinstance(position, int):
        return position
    if isinstance(position, float):
        return int(position) if position.is_integer() else None
    if isinstance(position, str):
        try:
            return int(position.strip())
        except ValueError:
            return None
    return None


class MoveValidator:
    """
    Validates tic-tac-toe moves.

    Rules (checked in order, first failure wins):
    1. Game must not be over
    2. Position must be a whole number
    3. Position must be 0-8
    4. Cell must be empty
    """

    def validate(
        self,
        board: Board,
        position: Any,
        active_player: Mark,
        status: GameStatus
    ) -> ValidationResult:
        """
        Validate a move.

        Args:
            board: Current board.
            position: Requested cell index, as submitted.
            active_player: Mark that would be placed.
            status: Current game status.

        Returns:
            ValidationResult with is_valid, error_message and the
            normalized position.
        """
        logger.debug("Validating position=%r for player %s", position, active_player.value)

        if status != GameStatus.ONGOING:
            return ValidationResult(
                is_valid=False,
                error_message="Game is already over. Please reset to play again."
            )

        pos = normalize_position(position)
        if pos is None:
            return ValidationResult(
                is_valid=False,
                error_message="Invalid position: must be a number."
            )

        if not 0 <= pos < BOARD_CELLS:
            return ValidationResult(
                is_valid=False,
                error_message=f"Position {pos} is out of range. Must be 0-8."
            )

        occupant = board[pos]
        if occupant is not None:
            return ValidationResult(
                is_valid=False,
                error_message=f"Cell {pos} is already occupied by '{occupant.value}'."
            )

        return ValidationResult(is_valid=True, position=pos)
