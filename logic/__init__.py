"""
Logic module for tic-tac-toe.
Handles game state, rules, and the AI opponent.
"""

from .game_state import GameState, GameStateHolder, GameStatus, Mark
from .move_validator import MoveValidator, ValidationResult
from .win_checker import WinChecker, Outcome, WINNING_LINES
from .ai_player import AIPlayer, PreconditionViolation
