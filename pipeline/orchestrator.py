"""
Turn orchestration for tic-tac-toe.

One call to process_turn runs a whole turn:

1. Validate the human move          -> MoveValidator
2. Apply it                         -> GameStateHolder
3. Check for win/draw               -> WinChecker
4. If still going, pick the AI move -> AIPlayer (on a copy of the board)
5. Apply it, check for win/draw again
6. Return the final state

Each step is reported to subscribed observers as an AgentEvent.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Optional, Tuple
from dataclasses import dataclass

from logic.game_state import GameState, GameStateHolder, Mark
from logic.move_validator import MoveValidator
from logic.win_checker import WinChecker, Outcome
from logic.ai_player import AIPlayer

from .config import PipelineConfig
from .events import EventBus, EventHandler, Phase


logger = logging.getLogger(__name__)


@dataclass
class TurnResult:
    """What a turn hands back to the caller."""
    state: GameState
    winning_line: Optional[Tuple[int, int, int]] = None
    ai_move: Optional[int] = None
    error: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        if self.error is not None:
            return {"error": self.error, "state": self.state.to_dict()}
        return {
            "state": self.state.to_dict(),
            "winning_line": list(self.winning_line) if self.winning_line is not None else None,
            "ai_move": self.ai_move,
        }


class TurnOrchestrator:
    """
    Runs human turns and the AI's reply against one game.

    Turns are serialized with a lock so a turn is never observed half-applied,
    even when the host calls in from more than one thread.
    """

    def __init__(
        self,
        holder: Optional[GameStateHolder] = None,
        validator: Optional[MoveValidator] = None,
        win_checker: Optional[WinChecker] = None,
        ai: Optional[AIPlayer] = None,
        config: type = PipelineConfig
    ):
        """
        Args:
            holder: The game to play on. Defaults to a fresh game.
            validator: Move validator.
            win_checker: Outcome evaluator.
            ai: The AI opponent. Defaults to an AIPlayer for config.AI_MARK.
            config: Pipeline configuration class.
        """
        self.config = config
        self.holder = holder if holder is not None else GameStateHolder()
        self.validator = validator or MoveValidator()
        self.win_checker = win_checker or WinChecker()
        self.ai = ai or AIPlayer(config.AI_MARK)
        self.events = EventBus()

        # Reentrant so observers may call get_state() mid-turn; _in_turn
        # stops them from starting another turn inside this one
        self._lock = threading.RLock()
        self._in_turn = False

    def subscribe(self, handler: EventHandler):
        """Register an observer. Returns a function that unregisters it."""
        return self.events.subscribe(handler)

    def get_state(self) -> GameState:
        with self._lock:
            return self.holder.get_snapshot()

    def process_turn(self, position: Any) -> TurnResult:
        """
        Process a human move through the full pipeline.

        Args:
            position: Cell index (0-8) as submitted.

        Returns:
            TurnResult. On rejection only error and the unchanged state are set.

        Raises:
            RuntimeError: called from an observer while a turn is running.
        """
        with self._turn():
            return self._process_turn(position)

    def reset_turn(self) -> TurnResult:
        """Reset the game to its initial state."""
        cfg = self.config
        with self._turn():
            self._emit(cfg.ORCHESTRATOR, Phase.STARTED, "Resetting game state...")
            self._emit(cfg.STATE_HOLDER, Phase.STARTED, "Clearing board and resetting all state...")
            state = self.holder.reset()
            self._emit(cfg.STATE_HOLDER, Phase.SUCCEEDED, "Board cleared - all state reset to initial")
            self._emit(
                cfg.ORCHESTRATOR, Phase.SUCCEEDED,
                f"New game ready - player {state.current_player.value} goes first"
            )
            return TurnResult(state=state)

    @contextmanager
    def _turn(self):
        """Hold the lock for one whole turn; refuse nested turns."""
        with self._lock:
            if self._in_turn:
                raise RuntimeError("A turn is already in progress")
            self._in_turn = True
            try:
                yield
            finally:
                self._in_turn = False

    def _process_turn(self, position: Any) -> TurnResult:
        cfg = self.config
        state = self.holder.get_snapshot()
        player = state.current_player

        self._emit(
            cfg.ORCHESTRATOR, Phase.STARTED,
            f"Turn started - player {player.value} -> position {position}",
            {"player": player.value, "position": position}
        )

        # A human turn never places the AI's mark
        if player == self.ai.player and not state.is_game_over:
            reason = f"It is the AI's turn ('{player.value}'), not a human move."
            self._emit(cfg.ORCHESTRATOR, Phase.FAILED, f"Move rejected - {reason}", {"reason": reason})
            return TurnResult(state=state, error=reason)

        # Validate
        self._emit(cfg.VALIDATOR, Phase.STARTED, f"Validating position {position} for player {player.value}...")
        validation = self.validator.validate(state.board, position, player, state.status)

        if not validation.is_valid:
            reason = validation.error_message
            self._emit(cfg.VALIDATOR, Phase.FAILED, f"Rejected: {reason}", {"reason": reason})
            self._emit(cfg.ORCHESTRATOR, Phase.FAILED, f"Move rejected - {reason}")
            return TurnResult(state=self.holder.get_snapshot(), error=reason)

        self._emit(cfg.VALIDATOR, Phase.SUCCEEDED, "Move is valid - proceeding")

        # Human move
        self._apply(validation.position, player)
        outcome = self._evaluate("Scanning all 8 win lines for a winner...")

        if outcome.is_terminal:
            self._record(outcome, by_ai=False)
            self._emit(
                cfg.ORCHESTRATOR, Phase.SUCCEEDED,
                f"Game over: {outcome.status.value.upper()}",
                {"status": outcome.status.value}
            )
            return TurnResult(state=self.holder.get_snapshot(), winning_line=outcome.winning_line)

        self._emit(cfg.WIN_CHECKER, Phase.SUCCEEDED, "No winner yet - game continues")

        # AI move, searched on a private copy of the board
        ai_mark = self.ai.player
        self._emit(cfg.AI_PLAYER, Phase.STARTED, "Running Minimax to find optimal move...")
        board_copy = list(self.holder.get_snapshot().board)
        ai_move = self.ai.get_best_move(board_copy)
        self._emit(
            cfg.AI_PLAYER, Phase.SUCCEEDED,
            f"Optimal move selected: position {ai_move}",
            {"position": ai_move, "nodes_evaluated": self.ai.nodes_evaluated}
        )

        self._apply(ai_move, ai_mark)
        outcome = self._evaluate("Scanning all 8 win lines after AI move...")

        if outcome.is_terminal:
            self._record(outcome, by_ai=True)
        else:
            self._emit(cfg.WIN_CHECKER, Phase.SUCCEEDED, "Game ongoing after AI move - your turn!")

        self._emit(cfg.ORCHESTRATOR, Phase.SUCCEEDED, "Turn complete - returning updated state")
        return TurnResult(
            state=self.holder.get_snapshot(),
            winning_line=outcome.winning_line,
            ai_move=ai_move,
        )

    def _apply(self, position: int, mark: Mark):
        cfg = self.config
        self._emit(cfg.STATE_HOLDER, Phase.STARTED, f"Placing '{mark.value}' at position {position}...")
        self.holder.apply_move(position, mark)
        self._emit(
            cfg.STATE_HOLDER, Phase.SUCCEEDED,
            f"Board updated - '{mark.value}' placed at position {position}",
            {"position": position, "mark": mark.value}
        )

    def _evaluate(self, message: str) -> Outcome:
        self._emit(self.config.WIN_CHECKER, Phase.STARTED, message)
        return self.win_checker.evaluate(self.holder.get_snapshot().board)

    def _record(self, outcome: Outcome, by_ai: bool):
        """Store a terminal outcome and report it."""
        self.holder.set_result(outcome.status, outcome.winner, outcome.winning_line)

        if outcome.winning_line is not None:
            who = f"AI ('{outcome.winner.value}')" if by_ai else f"Player '{outcome.winner.value}'"
            message = f"{who} wins via {list(outcome.winning_line)}!"
            data = {"winner": outcome.winner.value, "winning_line": list(outcome.winning_line)}
        else:
            message = "Draw after AI move!" if by_ai else "Draw - all cells filled, no winner!"
            data = {}
        self._emit(self.config.WIN_CHECKER, Phase.SUCCEEDED, message, data)

    def _emit(self, agent: str, phase: Phase, message: str, data: Optional[dict] = None):
        self.events.emit(agent, phase, message, data)
