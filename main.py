"""
Console entry point for tic-tac-toe.

This script ties together:
- Logic (game state, move validation, win checking, AI)
- Pipeline (turn orchestration and the live event trace)

Run this script to play tic-tac-toe against the AI in a terminal!
"""

import logging
from typing import Callable, Optional

from logic.game_state import GameState
from pipeline.config import PipelineConfig
from pipeline.events import AgentEvent
from pipeline.orchestrator import TurnOrchestrator


class TicTacToeConsole:
    """
    Terminal front end for the turn pipeline.

    Game flow:
    1. Human (X) types a cell index 0-8
    2. The orchestrator validates and applies it, then checks for a result
    3. The AI (O) replies with its best move
    4. Repeat until someone wins or it's a draw

    'r' resets the game, 'q' quits.
    """

    def __init__(
        self,
        orchestrator: Optional[TurnOrchestrator] = None,
        show_trace: bool = True,
        input_fn: Optional[Callable[[str], str]] = None
    ):
        """
        Args:
            orchestrator: Pipeline to drive. Defaults to a fresh game.
            show_trace: Print every pipeline event as it happens.
            input_fn: Where commands come from (default: input).
        """
        self.orchestrator = orchestrator or TurnOrchestrator()
        self.config = self.orchestrator.config
        self.input_fn = input_fn or input
        self.is_running = False

        self._unsubscribe = None
        if show_trace:
            self._unsubscribe = self.orchestrator.subscribe(self._print_event)

    def start(self):
        """Start the game loop."""
        width = self.config.BANNER_WIDTH
        print("\n" + "=" * width)
        print("   Tic-Tac-Toe - You are X, the AI is O")
        print("   Enter 0-8 to move, 'r' to reset, 'q' to quit")
        print("=" * width)

        self.is_running = True
        self.orchestrator.get_state().print_board()

        while self.is_running:
            command = self.input_fn("\nYour move: ").strip().lower()
            self.handle_command(command)

        if self._unsubscribe is not None:
            self._unsubscribe()

    def handle_command(self, command: str):
        """Run one line of user input."""
        if command in ("q", "quit", "exit"):
            print("\nGame quit by user.")
            self.is_running = False
            return

        if command in ("r", "reset"):
            result = self.orchestrator.reset_turn()
            result.state.print_board()
            return

        result = self.orchestrator.process_turn(command)
        if result.rejected:
            print(f"\n{result.error}")
            return

        if result.ai_move is not None:
            print(f"\n>>> AI played position {result.ai_move}")
        result.state.print_board()

        if result.state.is_game_over:
            self._show_game_result(result.state)

    def _show_game_result(self, state: GameState):
        """Show the final game result."""
        width = self.config.BANNER_WIDTH
        print("\n" + "=" * width)
        print("   GAME OVER!")
        if state.winner is None:
            print("   It's a draw! Good game!")
        elif state.winner == self.config.HUMAN_MARK:
            print("   Congratulations! You won!")
        else:
            print("   AI wins! Better luck next time!")
        print("   Type 'r' to play again or 'q' to quit")
        print("=" * width)

    def _print_event(self, event: AgentEvent):
        icon = self.config.TRACE_ICONS.get(event.phase.value, "   ")
        print(f"  {icon} [{event.agent}] {event.message}")


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Play tic-tac-toe against a Minimax AI")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging (per-cell search scores)"
    )
    parser.add_argument(
        "--no-trace",
        action="store_true",
        help="Don't print the pipeline event trace"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=PipelineConfig.LOG_FORMAT
    )

    game = TicTacToeConsole(show_trace=not args.no_trace)

    try:
        game.start()
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
    finally:
        print("Goodbye!")


if __name__ == "__main__":
    main()
