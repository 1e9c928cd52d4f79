"""
Pipeline configuration for tic-tac-toe.
Who plays which mark, component names used in events, and console/log settings.
"""

from logic.game_state import Mark


class PipelineConfig:
    """
    Configuration class for the turn pipeline.
    Change these values based on your setup!
    """

    # ==================== PLAYERS ====================
    # Console display only (win message); the orchestrator plays whichever
    # mark is to move, and refuses turns where that is the AI's mark
    HUMAN_MARK = Mark.X
    AI_MARK = Mark.O

    # ==================== EVENT NAMES ====================
    # Component names reported in every AgentEvent
    ORCHESTRATOR = "Orchestrator"
    VALIDATOR = "MoveValidator"
    STATE_HOLDER = "GameStateHolder"
    WIN_CHECKER = "WinChecker"
    AI_PLAYER = "AIPlayer"

    # ==================== LOGGING ====================
    LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

    # ==================== CONSOLE ====================
    BANNER_WIDTH = 55
    TRACE_ICONS = {
        "started": "...",
        "succeeded": "OK ",
        "failed": "ERR",
    }
