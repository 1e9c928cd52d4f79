"""
Pipeline module for tic-tac-toe.
Sequences validation, moves, outcome checks and the AI reply into turns,
and reports every step to observers.
"""

from .config import PipelineConfig
from .events import AgentEvent, EventBus, Phase
from .orchestrator import TurnOrchestrator, TurnResult
