"""
Agent layer: model client, prompt construction, and operation mediation.
"""
from .file_agent import FileAgent
from .ollama import DEFAULT_OLLAMA_URL, GenerationError, OllamaClient
from .orchestrator import OperationOrchestrator
from .prompt import build_prompt
from .tools import CommandResult, OperationExecutor, run_command

__all__ = [
    # Agent
    "FileAgent",
    "OperationOrchestrator",
    # Model backend
    "OllamaClient",
    "GenerationError",
    "DEFAULT_OLLAMA_URL",
    "build_prompt",
    # Tools
    "OperationExecutor",
    "CommandResult",
    "run_command",
]
