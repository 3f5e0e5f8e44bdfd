"""
File-aware chat agent.

Gathers the referenced workspace files into the prompt, asks the model for a
completion and hands the reply to the orchestrator.
"""

import logging
from typing import Iterable

from core.exceptions import CoreError
from core.workspace import Workspace

from .ollama import OllamaClient
from .orchestrator import OperationOrchestrator
from .prompt import build_prompt

logger = logging.getLogger(__name__)


class FileAgent:
    """Chat front end that mediates the model's file operations."""

    def __init__(
        self,
        client: OllamaClient,
        workspace: Workspace,
        orchestrator: OperationOrchestrator,
        model: str,
    ):
        self.client = client
        self.workspace = workspace
        self.orchestrator = orchestrator
        self.model = model

    def build_file_context(self, paths: Iterable[str] | None) -> dict[str, str]:
        """
        Collect the referenced files for the prompt.

        Files contribute their content and directories a listing. Paths that
        cannot be read contribute the error text instead; missing paths are
        skipped.
        """
        context: dict[str, str] = {}
        for path in paths or ():
            try:
                if self.workspace.file_exists(path):
                    context[path] = self.workspace.read_file(path)
                elif self.workspace.directory_exists(path):
                    entries = self.workspace.list_dir(path)
                    context[path] = f"Directory contents: {', '.join(entries)}"
                else:
                    logger.debug("Skipping missing context path %s", path)
            except (CoreError, OSError, UnicodeDecodeError) as e:
                context[path] = f"Error reading file: {e}"
        return context

    async def chat(self, user_prompt: str, file_paths: Iterable[str] | None = None) -> str:
        """
        Run one conversation turn.

        Args:
            user_prompt: The user's message
            file_paths: Workspace paths to include as context

        Returns:
            The reply with operation blocks replaced by the results summary

        Raises:
            GenerationError: If the model backend fails
        """
        context = self.build_file_context(file_paths)
        prompt = build_prompt(user_prompt, context)
        logger.debug("Prompt is %d characters with %d context file(s)", len(prompt), len(context))

        response = await self.client.generate(prompt, self.model)
        return await self.orchestrator.process(response, context)
