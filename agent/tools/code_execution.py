"""
Command execution inside the workspace.
"""
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from core.constants import DEFAULT_COMMAND_TIMEOUT
from core.exceptions import ExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    def render(self) -> str:
        """
        Output text reported back to the conversation.

        A failing command is reported in-band: its stderr is appended to the
        output instead of raising.
        """
        result = self.stdout
        if self.returncode != 0 and self.stderr.strip():
            result = f"{result.rstrip()}\nError: {self.stderr.strip()}"
        return result.strip()


async def run_command(
    command: str,
    arguments: Sequence[str] | None = None,
    cwd: str | Path | None = None,
    timeout: float = DEFAULT_COMMAND_TIMEOUT,
) -> CommandResult:
    """
    Run a command without a shell and wait for it to finish.

    Args:
        command: Program to launch
        arguments: Argument list passed as-is
        cwd: Working directory (the workspace root)
        timeout: Maximum execution time in seconds

    Returns:
        CommandResult with stdout and stderr captured separately

    Raises:
        ExecutionError: If the program cannot be started or times out
    """
    argv = [command, *(arguments or [])]
    logger.debug("Running %s in %s", argv, cwd)

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            stdin=asyncio.subprocess.DEVNULL,
            cwd=str(cwd) if cwd is not None else None,
        )
    except OSError as e:
        raise ExecutionError(f"Failed to start command '{command}': {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise ExecutionError(f"Command '{command}' timed out after {timeout} seconds")

    result = CommandResult(
        argv=argv,
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )
    if result.returncode != 0:
        logger.info("Command %s exited with status %d", argv, result.returncode)
    return result
