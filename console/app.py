"""
Interactive console for the file operation agent.

Wires the workspace, policy engine, executor, audit log and Ollama client
together and runs a read-eval-print loop.
"""

import argparse
import asyncio
import logging
import re
import sys
from pathlib import Path
from typing import Callable, Sequence, TextIO

from pydantic import ValidationError

from agent import FileAgent, GenerationError, OllamaClient, OperationExecutor, OperationOrchestrator
from config import Config, get_config, load_config
from core.audit import AuditLog
from core.exceptions import CoreError, NotFoundError
from core.permissions import PermissionChecker, PermissionLevel, PolicyState
from core.workspace import Workspace

from .confirmation import ConsoleConfirmationChannel
from .logging_config import log_timing, setup_logging

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\S+)")
EXIT_WORDS = {"quit", "exit", "bye"}
DEFAULT_AUDIT_ENTRIES = 5

PERMISSION_DESCRIPTIONS = {
    PermissionLevel.READ_ONLY: "read files only",
    PermissionLevel.SAFE_WRITE: "create new files; changes to existing files need approval",
    PermissionLevel.FULL_ACCESS: "everything allowed",
}

HELP_TEXT = """\
📖 Available Commands:
  /help              - Show this help
  /ls [path]         - List files in directory
  /cat <file>        - Read file content
  /models            - Show available Ollama models
  /pwd               - Show current workspace
  /level             - Show the current permission level
  /audit [n]         - Show the last n audit log entries
  quit/exit/bye      - Exit the application

📝 File Access:
  Use @filename in your message to include file context
  Example: 'Explain this code @Program.cs'

🔧 File Operations:
  The assistant can create, read, write and delete files and run commands.
  Risky operations ask for your approval first."""


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fileop-agent",
        description="Chat with a local Ollama model that can operate on a workspace directory.",
    )
    parser.add_argument("--workspace", "-w", help="Workspace directory (must exist)")
    parser.add_argument("--config", type=Path, help="Config file to use instead of the project config")
    parser.add_argument("--model", help="Model to generate with")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", type=Path, help="Write the log to this file instead of stderr")
    return parser.parse_args(argv)


def extract_mentions(text: str) -> list[str]:
    """Return the paths mentioned as @path in a message, in order."""
    return MENTION_PATTERN.findall(text)


class ConsoleApp:
    """REPL bound to one workspace and one policy state."""

    def __init__(
        self,
        config: Config,
        workspace: Workspace,
        client: OllamaClient,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ):
        self.config = config
        self.workspace = workspace
        self.client = client
        self.model = config.default_model
        self.input_func = input_func
        self.output = output or sys.stdout

        settings = config.permissions
        self.state = PolicyState(settings)
        self.audit_log = AuditLog.for_workspace(workspace, enabled=settings.audit_enabled)
        channel = ConsoleConfirmationChannel(input_func=input_func, output=self.output)
        checker = PermissionChecker(self.state, workspace, channel)
        executor = OperationExecutor(workspace, settings.command_timeout)
        orchestrator = OperationOrchestrator(checker, executor, self.audit_log)
        self.agent = FileAgent(client, workspace, orchestrator, self.model)

    def print(self, text: str = "") -> None:
        print(text, file=self.output)

    def print_banner(self) -> None:
        settings = self.state.settings
        level = self.state.permission_level
        self.print("🤖 Ollama File Agent")
        self.print("====================")
        self.print(f"Workspace: {self.workspace.root}")
        self.print(f"Ollama URL: {self.config.ollama_base_url}")
        self.print(f"Default Model: {self.model}")
        self.print(f"Permission Level: {level.value} ({PERMISSION_DESCRIPTIONS[level]})")
        self.print(f"Dry Run: {'Enabled' if settings.dry_run_enabled else 'Disabled'}")
        self.print(f"Audit Log: {'Enabled' if settings.audit_enabled else 'Disabled'}")
        self.print()

    async def select_model(self) -> bool:
        """
        Check that Ollama is reachable and pick a model.

        Falls back to the first installed model if the configured one is
        missing.

        Returns:
            False if no models are available
        """
        if not await self.client.is_available():
            self.print("❌ Ollama is not available. Please make sure Ollama is running.")
            return False

        models = await self.client.list_models()
        self.print(f"✅ Available models: {', '.join(models)}")
        if self.model.lower() not in (m.lower() for m in models):
            self.print(f"⚠️  Model '{self.model}' not found. Continuing with {models[0]}")
            self.model = models[0]
            self.agent.model = self.model
        self.print()
        return True

    async def handle_command(self, line: str) -> None:
        """Run a /command."""
        parts = line[1:].split()
        if not parts:
            self.print("Unknown command. Type /help for available commands.")
            return
        cmd, args = parts[0].lower(), parts[1:]

        if cmd == "help":
            self.print(HELP_TEXT)

        elif cmd in ("ls", "list"):
            path = args[0] if args else "."
            try:
                entries = self.workspace.list_dir(path)
            except CoreError as e:
                self.print(f"❌ Error listing files: {e}")
                return
            self.print(f"📁 Files in {path}:")
            for entry in entries:
                self.print(f"  {entry}")

        elif cmd in ("cat", "read"):
            if not args:
                self.print("Usage: /cat <filename>")
                return
            try:
                content = self.workspace.read_file(args[0])
            except (CoreError, OSError, UnicodeDecodeError) as e:
                self.print(f"❌ Error reading file: {e}")
                return
            self.print(f"📄 Content of {args[0]}:")
            self.print(content)

        elif cmd == "models":
            self.print("🤖 Available models:")
            for model in await self.client.list_models():
                self.print(f"  {model}")

        elif cmd in ("pwd", "workspace"):
            self.print(f"📁 Current workspace: {self.workspace.root}")

        elif cmd == "level":
            level = self.state.permission_level
            self.print(f"🔐 Permission level: {level.value} ({PERMISSION_DESCRIPTIONS[level]})")

        elif cmd == "audit":
            try:
                count = int(args[0]) if args else DEFAULT_AUDIT_ENTRIES
            except ValueError:
                self.print("Usage: /audit [n]")
                return
            if not self.audit_log.enabled:
                self.print("Audit log is disabled")
                return
            entries = self.audit_log.read_entries()
            for entry in entries[-count:] if count > 0 else []:
                self.print(entry)
                self.print()

        else:
            self.print(f"Unknown command: {cmd}. Type /help for available commands.")

    async def handle_message(self, line: str) -> None:
        """Send a chat message and print the mediated reply."""
        self.print("\n🤔 Thinking...")
        file_paths = extract_mentions(line)
        if file_paths:
            self.print(f"📁 Including files: {', '.join(file_paths)}")

        try:
            with log_timing(logger, "Chat turn", level=logging.INFO):
                reply = await self.agent.chat(line, file_paths)
        except GenerationError as e:
            self.print(f"❌ Error: {e}")
            return

        self.print("\n🤖 Assistant:")
        self.print(reply)
        self.print()

    async def run(self) -> int:
        """Run the REPL until the user exits or input ends."""
        self.print_banner()
        if not await self.select_model():
            return 1

        while True:
            try:
                line = await asyncio.to_thread(self.input_func, "You: ")
            except (EOFError, KeyboardInterrupt):
                self.print()
                break

            line = line.strip()
            if not line:
                continue
            if line.lower() in EXIT_WORDS:
                break
            if line.startswith("/"):
                await self.handle_command(line)
            else:
                await self.handle_message(line)

        self.print("👋 Goodbye!")
        return 0


def resolve_workspace(config: Config, workspace_arg: str | None) -> Workspace:
    """
    Open the workspace named on the command line, or the configured one.

    Raises:
        NotFoundError: If the command-line directory does not exist
    """
    if workspace_arg is not None:
        path = Path(workspace_arg).expanduser()
        if not path.is_dir():
            raise NotFoundError("Directory", workspace_arg)
        return Workspace(path)
    return Workspace(config.workspace_root)


async def main_async(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = load_config(config_path=args.config) if args.config else get_config()
    except ValidationError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 1
    if args.model:
        config = config.model_copy(update={"default_model": args.model})

    try:
        workspace = resolve_workspace(config, args.workspace)
    except CoreError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    async with OllamaClient(config.ollama_base_url) as client:
        app = ConsoleApp(config, workspace, client)
        return await app.run()


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point."""
    try:
        return asyncio.run(main_async(argv))
    except KeyboardInterrupt:
        return 130
