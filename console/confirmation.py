"""Interactive confirmation channel for the console."""

import asyncio
import sys
from typing import Callable, TextIO

from core.constants import CONTENT_PREVIEW_CHARS
from core.models import FileOperation, OperationKind
from core.permissions import RiskLevel, Verdict, describe_risk

RISK_ICONS = {
    RiskLevel.SAFE: "🟢",
    RiskLevel.MODERATE: "🟡",
    RiskLevel.DANGEROUS: "🔴",
}

APPROVE_ANSWERS = {"y", "yes"}
ELEVATE_ANSWERS = {"a", "always"}


def parse_answer(answer: str | None) -> Verdict:
    """Map a typed answer to a verdict; anything unrecognized denies."""
    normalized = (answer or "").strip().lower()
    if normalized in APPROVE_ANSWERS:
        return Verdict.APPROVE
    if normalized in ELEVATE_ANSWERS:
        return Verdict.APPROVE_AND_ELEVATE
    return Verdict.DENY


class ConsoleConfirmationChannel:
    """Asks the user at the terminal to approve an operation."""

    def __init__(self, input_func: Callable[[str], str] = input, output: TextIO | None = None):
        """
        Initialize the channel.

        Args:
            input_func: Prompt-and-read function (input() by default)
            output: Stream the request is printed to (stdout by default)
        """
        self.input_func = input_func
        self.output = output or sys.stdout

    def render_request(self, operation: FileOperation, risk: RiskLevel, preview: str | None) -> str:
        """Build the text shown to the user for a confirmation request."""
        lines = [
            "",
            f"{RISK_ICONS.get(risk, '⚪')} The assistant requests permission:",
            f"   Operation: {operation.operation}",
            f"   Target: {operation.path}",
        ]

        if operation.kind in (OperationKind.WRITE, OperationKind.CREATE) and operation.content:
            content = operation.content
            if len(content) > CONTENT_PREVIEW_CHARS:
                content = content[:CONTENT_PREVIEW_CHARS] + "..."
            lines.append(f"   Content: {content}")

        if operation.kind == OperationKind.EXECUTE:
            lines.append(f"   Command: {operation.path}")
            if operation.arguments:
                lines.append(f"   Arguments: {' '.join(operation.arguments)}")

        lines.append(f"   Risk: {describe_risk(risk)}")
        lines.append("")

        if preview:
            lines.append(f"🔍 Preview: {preview}")
            lines.append("")

        return "\n".join(lines)

    async def request(self, operation: FileOperation, risk: RiskLevel, preview: str | None) -> Verdict:
        print(self.render_request(operation, risk, preview), file=self.output)
        try:
            answer = await asyncio.to_thread(self.input_func, "🤔 Allow? (y/n/a=always): ")
        except EOFError:
            answer = ""

        verdict = parse_answer(answer)
        if verdict == Verdict.APPROVE_AND_ELEVATE:
            print("✅ Switched to full access for this session", file=self.output)
        elif verdict == Verdict.DENY:
            print("❌ Denied", file=self.output)
        return verdict
