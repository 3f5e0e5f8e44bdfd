"""
Response orchestration.

Drives one generated response through extract -> risk -> policy ->
(confirm) -> execute -> audit -> strip, one operation block at a time and
strictly in text order.
"""
import logging

from core.audit import AuditLog, AuditRecord
from core.constants import FAILURE_PREFIX, SUCCESS_PREFIX
from core.exceptions import CoreError
from core.extraction import (
    ParseFailure,
    append_results,
    extract_operations,
    failure_line,
    strip_blocks,
)
from core.models import FileOperation, Outcome
from core.permissions import Decision, PermissionChecker, RiskLevel

from .tools.executor import OperationExecutor

logger = logging.getLogger(__name__)


class OperationOrchestrator:
    """Mediates the operation blocks found in a generated response."""

    def __init__(self, checker: PermissionChecker, executor: OperationExecutor, audit_log: AuditLog):
        """
        Initialize the orchestrator.

        Args:
            checker: Policy engine (holds the shared policy state)
            executor: Executor for approved operations
            audit_log: Audit log receiving one record per operation
        """
        self.checker = checker
        self.executor = executor
        self.audit_log = audit_log

    async def process(self, response: str, file_context: dict[str, str] | None = None) -> str:
        """
        Process every operation block in a response.

        Args:
            response: Raw generated text
            file_context: Files the caller included in the prompt (path -> text)

        Returns:
            The response with all operation blocks removed and a results
            section appended, one line per block
        """
        results = extract_operations(response)
        if not results:
            return response.strip()

        logger.info(
            "Processing %d operation block(s) (%d context file(s))",
            len(results),
            len(file_context or {}),
        )

        lines: list[str] = []
        for result in results:
            if isinstance(result, ParseFailure):
                lines.append(failure_line(result))
                continue
            lines.append(await self.process_operation(result.operation))

        text = strip_blocks(response, [r.span for r in results])
        return append_results(text, lines)

    async def process_operation(self, operation: FileOperation) -> str:
        """
        Decide, confirm, execute and audit a single operation.

        Every failure is converted into the returned result line; nothing
        raised here stops the remaining blocks.

        Returns:
            Result line for the summary
        """
        name = operation.describe()
        level = self.checker.state.permission_level

        try:
            risk = self.checker.evaluate_risk(operation)
        except (CoreError, OSError) as e:
            self._audit(operation, Decision.deny(str(e)), Outcome.failed(str(e)), RiskLevel.DANGEROUS, level)
            return f"{FAILURE_PREFIX} {name}: {e}"

        decision = self.checker.check(operation, risk)

        if decision.requires_confirmation:
            try:
                verdict = await self.checker.request_confirmation(operation, risk)
            except Exception as e:
                logger.exception("Confirmation failed for %s", name)
                decision = decision.resolve(False)
                self._audit(operation, decision, Outcome.failed(f"confirmation failed: {e}"), risk, level)
                return f"{FAILURE_PREFIX} {name}: confirmation failed: {e}"

            decision = decision.resolve(verdict.approved)
            if not verdict.approved:
                self._audit(operation, decision, Outcome.denied_by_user(), risk, level)
                return f"{FAILURE_PREFIX} {name}: denied by user"

        elif not decision.allowed:
            self._audit(operation, decision, Outcome.blocked_by_policy(), risk, level)
            return f"{FAILURE_PREFIX} {name}: {decision.reason}"

        try:
            output = await self.executor.execute(operation)
        except (CoreError, OSError) as e:
            self._audit(operation, decision, Outcome.failed(str(e)), risk, level)
            return f"{FAILURE_PREFIX} {name}: {e}"
        except Exception as e:
            logger.exception("Unexpected error executing %s", name)
            self._audit(operation, decision, Outcome.failed(str(e)), risk, level)
            return f"{FAILURE_PREFIX} {name}: {e}"

        self._audit(operation, decision, Outcome.success(), risk, level)
        return f"{SUCCESS_PREFIX} {name}: {output}"

    def _audit(self, operation, decision, outcome, risk, level) -> None:
        self.audit_log.append(
            AuditRecord(
                operation=operation,
                decision=decision,
                outcome=outcome,
                risk_level=risk,
                permission_level=level,
            )
        )
