"""
Operation block extraction.

Finds fenced ```fileop blocks in generated text and decodes each body into a
FileOperation. Generators often emit raw newlines, quotes or backslashes in
the "content" string, so decoding runs through three tiers:

1. strict JSON decode
2. re-escape the "content" string value in place, then strict decode
3. pull each known field out with its own pattern and rebuild the record

Each tier returns a DecodeResult instead of raising, and every block yields
exactly one ParsedBlock or ParseFailure.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, Union

from pydantic import ValidationError

from .constants import FAILURE_PREFIX, OPERATION_FENCE_TAG, RESULTS_HEADER
from .models import FileOperation

logger = logging.getLogger(__name__)

BLOCK_PATTERN = re.compile(
    rf"```{OPERATION_FENCE_TAG}[ \t]*\r?\n(.*?)\r?\n```",
    re.DOTALL | re.IGNORECASE,
)

CONTENT_START_PATTERN = re.compile(r'"content"\s*:\s*"')
# A plausible end of the content value: a quote followed by the next `, "key":`
# or by the closing brace of the record.
CONTENT_END_PATTERN = re.compile(r'"(?=\s*,\s*"[A-Za-z_]+"\s*:|\s*\}\s*$)')
# Content running to the end of a truncated record
CONTENT_TAIL_PATTERN = re.compile(r'"content"\s*:\s*"(.*?)"?\s*\}?\s*$', re.DOTALL)
# What may legitimately follow the content value: other known fields, then the brace
TRAILING_FIELDS_PATTERN = re.compile(
    r'(?:\s*,\s*"(?:operation|path|arguments)"\s*:\s*(?:"[^"]*"|\[[^\]]*\]|null))*\s*\}?\s*'
)
OPERATION_PATTERN = re.compile(r'"operation"\s*:\s*"([^"]+)"')
PATH_PATTERN = re.compile(r'"path"\s*:\s*"([^"]+)"')
ARGUMENTS_PATTERN = re.compile(r'"arguments"\s*:\s*(\[[^\]]*\])', re.DOTALL)


@dataclass(frozen=True)
class Span:
    """Location of an operation block in the response text."""

    start: int
    end: int
    text: str
    body: str


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of one decoding tier."""

    operation: FileOperation | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.operation is not None


@dataclass(frozen=True)
class ParsedBlock:
    span: Span
    operation: FileOperation
    tier: str


@dataclass(frozen=True)
class ParseFailure:
    span: Span
    reason: str


ExtractionResult = Union[ParsedBlock, ParseFailure]


def find_blocks(text: str) -> list[Span]:
    """Find all non-overlapping operation blocks, left to right."""
    return [
        Span(start=m.start(), end=m.end(), text=m.group(0), body=m.group(1).strip())
        for m in BLOCK_PATTERN.finditer(text)
    ]


def escape_json_string(value: str) -> str:
    """Quote raw text as a JSON string literal (quotes included)."""
    return json.dumps(value, ensure_ascii=False)


def _validate(data: Any) -> DecodeResult:
    if not isinstance(data, dict):
        return DecodeResult(error="operation block is not a JSON object")
    try:
        return DecodeResult(operation=FileOperation.model_validate(data))
    except ValidationError as e:
        return DecodeResult(error=f"invalid operation record: {e.error_count()} validation error(s)")


def decode_strict(body: str) -> DecodeResult:
    """Tier 1: decode the body as-is."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        return DecodeResult(error=f"invalid JSON: {e.msg}")
    return _validate(data)


def content_candidates(body: str) -> Iterator[tuple[int, int, str]]:
    """
    Yield every plausible reading of the raw "content" value, shortest first.

    Content that itself contains `", "key":` has several candidate ends; the
    callers decide which one fits the rest of the record.

    Yields:
        (start, end, value): span of the whole `"content": "..."` pair and
        the raw value between the quotes
    """
    start = CONTENT_START_PATTERN.search(body)
    if start is None:
        return
    for end in CONTENT_END_PATTERN.finditer(body, start.end()):
        yield start.start(), end.end(), body[start.end():end.start()]


def decode_with_escaped_content(body: str) -> DecodeResult:
    """Tier 2: re-escape the raw "content" value, splice it back, decode again."""
    error = "no content field to repair"
    for start, end, value in content_candidates(body):
        result = decode_strict(body[:start] + f'"content": {escape_json_string(value)}' + body[end:])
        if result.ok:
            return result
        error = result.error or error
    return DecodeResult(error=error)


def _find_content(body: str) -> tuple[int, int, str] | None:
    # The first end that leaves only known fields behind wins
    for start, end, value in content_candidates(body):
        if TRAILING_FIELDS_PATTERN.fullmatch(body, end):
            return start, end, value
    tail = CONTENT_TAIL_PATTERN.search(body)
    if tail is not None:
        return tail.start(), len(body), tail.group(1)
    return None


def decode_by_fields(body: str) -> DecodeResult:
    """Tier 3: extract each known field independently and rebuild the record."""
    content = _find_content(body)
    # Field patterns must not match text inside the content value
    fields = body if content is None else body[: content[0]] + body[content[1]:]

    operation = OPERATION_PATTERN.search(fields)
    path = PATH_PATTERN.search(fields)
    if operation is None or path is None:
        return DecodeResult(error="could not extract required operation and path fields")

    data: dict[str, Any] = {"operation": operation.group(1), "path": path.group(1)}
    if content is not None:
        data["content"] = content[2]

    arguments = ARGUMENTS_PATTERN.search(fields)
    if arguments is not None:
        try:
            data["arguments"] = json.loads(arguments.group(1))
        except json.JSONDecodeError:
            logger.debug("Dropping undecodable arguments: %s", arguments.group(1))

    return _validate(data)


DECODE_TIERS = (
    ("strict", decode_strict),
    ("escaped_content", decode_with_escaped_content),
    ("fields", decode_by_fields),
)


def decode_block(span: Span) -> ExtractionResult:
    """Run the decoding tiers in order; the first success wins."""
    errors: list[str] = []
    for tier, decode in DECODE_TIERS:
        result = decode(span.body)
        if result.ok:
            if tier != "strict":
                logger.debug("Operation block repaired by %s tier", tier)
            return ParsedBlock(span=span, operation=result.operation, tier=tier)
        errors.append(result.error or "unknown error")

    logger.warning("Undecodable operation block (%s): %s", "; ".join(errors), span.body)
    return ParseFailure(span=span, reason=errors[-1])


def extract_operations(text: str) -> list[ExtractionResult]:
    """
    Extract every operation block from a response.

    Returns:
        One ParsedBlock or ParseFailure per block, in text order
    """
    return [decode_block(span) for span in find_blocks(text)]


def strip_blocks(text: str, spans: list[Span]) -> str:
    """Remove each block's literal text exactly once, by position."""
    pieces: list[str] = []
    cursor = 0
    for span in sorted(spans, key=lambda s: s.start):
        pieces.append(text[cursor:span.start])
        cursor = span.end
    pieces.append(text[cursor:])
    return "".join(pieces)


def append_results(text: str, lines: list[str]) -> str:
    """Append the results section (if any) and trim the text."""
    body = text.strip()
    if not lines:
        return body
    summary = f"{RESULTS_HEADER}\n" + "\n".join(lines)
    return f"{body}\n\n{summary}" if body else summary


def failure_line(failure: ParseFailure) -> str:
    return f"{FAILURE_PREFIX} File operation failed: {failure.reason}"
