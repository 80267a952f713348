"""
Parsing of provider text into Exercise objects.

Two stages:
1. strip_code_fences() removes a surrounding ```json ... ``` block, which
   models sometimes add even when asked for bare JSON.
2. parse_exercise() decodes the JSON and checks every required field,
   returning a ParseResult instead of raising.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from .models import Exercise, FailureReason, VocabularyItem

_FENCE_RE = re.compile(r"^```[\w+-]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


@dataclass(frozen=True)
class ParseResult:
    exercise: Optional[Exercise] = None
    failure: Optional[FailureReason] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.exercise is not None

    @classmethod
    def failed(cls, reason: FailureReason, detail: str) -> "ParseResult":
        return cls(failure=reason, detail=detail)


def strip_code_fences(text: str) -> str:
    """Remove one surrounding markdown code fence (with optional language tag)."""
    stripped = (text or "").strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _required_text(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def _parse_vocabulary(raw: Any) -> Optional[List[VocabularyItem]]:
    if not isinstance(raw, list):
        return None

    items: List[VocabularyItem] = []
    for entry in raw:
        if not isinstance(entry, dict):
            return None
        term = _required_text(entry, "term")
        definition = _required_text(entry, "definition")
        if term is None or definition is None:
            return None
        items.append(VocabularyItem(term=term, definition=definition))
    return items


def parse_exercise(text: Optional[str]) -> ParseResult:
    """
    Turn raw provider text into an Exercise.

    Empty text, invalid JSON, and JSON missing "sourceText", "targetText"
    or a well-formed "vocabulary" list all come back as a failed
    ParseResult naming the reason.
    """
    if text is None or not text.strip():
        return ParseResult.failed(FailureReason.EMPTY_RESPONSE, "provider returned no text")

    body = strip_code_fences(text)
    try:
        data = json.loads(body)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; so are oversized int literals (3.11+).
        # Pathologically nested arrays overflow the decoder's recursion limit.
        return ParseResult.failed(FailureReason.INVALID_JSON, f"invalid JSON: {type(e).__name__}: {e}")

    if not isinstance(data, dict):
        return ParseResult.failed(
            FailureReason.INVALID_JSON, f"expected a JSON object, got {type(data).__name__}"
        )

    source_text = _required_text(data, "sourceText")
    if source_text is None:
        return ParseResult.failed(FailureReason.MISSING_FIELDS, "sourceText missing or empty")

    target_text = _required_text(data, "targetText")
    if target_text is None:
        return ParseResult.failed(FailureReason.MISSING_FIELDS, "targetText missing or empty")

    if "vocabulary" not in data:
        return ParseResult.failed(FailureReason.MISSING_FIELDS, "vocabulary missing")
    vocabulary = _parse_vocabulary(data["vocabulary"])
    if vocabulary is None:
        return ParseResult.failed(
            FailureReason.MISSING_FIELDS, "vocabulary must be a list of {term, definition} strings"
        )

    return ParseResult(exercise=Exercise(
        source_text=source_text,
        target_text=target_text,
        vocabulary=tuple(vocabulary),
    ))
