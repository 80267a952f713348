from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Category(str, Enum):
    """Topic domain governing prompt content and fallback selection."""
    PROFESSIONAL = "professional"
    CASUAL = "casual"


DEFAULT_CATEGORY = Category.PROFESSIONAL


class Complexity(str, Enum):
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class FailureReason(str, Enum):
    """Why a generation request could not produce an Exercise."""
    NOT_CONFIGURED = "not_configured"    # No API key, so no client
    TRANSPORT = "transport"              # Non-2xx status or connection failure
    TIMEOUT = "timeout"
    EMPTY_RESPONSE = "empty_response"    # No text in the completion
    INVALID_JSON = "invalid_json"
    MISSING_FIELDS = "missing_fields"    # Valid JSON, wrong shape


@dataclass(frozen=True)
class VocabularyItem:
    """One annotated term shown under the revealed translation."""
    term: str                        # Word or phrase in the target language
    definition: str                  # Gloss in the source language


@dataclass(frozen=True)
class Exercise:
    """
    One translation exercise: a source sentence, its reference translation,
    and vocabulary annotations in display order.

    Exercises are never edited in place; every refresh builds a new one.
    """
    source_text: str                 # Sentence the learner translates
    target_text: str                 # Reference translation
    vocabulary: Tuple[VocabularyItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of the single in-memory card session.

    The controller replaces the snapshot on every change and hands the new
    one to observers, so a snapshot can be read from any thread.
    """
    active_category: Category = DEFAULT_CATEGORY
    current_exercise: Optional[Exercise] = None
    is_revealed: bool = False
    is_loading: bool = False
    last_error: Optional[str] = None
    is_fallback: bool = False        # True while the canned exercise is shown

    @property
    def phase(self) -> str:
        if self.is_loading:
            return "loading"
        if self.current_exercise is None:
            return "idle"
        if self.is_revealed:
            return "revealed"
        return "displayed"
