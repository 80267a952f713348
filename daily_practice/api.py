"""
OpenAI-backed content provider for Daily Practice.

This module handles the one outbound call the app makes: sending a
composed exercise prompt to a chat-completion endpoint and returning the
raw text. Parsing and fallback policy live elsewhere (parsing.py and
controller.py); this layer only turns transport problems into a
GenerationError with a FailureReason.

Any OpenAI-compatible endpoint works; set OPENAI_BASE_URL to point at it.
"""

from typing import Any, Optional

import openai
from openai import OpenAI

from .config import Settings
from .logger import logger, Timer
from .models import FailureReason
from .prompts import GenerationRequest


class GenerationError(Exception):
    """The content provider could not return any text for a request."""

    def __init__(self, reason: FailureReason, message: str):
        super().__init__(message)
        self.reason = reason


class ContentProvider:
    """Thin wrapper around the OpenAI chat completions API."""

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        self.settings = settings

        if client is not None:
            self.client = client
        elif settings.has_api_key:
            logger.env("Initializing OpenAI client...")
            self.client = OpenAI(
                api_key=settings.api_key,
                base_url=settings.base_url,
                timeout=settings.timeout_seconds,
                max_retries=settings.max_retries,
            )
            logger.env_success("OpenAI client initialized successfully")
        else:
            logger.warning("OpenAI client not available, generation will use fallbacks")
            self.client = None

    def is_available(self) -> bool:
        """Check if the OpenAI client is properly configured."""
        return self.client is not None

    def complete(self, request: GenerationRequest) -> Optional[str]:
        """
        Send one generation request and return the completion text.

        The returned text may be None or blank; callers validate it.
        Raises GenerationError for everything that prevents a response
        from arriving at all.
        """
        if self.client is None:
            raise GenerationError(FailureReason.NOT_CONFIGURED, "OPENAI_API_KEY is not configured")

        logger.api(
            f"Generating {request.category.value} exercise "
            f"(scenario: {request.scenario!r}, complexity: {request.complexity.value})"
        )
        logger.api_call("chat.completions.create", model=self.settings.model)

        try:
            with Timer() as timer:
                completion = self.client.chat.completions.create(
                    model=self.settings.model,
                    response_format={"type": "json_object"},
                    messages=[{"role": "user", "content": request.prompt}],
                    temperature=self.settings.temperature,
                )
        except openai.APITimeoutError as e:
            logger.api_error(f"Request timed out after {self.settings.timeout_seconds:.0f}s")
            raise GenerationError(FailureReason.TIMEOUT, str(e)) from e
        except openai.APIStatusError as e:
            logger.api_error(f"Provider returned HTTP {e.status_code}")
            raise GenerationError(FailureReason.TRANSPORT, f"HTTP {e.status_code}: {e.message}") from e
        except openai.OpenAIError as e:
            logger.api_error(f"Provider call failed: {e}")
            raise GenerationError(FailureReason.TRANSPORT, str(e)) from e

        logger.api_response("chat.completions.create", duration_ms=timer.duration_ms)

        if not completion.choices:
            raise GenerationError(FailureReason.EMPTY_RESPONSE, "completion has no choices")

        return completion.choices[0].message.content
