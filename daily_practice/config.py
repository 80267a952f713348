"""
Deployment-time configuration for Daily Practice.

Secrets are expected in a .env file at the project root:

    OPENAI_API_KEY=sk-...
    OPENAI_BASE_URL=https://...        # optional, any OpenAI-compatible endpoint

We use python-dotenv + os.getenv so secrets stay out of git. Settings are
read once at startup and never change while the app runs.
"""

import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from .logger import logger

# Choose a fast-ish model
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
# High temperature for varied sentences
DEFAULT_TEMPERATURE = 1.1
DEFAULT_TIMEOUT_SECONDS = 20.0
# No automatic retries: a failed request falls back and the user retries
DEFAULT_MAX_RETRIES = 0

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = DEFAULT_CHAT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def masked_api_key(self) -> str:
        """Show the first 8 and last 4 chars of the key for logging."""
        if not self.api_key:
            return "<unset>"
        if len(self.api_key) <= 12:
            return "***"
        return f"{self.api_key[:8]}...{self.api_key[-4:]}"


def _read_number(
    environ: Mapping[str, str],
    name: str,
    default: T,
    cast: Callable[[str], T],
) -> T:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a valid number, using default {default}")
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None, use_dotenv: bool = True) -> Settings:
    """
    Build Settings from the environment (and .env, unless disabled).

    Never raises: a missing key only means generation will always fall
    back to canned exercises.
    """
    logger.separator("Daily Practice - Configuration")

    if use_dotenv:
        logger.env("Loading environment variables from .env file...")
        if load_dotenv():
            logger.env_success("dotenv file loaded successfully")
        else:
            logger.warning("No .env file found or file is empty")

    if environ is None:
        environ = os.environ

    temperature = _read_number(environ, "DAILY_PRACTICE_TEMPERATURE", DEFAULT_TEMPERATURE, float)
    timeout_seconds = _read_number(environ, "DAILY_PRACTICE_TIMEOUT", DEFAULT_TIMEOUT_SECONDS, float)
    max_retries = _read_number(environ, "DAILY_PRACTICE_MAX_RETRIES", DEFAULT_MAX_RETRIES, int)

    settings = Settings(
        api_key=(environ.get("OPENAI_API_KEY") or "").strip() or None,
        base_url=(environ.get("OPENAI_BASE_URL") or "").strip() or None,
        model=(environ.get("DAILY_PRACTICE_MODEL") or "").strip() or DEFAULT_CHAT_MODEL,
        temperature=min(max(temperature, 0.0), 2.0),
        timeout_seconds=max(timeout_seconds, 1.0),
        max_retries=max(max_retries, 0),
    )

    if settings.has_api_key:
        logger.env_success(f"OPENAI_API_KEY found: {settings.masked_api_key()}")
    else:
        logger.env_error("OPENAI_API_KEY not found in environment!")
        logger.warning("Every request will show the canned fallback exercise")

    logger.env(f"Endpoint: {settings.base_url or 'OpenAI default'}")
    logger.env(
        f"Chat model: {settings.model} "
        f"(temperature={settings.temperature}, timeout={settings.timeout_seconds:.0f}s, "
        f"retries={settings.max_retries})"
    )
    logger.separator("Configuration Ready")
    return settings
