import json
import random
from types import SimpleNamespace

import httpx
import openai
import pytest

from daily_practice.api import ContentProvider
from daily_practice.config import Settings
from daily_practice.controller import RefreshController


TEST_ENDPOINT = "https://api.example.test/v1/chat/completions"

SAMPLE_PAYLOAD = {
    "sourceText": "X",
    "targetText": "Y",
    "vocabulary": [{"term": "ROI", "definition": "投资回报率"}],
}


def completion(text):
    """Shape of an openai ChatCompletion, as far as ContentProvider reads it."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def exercise_json(**overrides) -> str:
    payload = dict(SAMPLE_PAYLOAD)
    payload.update(overrides)
    return json.dumps(payload, ensure_ascii=False)


def http_error(status: int) -> openai.APIStatusError:
    request = httpx.Request("POST", TEST_ENDPOINT)
    response = httpx.Response(status, request=request)
    return openai.APIStatusError(f"Error code: {status}", response=response, body=None)


def timeout_error() -> openai.APITimeoutError:
    return openai.APITimeoutError(request=httpx.Request("POST", TEST_ENDPOINT))


def connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", TEST_ENDPOINT))


class FakeCompletions:
    """
    Stand-in for client.chat.completions.

    Each outcome is either text (returned as a completion), an exception
    (raised), or a ready-made completion object. The last outcome repeats
    once the list runs out.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, SimpleNamespace):
            return outcome
        return completion(outcome)


class FakeClient:
    def __init__(self, *outcomes):
        self.completions = FakeCompletions(outcomes or [exercise_json()])
        self.chat = SimpleNamespace(completions=self.completions)

    @property
    def calls(self):
        return self.completions.calls


class DeferredSpawner:
    """Collects spawned work so a test decides when (and in what order) it runs."""

    def __init__(self):
        self.pending = []

    def __call__(self, work):
        self.pending.append(work)

    def run(self, index: int = 0) -> None:
        self.pending.pop(index)()

    def run_all(self) -> None:
        while self.pending:
            self.run(0)


def run_inline(work):
    work()


@pytest.fixture
def settings():
    return Settings(api_key="sk-test-abcdefghijklmnop")


@pytest.fixture
def make_provider(settings):
    def _make(*outcomes):
        client = FakeClient(*outcomes)
        return ContentProvider(settings, client=client), client
    return _make


@pytest.fixture
def make_controller(make_provider):
    """Build a controller whose generation runs inline (or via a given spawner)."""
    def _make(*outcomes, spawn=run_inline, **kwargs):
        provider, client = make_provider(*outcomes)
        controller = RefreshController(provider, rng=random.Random(7), spawn=spawn, **kwargs)
        return controller, client
    return _make


@pytest.fixture
def recorded_states():
    """Subscribe-able list that records every published SessionState."""
    states = []

    def _record(state):
        states.append(state)

    _record.states = states
    return _record
