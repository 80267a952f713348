"""
Refresh controller: the single owner of the card session state.

A card moves through idle → loading → displayed → revealed → loading ...
Every user intent (initial mount, category switch, "next", reveal) goes
through RefreshController, which publishes a new SessionState snapshot to
its subscribers after each change.

Generation runs off the caller's thread (a daemon thread by default, the
same way the Tkinter front end keeps its window responsive). Requests
may overlap; each gets an increasing id and only the latest one is
allowed to write its result back.

The controller never raises past its public methods: any failure shows
the category's fallback exercise with a short message.
"""

import random
import threading
from dataclasses import replace
from typing import Callable, List, Optional, Tuple

from .api import ContentProvider, GenerationError
from .categories import fallback_for
from .logger import logger, Timer
from .models import Category, DEFAULT_CATEGORY, Exercise, SessionState
from .parsing import parse_exercise
from .prompts import build_prompt

GENERATION_FAILED_MESSAGE = (
    "Couldn't generate a new exercise, so a saved example is shown instead. "
    "Tap Next to try again."
)

StateCallback = Callable[[SessionState], None]
Spawner = Callable[[Callable[[], None]], None]


def _spawn_daemon_thread(work: Callable[[], None]) -> None:
    thread = threading.Thread(target=work, daemon=True)
    thread.start()


class RefreshController:
    """Orchestrates exercise requests and owns the SessionState."""

    def __init__(
        self,
        provider: ContentProvider,
        rng: Optional[random.Random] = None,
        spawn: Optional[Spawner] = None,
        initial_category: Category = DEFAULT_CATEGORY,
    ):
        self._provider = provider
        self._rng = rng or random.Random()
        self._spawn = spawn or _spawn_daemon_thread
        self._lock = threading.Lock()
        # Serializes notifications; reentrant so a subscriber may call reveal() etc.
        self._publish_lock = threading.RLock()
        self._state = SessionState(active_category=Category(initial_category))
        self._version = 0
        self._published_state = self._state
        self._published_version = 0
        self._latest_request_id = 0
        self._subscribers: List[StateCallback] = []

        if not provider.is_available():
            logger.warning("Content provider not configured: every card will be the fallback exercise")

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """
        Register `callback` to receive every new SessionState.

        Callbacks run on whichever thread made the change; UI code should
        hop back onto its own thread (e.g. `root.after(0, ...)`).
        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _publish(self) -> None:
        """
        Notify subscribers of the current snapshot.

        Snapshots go out in version order: if a newer change has already
        been published by another thread, this call publishes nothing.
        """
        with self._publish_lock:
            with self._lock:
                state, version = self._state, self._version
            if version <= self._published_version:
                return
            previous = self._published_state
            self._published_state, self._published_version = state, version

            if previous.phase != state.phase:
                logger.state_transition(previous.phase, state.phase)
            for callback in list(self._subscribers):
                try:
                    callback(state)
                except Exception as e:
                    logger.error(f"State subscriber {callback!r} failed: {e}", exc_info=True)

    def _update(self, **changes) -> SessionState:
        """Swap in a new snapshot. Caller must hold self._lock."""
        self._state = replace(self._state, **changes)
        self._version += 1
        return self._state

    # ------------------------------------------------------------------
    # User intents
    # ------------------------------------------------------------------

    def start(self) -> int:
        """Initial mount: load the first exercise for the active category."""
        return self.request_exercise(self._state.active_category)

    def request_next(self) -> int:
        return self.request_exercise(self._state.active_category)

    def request_exercise(self, category: Category) -> int:
        """
        Start generating a new exercise for `category`.

        Loading/reveal/error flags are updated before this returns; the
        network call happens in the spawned work. Returns the request id.
        """
        category = Category(category)
        with self._lock:
            self._latest_request_id += 1
            request_id = self._latest_request_id
            self._update(is_loading=True, last_error=None, is_revealed=False)
        self._publish()

        logger.task_start(f"generate_exercise #{request_id} ({category.value})")
        self._spawn(lambda: self._complete_request(request_id, category))
        return request_id

    def switch_category(self, category: Category) -> Optional[int]:
        """Change tabs. Does nothing if `category` is already active."""
        category = Category(category)
        with self._lock:
            previous = self._state.active_category
            if category == previous:
                logger.debug(f"switch_category({category.value}) ignored: already active")
                return None
            self._update(active_category=category, current_exercise=None, is_fallback=False)
        logger.state(f"Category switched: {previous.value} → {category.value}")
        self._publish()
        return self.request_exercise(category)

    def reveal(self) -> None:
        """Show the translation and vocabulary for the current exercise."""
        with self._lock:
            if self._state.is_revealed:
                return
            self._update(is_revealed=True)
        self._publish()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _generate(self, category: Category) -> Tuple[Exercise, Optional[str]]:
        """Return (exercise, error message); the fallback when anything fails."""
        request = build_prompt(category, self._rng)
        try:
            text = self._provider.complete(request)
        except GenerationError as e:
            logger.api_error(f"Generation failed ({e.reason.value}): {e}")
            return fallback_for(category), GENERATION_FAILED_MESSAGE

        result = parse_exercise(text)
        if not result.ok:
            logger.api_error(f"Unusable response ({result.failure.value}): {result.detail}")
            return fallback_for(category), GENERATION_FAILED_MESSAGE

        logger.success(f"Exercise generated: {result.exercise.source_text[:40]}...")
        return result.exercise, None

    def _complete_request(self, request_id: int, category: Category) -> None:
        task_name = f"generate_exercise #{request_id} ({category.value})"
        with Timer() as timer:
            try:
                exercise, error = self._generate(category)
            except Exception as e:
                logger.api_error(f"Unexpected error while generating: {e}", exc_info=True)
                exercise, error = fallback_for(category), GENERATION_FAILED_MESSAGE

        with self._lock:
            if request_id != self._latest_request_id:
                logger.debug(
                    f"Discarding stale result #{request_id} "
                    f"(latest is #{self._latest_request_id})"
                )
                return
            self._update(
                current_exercise=exercise,
                last_error=error,
                is_fallback=error is not None,
                is_loading=False,
            )

        if error is None:
            logger.task_complete(task_name, duration_ms=timer.duration_ms)
        else:
            logger.task_error(task_name, "showing fallback exercise")
        self._publish()
