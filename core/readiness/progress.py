#!/usr/bin/env python3
"""
Generation Progress - per-transition state machine with subscriber callbacks.

    idle -> running -> complete | failed
    complete | failed -> running   (regeneration)

Overlapping runs for one transition share the running state: the transition
stays running until the last of them finishes, and ends failed if any of them
failed. Listeners receive a GenerationEvent on every state change.

Only the most recent max_finished terminal states are remembered; older ones
read as idle again.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from core.utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_FINISHED = 1024


class GenerationState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class GenerationEvent:
    transition_id: int
    state: GenerationState
    error: Optional[str] = None
    at: datetime = field(default_factory=utcnow)


Listener = Callable[[GenerationEvent], None]


class InvalidStateTransition(RuntimeError):
    pass


@dataclass
class _Run:
    active: int = 0
    error: Optional[str] = None


class GenerationTracker:
    def __init__(self, max_finished: int = DEFAULT_MAX_FINISHED):
        self._running: Dict[int, _Run] = {}
        self._finished: "OrderedDict[int, GenerationState]" = OrderedDict()
        self._max_finished = max_finished
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def state(self, transition_id: int) -> GenerationState:
        if transition_id in self._running:
            return GenerationState.RUNNING
        return self._finished.get(transition_id, GenerationState.IDLE)

    def start(self, transition_id: int) -> None:
        run = self._running.get(transition_id)
        if run is not None:
            run.active += 1
            logger.debug(f"Generation for transition {transition_id} already running ({run.active} active)")
            return

        self._running[transition_id] = _Run(active=1)
        self._finished.pop(transition_id, None)
        self._notify(GenerationEvent(transition_id=transition_id, state=GenerationState.RUNNING))

    def complete(self, transition_id: int) -> None:
        self._finish(transition_id, None)

    def fail(self, transition_id: int, error: str) -> None:
        self._finish(transition_id, error)

    def _finish(self, transition_id: int, error: Optional[str]) -> None:
        run = self._running.get(transition_id)
        if run is None:
            target = "failed" if error is not None else "complete"
            raise InvalidStateTransition(
                f"Transition {transition_id}: cannot go from {self.state(transition_id).value} to {target}"
            )

        if error is not None:
            run.error = error
        run.active -= 1
        if run.active > 0:
            return

        del self._running[transition_id]
        state = GenerationState.FAILED if run.error is not None else GenerationState.COMPLETE
        self._finished[transition_id] = state
        while len(self._finished) > self._max_finished:
            self._finished.popitem(last=False)

        self._notify(GenerationEvent(transition_id=transition_id, state=state, error=run.error))

    def _notify(self, event: GenerationEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Progress listener failed for transition {event.transition_id}: {e}")
