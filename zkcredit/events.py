"""
Event records emitted by the verifier.

Events are notifications, not state: nothing in the verifier reads
them back.  ``EventLog`` keeps a bounded history for inspection and
fans each event out to subscribed callbacks.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, List, Optional, Type, TypeVar, Union

from .proofs import VerificationKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProofVerified:
    user: str
    valid: bool
    timestamp: int


@dataclass(frozen=True)
class ScoreUpdated:
    user: str
    old_score: int
    new_score: int
    timestamp: int


@dataclass(frozen=True)
class VerificationKeyUpdated:
    old_key: VerificationKey
    new_key: VerificationKey


@dataclass(frozen=True)
class Paused:
    admin: str


@dataclass(frozen=True)
class Unpaused:
    admin: str


Event = Union[ProofVerified, ScoreUpdated, VerificationKeyUpdated, Paused, Unpaused]
Listener = Callable[[Event], None]
E = TypeVar("E")


class EventLog:
    """Bounded, append-only event history with subscribers."""

    def __init__(self, maxlen: Optional[int] = 1024) -> None:
        self._history: Deque[Event] = deque(maxlen=maxlen)
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def emit(self, *events: Event) -> None:
        """
        Record *events*, then call every listener in subscription order.

        All events are recorded before any listener runs.  A listener
        that raises is logged and skipped; the remaining listeners still
        see the event and the caller never sees the exception.
        """
        self._history.extend(events)
        listeners = list(self._listeners)
        for event in events:
            for listener in listeners:
                try:
                    listener(event)
                except Exception:
                    logger.exception(
                        "listener %r failed on %s", listener, type(event).__name__
                    )

    def of_type(self, kind: Type[E]) -> List[E]:
        return [e for e in self._history if isinstance(e, kind)]

    def clear(self) -> None:
        self._history.clear()

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._history))

    def __len__(self) -> int:
        return len(self._history)
