"""Event Publisher port - interface for publishing session events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...core.session import SessionPhase


@dataclass(frozen=True, slots=True)
class SessionEvent:
    """Event emitted whenever the session changes phase."""
    phase: SessionPhase
    message: str = ""
    generation: int = 0


@runtime_checkable
class EventPublisher(Protocol):
    """Port for publishing session events."""

    def publish(self, event: SessionEvent) -> None:
        """Publish an event."""
        ...

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> None:
        """Subscribe to events."""
        ...


class SimpleEventPublisher:
    """Simple synchronous event publisher."""

    def __init__(self):
        self._subscribers: list[Callable[[SessionEvent], None]] = []

    def publish(self, event: SessionEvent) -> None:
        for callback in self._subscribers:
            callback(event)

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[SessionEvent], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)
