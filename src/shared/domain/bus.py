"""Ports for the in-process domain event bus.

The outbox relay is the only publisher; handlers run after the
transaction that recorded the event has committed.
"""

from __future__ import annotations

from typing import List, Protocol, Type, TypeVar, runtime_checkable

from shared.domain.events import DomainEvent

EventT = TypeVar("EventT", bound=DomainEvent, contravariant=True)


@runtime_checkable
class IEventHandler(Protocol[EventT]):
    def handle(self, event: EventT) -> None:
        """React to *event*; raising marks the outbox row as failed."""


class IEventBus(Protocol):
    def publish(self, event: DomainEvent) -> None: ...

    def subscribe(
        self, event_class: Type[DomainEvent], handler: IEventHandler
    ) -> None: ...

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]: ...
