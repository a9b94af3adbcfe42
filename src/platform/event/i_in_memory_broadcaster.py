"""
In-memory Event Broadcaster Interface

Pub/sub for booking status updates between the use cases that change a
booking and the SSE endpoints watching it, within one process.
"""

from typing import Protocol

from anyio.streams.memory import MemoryObjectReceiveStream
from uuid_utils import UUID


class IInMemoryEventBroadcaster(Protocol):
    """
    Interface for in-memory event broadcasting

    Uses anyio's MemoryObjectStream so a slow subscriber can never block the
    publisher.
    """

    async def subscribe(self, *, booking_id: UUID) -> MemoryObjectReceiveStream[dict]:
        """
        Subscribe to booking status updates

        Args:
            booking_id: Booking UUID to subscribe to

        Returns:
            MemoryObjectReceiveStream that will receive event dictionaries
        """
        ...

    async def broadcast(self, *, booking_id: UUID, event_data: dict) -> None:
        """
        Broadcast event to all subscribers of this booking

        Note:
            - Silently ignores if no subscribers exist
            - Drops the event for a subscriber whose buffer is full
        """
        ...

    async def unsubscribe(
        self, *, booking_id: UUID, stream: MemoryObjectReceiveStream[dict]
    ) -> None:
        """
        Unsubscribe and cleanup

        Note:
            - Removes empty subscriber lists
            - Safe to call with non-existent stream
        """
        ...

    async def aclose(self) -> None:
        """Close every registered stream (app shutdown)"""
        ...
