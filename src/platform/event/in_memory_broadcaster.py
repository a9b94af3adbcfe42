"""
In-memory Event Broadcaster Implementation

Process-scoped broadcaster for distributing booking status events from the
status-advance use case to SSE endpoints. Subscribers connected to another
process never see these events.
"""

from typing import Dict, List

from anyio import BrokenResourceError, ClosedResourceError, Lock, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger


StreamPair = tuple[MemoryObjectSendStream[dict], MemoryObjectReceiveStream[dict]]


class InMemoryEventBroadcasterImpl:
    """
    In-memory pub/sub for booking status events

    Architecture:
    - Use Case -> broadcast() -> SSE Endpoint
    - Each booking_id has a list of subscriber stream tuples
    - Registry mutations are serialized with an anyio.Lock

    Memory Management:
    - Stream max buffer: ``buffer_size`` events (default 10)
    - Drop policy: drop for that subscriber if its stream is full
    - Cleanup: closed streams are deregistered during broadcast, empty lists removed
    """

    def __init__(self, *, buffer_size: int = 10):
        self._buffer_size = buffer_size
        self._subscribers: Dict[UUID, List[StreamPair]] = {}
        self._lock = Lock()

    def subscriber_count(self, *, booking_id: UUID) -> int:
        return len(self._subscribers.get(booking_id, []))

    async def subscribe(self, *, booking_id: UUID) -> MemoryObjectReceiveStream[dict]:
        send_stream, receive_stream = create_memory_object_stream[dict](
            max_buffer_size=self._buffer_size
        )

        async with self._lock:
            self._subscribers.setdefault(booking_id, []).append((send_stream, receive_stream))
            total = len(self._subscribers[booking_id])

        Logger.base.debug(
            f'📡 [BROADCASTER] Subscribed to booking {booking_id} (total subscribers: {total})'
        )
        return receive_stream

    async def broadcast(self, *, booking_id: UUID, event_data: dict) -> None:
        async with self._lock:
            subscribers = self._subscribers.get(booking_id)
            if not subscribers:
                Logger.base.debug(f'📡 [BROADCASTER] No subscribers for booking {booking_id}')
                return

            delivered = 0
            dropped = 0
            stale: List[StreamPair] = []

            for pair in subscribers:
                send_stream, _ = pair
                try:
                    send_stream.send_nowait(event_data)
                    delivered += 1
                except WouldBlock:
                    dropped += 1
                    Logger.base.warning(
                        f'⚠️ [BROADCASTER] Stream full for booking {booking_id}, '
                        f'dropping event (type={event_data.get("type")})'
                    )
                except (BrokenResourceError, ClosedResourceError):
                    stale.append(pair)

            for pair in stale:
                subscribers.remove(pair)
                await pair[0].aclose()
            if not subscribers:
                del self._subscribers[booking_id]

        Logger.base.info(
            f'📡 [BROADCASTER] Broadcast to booking {booking_id}: '
            f'delivered={delivered}, dropped={dropped}, deregistered={len(stale)}'
        )

    async def unsubscribe(
        self, *, booking_id: UUID, stream: MemoryObjectReceiveStream[dict]
    ) -> None:
        async with self._lock:
            subscribers = self._subscribers.get(booking_id)
            if subscribers is None:
                return

            for i, (send_stream, receive_stream) in enumerate(subscribers):
                if receive_stream is stream:
                    await send_stream.aclose()
                    await receive_stream.aclose()
                    subscribers.pop(i)
                    Logger.base.debug(
                        f'📡 [BROADCASTER] Unsubscribed from booking {booking_id} '
                        f'(remaining: {len(subscribers)})'
                    )
                    break

            if not subscribers:
                del self._subscribers[booking_id]

    async def aclose(self) -> None:
        async with self._lock:
            for subscribers in self._subscribers.values():
                # receivers drain what is buffered, then see end of stream
                for send_stream, _ in subscribers:
                    await send_stream.aclose()
            closed = len(self._subscribers)
            self._subscribers.clear()

        Logger.base.info(f'📡 [BROADCASTER] Closed streams for {closed} bookings')
