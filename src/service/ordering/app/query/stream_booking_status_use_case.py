"""
Stream Booking Status Use Case

SSE streaming of one booking's live status for its owner.
"""

from collections.abc import AsyncGenerator
from typing import Any, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.sse_event_type import SseEventType


class StreamBookingStatusUseCase:
    """Use case for streaming booking status via SSE."""

    def __init__(
        self,
        booking_query_repo: IBookingQueryRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.event_broadcaster = event_broadcaster

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        event_broadcaster: IInMemoryEventBroadcaster = Depends(
            Provide[Container.event_broadcaster]
        ),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo, event_broadcaster=event_broadcaster)

    async def get_owned_booking(self, *, booking_id: UUID, user_id: str) -> Booking:
        """Checked before the response starts so a foreign id still gets a plain 404."""
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)
        if booking is None or booking.user_id != user_id:
            raise NotFoundError('Booking not found')
        return booking

    async def stream(
        self, *, booking_id: UUID, user_id: str
    ) -> AsyncGenerator[dict[str, Any], None]:
        """
        Stream booking status updates via SSE.

        Yields:
            The INITIAL frame with the full formatted booking, then every
            STATUS_UPDATE broadcast for this booking
        """
        # subscribe before reading the snapshot so no update can fall in between
        receive_stream = await self.event_broadcaster.subscribe(booking_id=booking_id)
        try:
            booking = await self.get_owned_booking(booking_id=booking_id, user_id=user_id)
            yield {'type': SseEventType.INITIAL.value, 'booking': format_booking(booking)}

            async with receive_stream:
                async for event_data in receive_stream:
                    yield event_data

        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'[SSE] Client disconnected from booking {booking_id}')
            raise
        except Exception as e:
            Logger.base.error(
                f'[SSE] Error in stream for booking {booking_id}: {type(e).__name__}: {e}'
            )
            raise
        finally:
            with anyio.CancelScope(shield=True):
                await self.event_broadcaster.unsubscribe(
                    booking_id=booking_id, stream=receive_stream
                )
