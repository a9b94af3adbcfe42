from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.event.i_in_memory_broadcaster import IInMemoryEventBroadcaster
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ordering_metrics import metrics
from src.service.ordering.app.dto.booking_response_formatter import build_status_update_event
from src.service.ordering.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.ordering_errors import BookingStateError, OrderNotFoundError


class AdvanceBookingStatusUseCase:
    """
    Move an order one step along its service group's flow

    Dependencies:
    - booking_command_repo: conditional write on the status that was read
    - event_broadcaster: pushes the new status to open SSE streams (best effort)
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        event_broadcaster: IInMemoryEventBroadcaster,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.event_broadcaster = event_broadcaster
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        event_broadcaster: IInMemoryEventBroadcaster = Depends(
            Provide[Container.event_broadcaster]
        ),
    ) -> Self:
        return cls(booking_command_repo=booking_command_repo, event_broadcaster=event_broadcaster)

    @Logger.io
    async def advance(self, *, booking_id: UUID, vendor_id: str) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.advance_booking_status',
            attributes={'booking.id': str(booking_id), 'vendor.id': vendor_id},
        ) as span:
            booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
            if booking is None or booking.vendor_id != vendor_id:
                raise OrderNotFoundError('Order not found')

            previous_status = booking.order_status
            advanced = booking.advance()

            updated = await self.booking_command_repo.update_if_status(
                booking=advanced, expected_status=previous_status
            )
            if updated is None:
                raise BookingStateError(
                    'Order status changed while updating, please refresh and try again'
                )

            span.set_attribute('booking.status', updated.order_status.value)
            metrics.record_status_transition(to_status=updated.order_status.value)
            Logger.base.info(
                f'🔁 [ADVANCE-STATUS] Booking {booking_id}: {previous_status} -> {updated.order_status}'
            )

            try:
                await self.event_broadcaster.broadcast(
                    booking_id=updated.id, event_data=build_status_update_event(updated)
                )
            except Exception as e:
                # Don't fail use case if broadcast fails
                Logger.base.warning(f'⚠️ [SSE] Failed to broadcast status update: {e}')

            return updated
