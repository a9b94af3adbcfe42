"""
Unit tests for AdvanceBookingStatusUseCase

The broadcaster is an AsyncMock: broadcast is best effort and never
affects the outcome of the status change.
"""

from unittest.mock import AsyncMock

import pytest

from src.service.ordering.app.command.advance_booking_status_use_case import (
    AdvanceBookingStatusUseCase,
)
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.enum.service_type import ServiceType
from src.service.ordering.domain.ordering_errors import BookingStateError, OrderNotFoundError
from test.service.ordering.builders import OTHER_VENDOR_ID, VENDOR_ID, make_booking
from test.service.ordering.fakes import FakeBookingRepo


pytestmark = pytest.mark.unit


class TestAdvanceBookingStatus:
    def setup_method(self):
        self.booking_repo = FakeBookingRepo()
        self.event_broadcaster = AsyncMock()
        self.use_case = AdvanceBookingStatusUseCase(
            booking_command_repo=self.booking_repo, event_broadcaster=self.event_broadcaster
        )

    async def _store(self, **kwargs):
        return await self.booking_repo.create(booking=make_booking(**kwargs))

    @pytest.mark.asyncio
    async def test_dine_in_walks_to_completed(self):
        # Given: A paid dine-in order
        booking = await self._store(
            service_type=ServiceType.DINE_IN,
            order_status=OrderStatus.ACCEPTED,
            payment_status=PaymentStatus.COMPLETED,
        )

        # When: The vendor advances three times
        statuses = []
        for _ in range(3):
            updated = await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)
            statuses.append(updated.order_status)

        # Then: preparing -> served -> completed, one live update each
        assert statuses == [OrderStatus.PREPARING, OrderStatus.SERVED, OrderStatus.COMPLETED]
        assert self.event_broadcaster.broadcast.await_count == 3
        last_call = self.event_broadcaster.broadcast.await_args
        assert last_call.kwargs['booking_id'] == booking.id
        assert last_call.kwargs['event_data']['type'] == 'STATUS_UPDATE'
        assert last_call.kwargs['event_data']['orderStatus'] == 'completed'

        # And: Completed is final
        with pytest.raises(BookingStateError, match='Order is already completed'):
            await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

    @pytest.mark.asyncio
    async def test_unpaid_order_cannot_start_preparing(self):
        booking = await self._store(order_status=OrderStatus.ACCEPTED)

        with pytest.raises(BookingStateError, match='Payment must be completed'):
            await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

        stored = await self.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.order_status == OrderStatus.ACCEPTED
        self.event_broadcaster.broadcast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_pending_order_cannot_advance(self):
        booking = await self._store()

        with pytest.raises(BookingStateError, match='must be accepted'):
            await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

    @pytest.mark.asyncio
    async def test_takeaway_goes_through_ready_for_pickup(self):
        booking = await self._store(
            service_type=ServiceType.PICKUP,
            order_status=OrderStatus.PREPARING,
            payment_status=PaymentStatus.COMPLETED,
        )

        updated = await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

        assert updated.order_status == OrderStatus.READY_FOR_PICKUP

    @pytest.mark.asyncio
    async def test_other_vendor_sees_not_found(self):
        booking = await self._store(
            order_status=OrderStatus.ACCEPTED, payment_status=PaymentStatus.COMPLETED
        )

        with pytest.raises(OrderNotFoundError, match='Order not found'):
            await self.use_case.advance(booking_id=booking.id, vendor_id=OTHER_VENDOR_ID)

    @pytest.mark.asyncio
    async def test_broadcast_failure_does_not_fail_advance(self):
        self.event_broadcaster.broadcast.side_effect = RuntimeError('stream gone')
        booking = await self._store(
            order_status=OrderStatus.ACCEPTED, payment_status=PaymentStatus.COMPLETED
        )

        updated = await self.use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

        assert updated.order_status == OrderStatus.PREPARING
        stored = await self.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.order_status == OrderStatus.PREPARING

    @pytest.mark.asyncio
    async def test_concurrent_advance_loses_guarded_write(self):
        # Given: Repo reports the status changed since it was read
        booking = make_booking(
            order_status=OrderStatus.ACCEPTED, payment_status=PaymentStatus.COMPLETED
        )
        booking_repo = AsyncMock()
        booking_repo.get_by_id.return_value = booking
        booking_repo.update_if_status.return_value = None
        use_case = AdvanceBookingStatusUseCase(
            booking_command_repo=booking_repo, event_broadcaster=self.event_broadcaster
        )

        with pytest.raises(BookingStateError, match='Order status changed while updating'):
            await use_case.advance(booking_id=booking.id, vendor_id=VENDOR_ID)

        assert booking_repo.update_if_status.await_args.kwargs['expected_status'] == (
            OrderStatus.ACCEPTED
        )
        self.event_broadcaster.broadcast.assert_not_awaited()
