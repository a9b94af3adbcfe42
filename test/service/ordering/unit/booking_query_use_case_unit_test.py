"""
Unit tests for the read side: my-orders pagination, tracking and vendor queues
"""

import pytest

from src.platform.exception.exceptions import NotFoundError
from src.platform.types import new_uuid7
from src.service.ordering.app.query.get_booking_use_case import GetBookingUseCase
from src.service.ordering.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.ordering.app.query.list_vendor_orders_use_case import ListVendorOrdersUseCase
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from test.service.ordering.builders import (
    OTHER_USER_ID,
    OTHER_VENDOR_ID,
    USER_ID,
    VENDOR_ID,
    make_booking,
    utc,
)
from test.service.ordering.fakes import FakeBookingRepo


pytestmark = pytest.mark.unit


@pytest.fixture
def booking_repo() -> FakeBookingRepo:
    return FakeBookingRepo()


class TestListUserBookings:
    @pytest.mark.asyncio
    async def test_newest_first_with_pagination(self, booking_repo):
        older = await booking_repo.create(booking=make_booking(created_at=utc(10)))
        middle = await booking_repo.create(booking=make_booking(created_at=utc(11)))
        newest = await booking_repo.create(booking=make_booking(created_at=utc(12)))
        await booking_repo.create(booking=make_booking(user_id=OTHER_USER_ID))
        use_case = ListBookingsUseCase(booking_query_repo=booking_repo)

        first_page = await use_case.list_user_bookings(user_id=USER_ID, page=1, limit=2)
        second_page = await use_case.list_user_bookings(user_id=USER_ID, page=2, limit=2)

        assert [o['id'] for o in first_page['orders']] == [str(newest.id), str(middle.id)]
        assert [o['id'] for o in second_page['orders']] == [str(older.id)]
        assert first_page['pagination'] == {'page': 1, 'limit': 2, 'total': 3, 'totalPages': 2}

    @pytest.mark.asyncio
    async def test_no_orders(self, booking_repo):
        use_case = ListBookingsUseCase(booking_query_repo=booking_repo)

        result = await use_case.list_user_bookings(user_id=USER_ID)

        assert result == {
            'orders': [],
            'pagination': {'page': 1, 'limit': 20, 'total': 0, 'totalPages': 0},
        }


class TestGetBooking:
    @pytest.mark.asyncio
    async def test_owner_can_track(self, booking_repo):
        booking = await booking_repo.create(booking=make_booking())
        use_case = GetBookingUseCase(booking_query_repo=booking_repo)

        found = await use_case.get_for_user(booking_id=booking.id, user_id=USER_ID)

        assert found.id == booking.id

    @pytest.mark.asyncio
    async def test_foreign_and_missing_look_the_same(self, booking_repo):
        booking = await booking_repo.create(booking=make_booking())
        use_case = GetBookingUseCase(booking_query_repo=booking_repo)

        with pytest.raises(NotFoundError, match='Booking not found'):
            await use_case.get_for_user(booking_id=booking.id, user_id=OTHER_USER_ID)
        with pytest.raises(NotFoundError, match='Booking not found'):
            await use_case.get_for_user(booking_id=new_uuid7(), user_id=USER_ID)


class TestVendorQueues:
    @pytest.mark.asyncio
    async def test_pending_and_active_queues(self, booking_repo):
        pending = await booking_repo.create(booking=make_booking())
        unpaid_accepted = await booking_repo.create(
            booking=make_booking(order_status=OrderStatus.ACCEPTED)
        )
        paid_preparing = await booking_repo.create(
            booking=make_booking(
                order_status=OrderStatus.PREPARING, payment_status=PaymentStatus.COMPLETED
            )
        )
        await booking_repo.create(
            booking=make_booking(
                order_status=OrderStatus.COMPLETED, payment_status=PaymentStatus.COMPLETED
            )
        )
        await booking_repo.create(booking=make_booking(vendor_id=OTHER_VENDOR_ID))
        use_case = ListVendorOrdersUseCase(booking_query_repo=booking_repo)

        pending_orders = await use_case.list_pending(vendor_id=VENDOR_ID)
        active_orders = await use_case.list_active(vendor_id=VENDOR_ID)

        assert [o['id'] for o in pending_orders] == [str(pending.id)]
        assert [o['id'] for o in active_orders] == [str(paid_preparing.id)]
        assert str(unpaid_accepted.id) not in {o['id'] for o in active_orders}
