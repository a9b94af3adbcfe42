from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.ordering.app.command.respond_to_booking_use_case import (
    RespondToBookingUseCase,
)
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.ordering_errors import (
    InvalidModifiedItemError,
    OrderNotFoundError,
)
from src.service.ordering.domain.value_object.modified_item import ItemQuantityChange
from test.service.ordering.builders import (
    OTHER_VENDOR_ID,
    PANEER_ID,
    VENDOR_ID,
    make_booking,
    utc,
)
from test.service.ordering.fakes import FakeBookingRepo


pytestmark = pytest.mark.unit


class TestRespondToBooking:
    @pytest.fixture
    def booking_repo(self) -> FakeBookingRepo:
        return FakeBookingRepo()

    @pytest.fixture
    def use_case(self, booking_repo) -> RespondToBookingUseCase:
        return RespondToBookingUseCase(booking_command_repo=booking_repo, payment_currency='INR')

    @pytest.fixture
    async def pending_booking(self, booking_repo):
        return await booking_repo.create(booking=make_booking())

    @pytest.mark.asyncio
    async def test_accept_returns_payment_info(self, use_case, booking_repo, pending_booking):
        result = await use_case.respond(
            booking_id=pending_booking.id, vendor_id=VENDOR_ID, action='accept'
        )

        assert result.message == 'Order accepted successfully'
        assert result.data['totalAmount'] == 588.0
        assert result.data['paymentInfo'] == {
            'amount': 588.0,
            'currency': 'INR',
            'message': 'Please proceed with payment in the frontend',
        }
        assert result.data['booking']['orderStatus'] == 'accepted'

        stored = await booking_repo.get_by_id(booking_id=pending_booking.id)
        assert stored.order_status == OrderStatus.ACCEPTED
        assert stored.vendor_response_at is not None

    @pytest.mark.asyncio
    async def test_reject_with_time_suggestion(self, use_case, booking_repo, pending_booking):
        result = await use_case.respond(
            booking_id=pending_booking.id,
            vendor_id=VENDOR_ID,
            action='reject',
            rejection_reason='Too busy right now',
            suggested_time=utc(21),
            item_changes=[ItemQuantityChange(food_id=PANEER_ID, updated_quantity=1)],
        )

        assert result.message == 'Order rejected successfully'
        details = result.data['rejectionDetails']
        assert details['rejectionReason'] == 'Too busy right now'
        assert details['hasTimeSuggestion'] is True
        assert details['modifiedItems'][0]['updatedQuantity'] == 1

        stored = await booking_repo.get_by_id(booking_id=pending_booking.id)
        assert stored.order_status == OrderStatus.REJECTED

    @pytest.mark.asyncio
    async def test_unknown_action(self, use_case, pending_booking):
        with pytest.raises(ValidationError) as exc_info:
            await use_case.respond(
                booking_id=pending_booking.id, vendor_id=VENDOR_ID, action='maybe'
            )

        assert exc_info.value.message == 'Invalid action. Use "accept" or "reject"'

    @pytest.mark.asyncio
    async def test_other_vendor_sees_not_found(self, use_case, pending_booking):
        with pytest.raises(OrderNotFoundError) as exc_info:
            await use_case.respond(
                booking_id=pending_booking.id, vendor_id=OTHER_VENDOR_ID, action='accept'
            )

        assert exc_info.value.message == 'Order not found or already processed'

    @pytest.mark.asyncio
    async def test_second_response_is_rejected(self, use_case, pending_booking):
        await use_case.respond(booking_id=pending_booking.id, vendor_id=VENDOR_ID, action='accept')

        with pytest.raises(OrderNotFoundError):
            await use_case.respond(
                booking_id=pending_booking.id, vendor_id=VENDOR_ID, action='reject'
            )

    @pytest.mark.asyncio
    async def test_invalid_item_change_writes_nothing(self, use_case, booking_repo, pending_booking):
        with pytest.raises(InvalidModifiedItemError):
            await use_case.respond(
                booking_id=pending_booking.id,
                vendor_id=VENDOR_ID,
                action='reject',
                item_changes=[ItemQuantityChange(food_id=PANEER_ID, updated_quantity=3)],
            )

        stored = await booking_repo.get_by_id(booking_id=pending_booking.id)
        assert stored.order_status == OrderStatus.PENDING

    @pytest.mark.asyncio
    async def test_lost_race_against_timeout(self):
        # Given: The booking was read as pending but timed out before the write
        booking = make_booking()
        booking_repo = AsyncMock()
        booking_repo.get_by_id.return_value = booking
        booking_repo.update_if_status.return_value = None
        use_case = RespondToBookingUseCase(
            booking_command_repo=booking_repo, payment_currency='INR'
        )

        # When / Then
        with pytest.raises(OrderNotFoundError):
            await use_case.respond(booking_id=booking.id, vendor_id=VENDOR_ID, action='accept')

        booking_repo.update_if_status.assert_awaited_once()
        assert booking_repo.update_if_status.await_args.kwargs['expected_status'] == (
            OrderStatus.PENDING
        )
