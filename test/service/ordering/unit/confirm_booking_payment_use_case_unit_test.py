import anyio
import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.ordering.app.command.confirm_booking_payment_use_case import (
    ConfirmBookingPaymentUseCase,
)
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.ordering_errors import BookingStateError
from test.service.ordering.builders import OTHER_USER_ID, USER_ID, make_booking
from test.service.ordering.fakes import FakeBookingRepo


pytestmark = pytest.mark.unit


class TestConfirmBookingPayment:
    def setup_method(self):
        self.booking_repo = FakeBookingRepo()
        self.use_case = ConfirmBookingPaymentUseCase(
            booking_command_repo=self.booking_repo, default_payment_method='ONLINE'
        )

    @pytest.mark.asyncio
    async def test_confirm_accepted_booking(self):
        booking = await self.booking_repo.create(
            booking=make_booking(order_status=OrderStatus.ACCEPTED)
        )

        paid = await self.use_case.confirm(
            booking_id=booking.id,
            user_id=USER_ID,
            transaction_id='txn-42',
            provider_reference_id='order_Nx1',
        )

        assert paid.payment_status == PaymentStatus.COMPLETED
        assert paid.order_status == OrderStatus.ACCEPTED
        assert paid.payment_details.payment_method == 'ONLINE'
        assert paid.payment_details.amount == 588.0
        stored = await self.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.payment_status == PaymentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_explicit_amount_and_method_are_kept(self):
        booking = await self.booking_repo.create(
            booking=make_booking(order_status=OrderStatus.ACCEPTED)
        )

        paid = await self.use_case.confirm(
            booking_id=booking.id, user_id=USER_ID, amount=500.0, payment_method='UPI'
        )

        assert paid.payment_details.amount == 500.0
        assert paid.payment_details.payment_method == 'UPI'

    @pytest.mark.asyncio
    async def test_second_confirmation_is_rejected(self):
        booking = await self.booking_repo.create(
            booking=make_booking(order_status=OrderStatus.ACCEPTED)
        )
        await self.use_case.confirm(booking_id=booking.id, user_id=USER_ID)

        with pytest.raises(BookingStateError, match='Payment already completed for this order'):
            await self.use_case.confirm(booking_id=booking.id, user_id=USER_ID)

    @pytest.mark.asyncio
    async def test_pending_booking_cannot_be_paid(self):
        booking = await self.booking_repo.create(booking=make_booking())

        with pytest.raises(
            BookingStateError, match='Payment can only be confirmed for accepted orders'
        ):
            await self.use_case.confirm(booking_id=booking.id, user_id=USER_ID)

    @pytest.mark.asyncio
    async def test_other_users_booking_is_not_found(self):
        booking = await self.booking_repo.create(
            booking=make_booking(order_status=OrderStatus.ACCEPTED)
        )

        with pytest.raises(NotFoundError, match='Booking not found'):
            await self.use_case.confirm(booking_id=booking.id, user_id=OTHER_USER_ID)


class SlowReadBookingRepo(FakeBookingRepo):
    """Yields on every read so concurrent confirmations interleave"""

    async def get_by_id(self, *, booking_id):
        await anyio.sleep(0.01)
        return await super().get_by_id(booking_id=booking_id)


class TestConcurrentPaymentConfirmation:
    @pytest.mark.asyncio
    async def test_only_one_of_two_racing_confirmations_wins(self):
        # Given: both callers read the booking while payment is still pending
        booking_repo = SlowReadBookingRepo()
        booking = booking_repo.add(make_booking(order_status=OrderStatus.ACCEPTED))
        use_case = ConfirmBookingPaymentUseCase(booking_command_repo=booking_repo)
        results = []

        async def confirm(transaction_id):
            try:
                paid = await use_case.confirm(
                    booking_id=booking.id, user_id=USER_ID, transaction_id=transaction_id
                )
                results.append(('ok', paid.payment_details.transaction_id))
            except BookingStateError as exc:
                results.append(('rejected', exc.message))

        # When
        async with anyio.create_task_group() as tg:
            tg.start_soon(confirm, 'txn-1')
            tg.start_soon(confirm, 'txn-2')

        # Then: the loser is told the payment is already completed
        winners = [tx for outcome, tx in results if outcome == 'ok']
        assert len(winners) == 1
        assert ('rejected', 'Payment already completed for this order') in results
        stored = booking_repo.bookings[str(booking.id)]
        assert stored.payment_details.transaction_id == winners[0]
