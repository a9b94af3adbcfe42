"""
Unit tests for CreateBookingUseCase

Test Coverage:
1. Validation before anything is persisted (service type, fields, cart, vendor, coupon)
2. Vendor decision observed while waiting (accept / reject)
3. Timeout: guarded pending -> timeout, booking removed afterwards
4. Race at the deadline: a decision that lands first wins over the timeout
"""

from typing import Any

import anyio
import pytest

from src.platform.exception.exceptions import InfrastructureError, ValidationError
from src.service.ordering.app.command.create_booking_use_case import (
    ACCEPTED_MESSAGE,
    REJECTED_MESSAGE,
    TIMEOUT_MESSAGE,
    CreateBookingUseCase,
)
from src.service.ordering.app.command.respond_to_booking_use_case import (
    RespondToBookingUseCase,
)
from src.service.ordering.app.service.cart_snapshot_builder import CartSnapshotBuilder
from src.service.ordering.app.service.coupon_reconciler import CouponReconciler
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.ordering_errors import (
    CouponInvalidError,
    EmptyCartError,
    ServiceTypeMismatchError,
    VendorMissingError,
    VendorNotFoundError,
)
from src.service.ordering.domain.value_object.modified_item import ItemQuantityChange
from test.service.ordering.builders import (
    PANEER_ID,
    USER_ID,
    VENDOR_ID,
    make_cart,
    make_coupon,
    make_customer,
    make_vendor,
    utc,
)
from test.service.ordering.fakes import (
    FakeBookingRepo,
    FakeCartRepo,
    FakeCouponRepo,
    FakeCustomerRepo,
    FakeVendorRepo,
)


pytestmark = pytest.mark.unit

DELIVERY_REQUEST: dict[str, Any] = {
    'service_type': 'Delivery',
    'address': '12 MG Road, Bengaluru',
    'latitude': 12.97,
    'longitude': 77.59,
    'name': 'Asha',
    'phone_number': '9876543210',
}


def build_use_case(
    *,
    booking_repo: FakeBookingRepo,
    cart_repo: FakeCartRepo,
    coupon_repo: FakeCouponRepo | None = None,
    vendor_repo: FakeVendorRepo | None = None,
    vendor_wait_seconds: float = 0.05,
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        booking_command_repo=booking_repo,
        vendor_query_repo=vendor_repo or FakeVendorRepo(make_vendor()),
        customer_query_repo=FakeCustomerRepo(make_customer()),
        cart_snapshot_builder=CartSnapshotBuilder(cart_repo=cart_repo),
        coupon_reconciler=CouponReconciler(
            coupon_repo=coupon_repo or FakeCouponRepo(), cart_repo=cart_repo
        ),
        vendor_wait_seconds=vendor_wait_seconds,
        poll_interval_seconds=0.01,
    )


async def wait_for_placed_booking(booking_repo: FakeBookingRepo):
    with anyio.fail_after(1.0):
        while not booking_repo.bookings:
            await anyio.sleep(0.005)
    return next(iter(booking_repo.bookings.values())).id


class TestCreateBookingValidation:
    def setup_method(self):
        self.booking_repo = FakeBookingRepo()
        self.cart_repo = FakeCartRepo(make_cart())

    @pytest.mark.asyncio
    async def test_unknown_service_type(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=self.cart_repo)

        with pytest.raises(ValidationError, match='Invalid serviceType'):
            await use_case.create_booking(user_id=USER_ID, service_type='catering')

        assert self.booking_repo.bookings == {}

    @pytest.mark.asyncio
    async def test_missing_fields_reported_per_field(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=self.cart_repo)

        with pytest.raises(ValidationError) as exc_info:
            await use_case.create_booking(user_id=USER_ID, service_type='Delivery', name='Asha')

        fields = [error['field'] for error in exc_info.value.errors]
        assert fields == ['address', 'latitude', 'longitude', 'phoneNumber']
        assert self.booking_repo.bookings == {}

    @pytest.mark.asyncio
    async def test_dine_in_requires_party_size_and_time(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=self.cart_repo)

        with pytest.raises(ValidationError) as exc_info:
            await use_case.create_booking(user_id=USER_ID, service_type='dine-in', person_count=2)

        assert exc_info.value.errors == [
            {'field': 'reachTime', 'message': 'reachTime is required for Dine in'}
        ]

    @pytest.mark.asyncio
    async def test_empty_cart(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=FakeCartRepo(make_cart(items=[]))
        )

        with pytest.raises(EmptyCartError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

    @pytest.mark.asyncio
    async def test_no_cart_at_all(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=FakeCartRepo())

        with pytest.raises(EmptyCartError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

    @pytest.mark.asyncio
    async def test_cart_locked_to_other_service_type(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=self.cart_repo)

        with pytest.raises(ServiceTypeMismatchError) as exc_info:
            await use_case.create_booking(
                user_id=USER_ID, service_type='Dine in', person_count=2, reach_time=utc(19)
            )

        assert exc_info.value.message == (
            'Cart is locked to Delivery. Please keep booking service type consistent.'
        )
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_cart_without_service_type_is_a_mismatch(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=FakeCartRepo(make_cart(service_type=None))
        )

        with pytest.raises(ServiceTypeMismatchError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

    @pytest.mark.asyncio
    async def test_cart_without_vendor(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=FakeCartRepo(make_cart(vendor_id=None))
        )

        with pytest.raises(VendorMissingError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

    @pytest.mark.asyncio
    async def test_vendor_no_longer_exists(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=self.cart_repo, vendor_repo=FakeVendorRepo()
        )

        with pytest.raises(VendorNotFoundError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        assert self.booking_repo.bookings == {}

    @pytest.mark.asyncio
    async def test_invalid_coupon_fails_booking_and_strips_cart(self):
        cart = make_cart(coupon_code='SAVE50', coupon_discount=50.0)
        use_case = build_use_case(
            booking_repo=self.booking_repo,
            cart_repo=FakeCartRepo(cart),
            coupon_repo=FakeCouponRepo(make_coupon(min_order_amount=10_000.0)),
        )

        with pytest.raises(CouponInvalidError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        assert cart.coupon_code is None
        assert self.booking_repo.bookings == {}

    @pytest.mark.asyncio
    async def test_connected_cart_pointing_nowhere_is_disconnected(self):
        cart = make_cart(connected_cart_id='cart-gone')
        cart_repo = FakeCartRepo(cart)
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=cart_repo)

        with pytest.raises(EmptyCartError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        assert cart.connected_cart_id is None
        assert cart_repo.save_count == 1


class TestCreateBookingOutcome:
    def setup_method(self):
        self.booking_repo = FakeBookingRepo()
        self.cart_repo = FakeCartRepo(make_cart())
        self.respond_use_case = RespondToBookingUseCase(
            booking_command_repo=self.booking_repo, payment_currency='INR'
        )

    async def _place_and_respond(self, use_case, respond) -> Any:
        outcome: dict[str, Any] = {}

        async def place() -> None:
            outcome['result'] = await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        async with anyio.create_task_group() as tg:
            tg.start_soon(place)
            booking_id = await wait_for_placed_booking(self.booking_repo)
            await respond(booking_id)

        return outcome['result']

    @pytest.mark.asyncio
    async def test_vendor_accepts_while_waiting(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=self.cart_repo, vendor_wait_seconds=2.0
        )

        async def accept(booking_id):
            await self.respond_use_case.respond(
                booking_id=booking_id, vendor_id=VENDOR_ID, action='accept'
            )

        with anyio.fail_after(2.0):
            result = await self._place_and_respond(use_case, accept)

        assert result.message == ACCEPTED_MESSAGE
        assert result.booking.order_status == OrderStatus.ACCEPTED
        assert result.formatted['orderStatus'] == 'accepted'
        assert result.formatted['user']['name'] == 'Asha'
        assert result.formatted['vendor']['name'] == 'Spice Route'
        # accepted bookings stay on record
        assert str(result.booking.id) in self.booking_repo.bookings

    @pytest.mark.asyncio
    async def test_vendor_rejects_while_waiting(self):
        use_case = build_use_case(
            booking_repo=self.booking_repo, cart_repo=self.cart_repo, vendor_wait_seconds=2.0
        )

        async def reject(booking_id):
            await self.respond_use_case.respond(
                booking_id=booking_id,
                vendor_id=VENDOR_ID,
                action='reject',
                rejection_reason='Out of paneer',
                item_changes=[ItemQuantityChange(food_id=PANEER_ID, updated_quantity=1)],
            )

        with anyio.fail_after(2.0):
            result = await self._place_and_respond(use_case, reject)

        assert result.message == REJECTED_MESSAGE
        assert result.formatted['rejectionDetails']['rejectionReason'] == 'Out of paneer'
        assert result.formatted['rejectionDetails']['hasPartialRejection'] is True

    @pytest.mark.asyncio
    async def test_no_vendor_response_times_out(self):
        use_case = build_use_case(booking_repo=self.booking_repo, cart_repo=self.cart_repo)

        with anyio.fail_after(1.0):
            result = await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        assert result.message == TIMEOUT_MESSAGE
        assert result.booking.order_status == OrderStatus.TIMEOUT
        assert result.booking.vendor_response_at is not None
        assert result.formatted['orderStatus'] == 'timeout'
        # timed-out bookings are removed once reported
        assert self.booking_repo.bookings == {}
        assert self.booking_repo.deleted == [str(result.booking.id)]

    @pytest.mark.asyncio
    async def test_booking_keeps_snapshot_and_coupon(self):
        cart = make_cart(coupon_code='SAVE50', coupon_discount=50.0)
        coupon = make_coupon()
        use_case = build_use_case(
            booking_repo=self.booking_repo,
            cart_repo=FakeCartRepo(cart),
            coupon_repo=FakeCouponRepo(coupon),
        )

        result = await use_case.create_booking(
            user_id=USER_ID, notes='  ring the bell  ', **DELIVERY_REQUEST
        )

        booking = result.booking
        assert booking.coupon_code == 'SAVE50'
        assert booking.coupon_discount == 50.0
        assert booking.coupon_id == 'coupon-1'
        assert booking.amount_summary.grand_total == 538.0
        assert booking.notes == 'ring the bell'
        assert coupon.used_count == 1

        # later cart edits never reach the booking
        cart.items.clear()
        assert len(booking.cart_snapshot.items) == 2

    @pytest.mark.asyncio
    async def test_decision_landing_at_deadline_wins_over_timeout(self):
        class LateDecisionRepo(FakeBookingRepo):
            async def mark_timeout_if_pending(self, *, booking_id):
                # vendor accepts between the last poll and the guarded write
                stored = self.bookings[str(booking_id)]
                self.bookings[str(booking_id)] = stored.accept()
                return await super().mark_timeout_if_pending(booking_id=booking_id)

        booking_repo = LateDecisionRepo()
        use_case = build_use_case(booking_repo=booking_repo, cart_repo=self.cart_repo)

        result = await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)

        assert result.message == ACCEPTED_MESSAGE
        assert result.booking.order_status == OrderStatus.ACCEPTED
        assert booking_repo.deleted == []

    @pytest.mark.asyncio
    async def test_booking_vanishing_while_waiting(self):
        class VanishingRepo(FakeBookingRepo):
            async def get_by_id(self, *, booking_id):
                return None

        use_case = build_use_case(booking_repo=VanishingRepo(), cart_repo=self.cart_repo)

        with pytest.raises(InfrastructureError):
            await use_case.create_booking(user_id=USER_ID, **DELIVERY_REQUEST)
