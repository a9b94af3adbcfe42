from datetime import datetime
from typing import Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import InfrastructureError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ordering_metrics import metrics
from src.platform.types import new_uuid7
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.dto.booking_results import BookingCreationResult
from src.service.ordering.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.ordering.app.interface.i_customer_query_repo import ICustomerQueryRepo
from src.service.ordering.app.interface.i_vendor_query_repo import IVendorQueryRepo
from src.service.ordering.app.service.cart_snapshot_builder import CartSnapshotBuilder
from src.service.ordering.app.service.coupon_reconciler import CouponReconciler
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.service_type import (
    REQUIRED_FIELDS,
    ServiceType,
    normalize_service_type,
    require_service_type,
)
from src.service.ordering.domain.ordering_errors import (
    CouponInvalidError,
    EmptyCartError,
    ServiceTypeMismatchError,
    VendorMissingError,
    VendorNotFoundError,
)
from src.service.ordering.domain.value_object.service_details import ServiceDetails


ACCEPTED_MESSAGE = 'Booking accepted by vendor'
REJECTED_MESSAGE = 'Booking rejected by vendor'
TIMEOUT_MESSAGE = 'Vendor did not respond in time. Booking marked as timeout.'

_FIELD_ALIASES = {
    'address': 'address',
    'latitude': 'latitude',
    'longitude': 'longitude',
    'name': 'name',
    'phone_number': 'phoneNumber',
    'person_count': 'personCount',
    'reach_time': 'reachTime',
}


class CreateBookingUseCase:
    """
    Turn the user's cart into an order and wait for the vendor's decision

    Flow:
    1. Validate service type, cart, vendor and coupon (no side effects on failure,
       except that an invalidated coupon is stripped from the cart)
    2. Persist the booking as ``pending`` with a frozen cart snapshot
    3. Poll the stored booking until the vendor accepts/rejects it or the wait
       deadline passes, then guard-update ``pending -> timeout``
    4. Return the formatted outcome; a timed-out booking is deleted

    The wait only suspends at ``anyio.sleep`` so the worker keeps serving
    other requests, including the vendor's respond call for this booking.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        vendor_query_repo: IVendorQueryRepo,
        customer_query_repo: ICustomerQueryRepo,
        cart_snapshot_builder: CartSnapshotBuilder,
        coupon_reconciler: CouponReconciler,
        vendor_wait_seconds: float = 120.0,
        poll_interval_seconds: float = 2.0,
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.vendor_query_repo = vendor_query_repo
        self.customer_query_repo = customer_query_repo
        self.cart_snapshot_builder = cart_snapshot_builder
        self.coupon_reconciler = coupon_reconciler
        self.vendor_wait_seconds = vendor_wait_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        vendor_query_repo: IVendorQueryRepo = Depends(Provide[Container.vendor_query_repo]),
        customer_query_repo: ICustomerQueryRepo = Depends(
            Provide[Container.customer_query_repo]
        ),
        cart_snapshot_builder: CartSnapshotBuilder = Depends(
            Provide[Container.cart_snapshot_builder]
        ),
        coupon_reconciler: CouponReconciler = Depends(Provide[Container.coupon_reconciler]),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            vendor_query_repo=vendor_query_repo,
            customer_query_repo=customer_query_repo,
            cart_snapshot_builder=cart_snapshot_builder,
            coupon_reconciler=coupon_reconciler,
            vendor_wait_seconds=config.BOOKING_VENDOR_WAIT_SECONDS,
            poll_interval_seconds=config.BOOKING_POLL_INTERVAL_SECONDS,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        user_id: str,
        service_type: str,
        address: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
        person_count: Optional[int] = None,
        vehicle_details: Optional[str] = None,
        reach_time: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> BookingCreationResult:
        """
        Returns:
            BookingCreationResult for accepted, rejected and timeout alike

        Raises:
            ValidationError: Unknown service type or missing service fields
            EmptyCartError / ServiceTypeMismatchError / VendorMissingError /
            VendorNotFoundError / CouponInvalidError: Booking refused
            InfrastructureError: The booking vanished while waiting
        """
        with self.tracer.start_as_current_span(
            'use_case.create_booking', attributes={'user.id': user_id}
        ) as span:
            requested_type = require_service_type(service_type)
            service_details = self._build_service_details(
                requested_type,
                address=address,
                latitude=latitude,
                longitude=longitude,
                name=name,
                phone_number=phone_number,
                person_count=person_count,
                vehicle_details=vehicle_details,
                reach_time=reach_time,
            )

            cart = await self.cart_snapshot_builder.resolve_cart(user_id=user_id)
            if cart is None or cart.is_empty:
                raise EmptyCartError()

            cart_type = normalize_service_type(cart.service_type)
            if cart_type != requested_type:
                raise ServiceTypeMismatchError(
                    cart_type.value if cart_type else (cart.service_type or 'no service type')
                )

            if not cart.vendor_id:
                raise VendorMissingError()
            vendor = await self.vendor_query_repo.get_by_id(vendor_id=cart.vendor_id)
            if vendor is None:
                raise VendorNotFoundError()

            try:
                applied_coupon = await self.coupon_reconciler.reconcile(cart=cart, user_id=user_id)
            except CouponInvalidError:
                metrics.record_coupon_rejection()
                raise

            booking = Booking.create(
                id=new_uuid7(),
                user_id=user_id,
                vendor_id=vendor.id,
                service_type=requested_type,
                service_details=service_details,
                cart_snapshot=self.cart_snapshot_builder.build_snapshot(cart),
                is_prebook_cart=cart.is_prebook_cart,
                notes=notes.strip() if notes and notes.strip() else None,
                coupon_code=applied_coupon.code if applied_coupon else None,
                coupon_discount=applied_coupon.discount if applied_coupon else 0.0,
                coupon_id=applied_coupon.coupon_id if applied_coupon else None,
                customer=await self.customer_query_repo.get_by_id(user_id=user_id),
                vendor=vendor.to_ref(),
            )
            booking = await self.booking_command_repo.create(booking=booking)
            span.set_attribute('booking.id', str(booking.id))
            Logger.base.info(
                f'📝 [CREATE-BOOKING] Booking {booking.id} placed with vendor {vendor.id}, '
                f'waiting up to {self.vendor_wait_seconds}s for a decision'
            )

            started_at = anyio.current_time()
            decided = await self._wait_for_vendor_decision(booking_id=booking.id)
            metrics.record_booking_outcome(
                status=decided.order_status.value,
                waited_seconds=anyio.current_time() - started_at,
            )
            span.set_attribute('booking.outcome', decided.order_status.value)

            formatted = format_booking(decided)
            if decided.order_status == OrderStatus.TIMEOUT:
                await self.booking_command_repo.delete(booking_id=decided.id)
                Logger.base.info(f'⌛ [CREATE-BOOKING] Booking {decided.id} timed out and was removed')
                return BookingCreationResult(
                    booking=decided, message=TIMEOUT_MESSAGE, formatted=formatted
                )

            message = (
                REJECTED_MESSAGE if decided.order_status == OrderStatus.REJECTED else ACCEPTED_MESSAGE
            )
            return BookingCreationResult(booking=decided, message=message, formatted=formatted)

    async def _wait_for_vendor_decision(self, *, booking_id: UUID) -> Booking:
        deadline = anyio.current_time() + self.vendor_wait_seconds

        while (remaining := deadline - anyio.current_time()) > 0:
            latest = await self.booking_command_repo.get_by_id(booking_id=booking_id)
            if latest is None:
                raise InfrastructureError('Booking not found while waiting for vendor response')
            if latest.order_status != OrderStatus.PENDING:
                return latest
            await anyio.sleep(min(self.poll_interval_seconds, remaining))

        timed_out = await self.booking_command_repo.mark_timeout_if_pending(booking_id=booking_id)
        if timed_out is not None:
            return timed_out

        # the vendor's decision landed between the last poll and the guarded write
        latest = await self.booking_command_repo.get_by_id(booking_id=booking_id)
        if latest is None:
            raise InfrastructureError('Booking not found while waiting for vendor response')
        return latest

    @staticmethod
    def _build_service_details(
        service_type: ServiceType,
        *,
        address: Optional[str],
        latitude: Optional[float],
        longitude: Optional[float],
        name: Optional[str],
        phone_number: Optional[str],
        person_count: Optional[int],
        vehicle_details: Optional[str],
        reach_time: Optional[datetime],
    ) -> ServiceDetails:
        details = ServiceDetails(
            service_type=service_type.value,
            address=_clean(address),
            latitude=float(latitude) if latitude is not None else None,
            longitude=float(longitude) if longitude is not None else None,
            name=_clean(name),
            phone_number=_clean(phone_number),
            person_count=int(person_count) if person_count is not None else None,
            vehicle_details=_clean(vehicle_details),
            reach_time=reach_time,
        )

        missing = [
            field for field in REQUIRED_FIELDS[service_type] if getattr(details, field) is None
        ]
        if missing:
            raise ValidationError(
                'Validation failed',
                errors=[
                    {
                        'field': _FIELD_ALIASES[field],
                        'message': f'{_FIELD_ALIASES[field]} is required for {service_type.value}',
                    }
                    for field in missing
                ],
            )
        return details


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None
