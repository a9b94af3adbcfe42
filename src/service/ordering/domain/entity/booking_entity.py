from datetime import datetime, timezone
from typing import Optional, Sequence

import attrs
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ordering.domain.enum.order_status import TERMINAL_STATUSES, OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.enum.service_type import (
    ServiceGroup,
    ServiceType,
    service_group_of,
)
from src.service.ordering.domain.ordering_errors import (
    BookingStateError,
    InvalidModifiedItemError,
)
from src.service.ordering.domain.value_object.cart_snapshot import CartSnapshot, CartTotals
from src.service.ordering.domain.value_object.modified_item import (
    ItemQuantityChange,
    ModifiedItem,
)
from src.service.ordering.domain.value_object.party_ref import CustomerRef, VendorRef
from src.service.ordering.domain.value_object.payment_details import PaymentDetails
from src.service.ordering.domain.value_object.service_details import ServiceDetails


# One step at a time; pending is left only through the vendor's respond call
STATUS_FLOW: dict[ServiceGroup, tuple[OrderStatus, ...]] = {
    ServiceGroup.DELIVERY: (
        OrderStatus.ACCEPTED,
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.COMPLETED,
    ),
    ServiceGroup.TAKEAWAY: (
        OrderStatus.ACCEPTED,
        OrderStatus.PREPARING,
        OrderStatus.READY_FOR_PICKUP,
        OrderStatus.COMPLETED,
    ),
    ServiceGroup.DINEIN: (
        OrderStatus.ACCEPTED,
        OrderStatus.PREPARING,
        OrderStatus.SERVED,
        OrderStatus.COMPLETED,
    ),
}


@attrs.define
class Booking:
    id: UUID
    user_id: str
    vendor_id: str
    service_type: ServiceType
    service_details: ServiceDetails
    cart_snapshot: CartSnapshot
    amount_summary: CartTotals
    order_status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    is_prebook: Optional[bool] = None
    notes: Optional[str] = None
    coupon_code: Optional[str] = None
    coupon_discount: float = 0.0
    coupon_id: Optional[str] = None
    payment_details: Optional[PaymentDetails] = None
    vendor_response_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    suggested_time: Optional[datetime] = None
    modified_items: tuple[ModifiedItem, ...] = ()
    customer: Optional[CustomerRef] = None
    vendor: Optional[VendorRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        user_id: str,
        vendor_id: str,
        service_type: ServiceType,
        service_details: ServiceDetails,
        cart_snapshot: CartSnapshot,
        is_prebook_cart: bool = False,
        notes: Optional[str] = None,
        coupon_code: Optional[str] = None,
        coupon_discount: float = 0.0,
        coupon_id: Optional[str] = None,
        customer: Optional[CustomerRef] = None,
        vendor: Optional[VendorRef] = None,
    ) -> 'Booking':
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            user_id=user_id,
            vendor_id=vendor_id,
            service_type=service_type,
            service_details=service_details,
            cart_snapshot=cart_snapshot,
            amount_summary=cart_snapshot.totals,
            order_status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            is_prebook=is_prebook_cart or cart_snapshot.has_prebook_item,
            notes=notes,
            coupon_code=coupon_code,
            coupon_discount=coupon_discount,
            coupon_id=coupon_id,
            customer=customer,
            vendor=vendor,
            created_at=now,
            updated_at=now,
        )

    @property
    def service_group(self) -> ServiceGroup:
        return service_group_of(self.service_type)

    @property
    def effective_is_prebook(self) -> bool:
        if self.is_prebook is not None:
            return bool(self.is_prebook)
        return self.cart_snapshot.has_prebook_item

    @property
    def is_terminal(self) -> bool:
        return self.order_status in TERMINAL_STATUSES

    def is_awaiting_vendor(self, vendor_id: str) -> bool:
        return self.vendor_id == vendor_id and self.order_status == OrderStatus.PENDING

    @Logger.io
    def accept(self) -> 'Booking':
        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self, order_status=OrderStatus.ACCEPTED, vendor_response_at=now, updated_at=now
        )

    @Logger.io
    def reject(
        self,
        *,
        rejection_reason: Optional[str] = None,
        suggested_time: Optional[datetime] = None,
        item_changes: Sequence[ItemQuantityChange] = (),
    ) -> 'Booking':
        """
        Reject the order, optionally proposing a new time and/or smaller quantities

        Raises:
            InvalidModifiedItemError: When any item change does not fit the order;
                nothing is applied in that case
        """
        modified_items = self.build_modified_items(item_changes)
        reason = rejection_reason.strip() if rejection_reason else None

        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            order_status=OrderStatus.REJECTED,
            vendor_response_at=now,
            rejection_reason=reason or self.rejection_reason,
            suggested_time=suggested_time or self.suggested_time,
            modified_items=modified_items or self.modified_items,
            updated_at=now,
        )

    def build_modified_items(
        self, item_changes: Sequence[ItemQuantityChange]
    ) -> tuple[ModifiedItem, ...]:
        validated: list[ModifiedItem] = []
        for change in item_changes:
            line = self.cart_snapshot.find_item(change.food_id)
            if line is None:
                raise InvalidModifiedItemError(
                    f'Food item with ID {change.food_id} not found in this order'
                )

            updated_quantity = _as_positive_int(change.updated_quantity)
            if updated_quantity is None:
                raise InvalidModifiedItemError(
                    f'Invalid quantity for item {change.food_id}. Must be a positive integer.'
                )

            if updated_quantity > line.quantity:
                raise InvalidModifiedItemError(
                    f'Updated quantity ({updated_quantity}) cannot be greater than '
                    f'original quantity ({line.quantity})'
                )

            validated.append(
                ModifiedItem(
                    food_id=change.food_id,
                    original_quantity=line.quantity,
                    updated_quantity=updated_quantity,
                    reason=change.reason.strip() if change.reason else None,
                )
            )
        return tuple(validated)

    def next_status(self) -> OrderStatus:
        """
        Resolve the single next status of the group's flow

        Raises:
            BookingStateError: terminal, pending, unpaid or off-table statuses
        """
        if self.order_status in (OrderStatus.REJECTED, OrderStatus.TIMEOUT):
            raise BookingStateError(
                f'Order is {self.order_status} and cannot be progressed further'
            )
        if self.order_status == OrderStatus.COMPLETED:
            raise BookingStateError('Order is already completed')
        if self.order_status == OrderStatus.PENDING:
            raise BookingStateError('Order must be accepted before its status can be updated')
        if (
            self.order_status == OrderStatus.ACCEPTED
            and self.payment_status != PaymentStatus.COMPLETED
        ):
            raise BookingStateError('Payment must be completed before preparing the order')

        flow = STATUS_FLOW[self.service_group]
        if self.order_status not in flow:
            raise BookingStateError(
                f'Invalid status transition from {self.order_status} '
                f'for {self.service_type} orders'
            )
        return flow[flow.index(self.order_status) + 1]

    @Logger.io
    def advance(self) -> 'Booking':
        next_status = self.next_status()
        return attrs.evolve(
            self, order_status=next_status, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def confirm_payment(
        self,
        *,
        transaction_id: Optional[str] = None,
        provider_reference_id: Optional[str] = None,
        amount: Optional[float] = None,
        payment_method: str,
    ) -> 'Booking':
        if self.payment_status == PaymentStatus.COMPLETED:
            raise BookingStateError('Payment already completed for this order')
        if self.order_status != OrderStatus.ACCEPTED:
            raise BookingStateError('Payment can only be confirmed for accepted orders')

        now = datetime.now(timezone.utc)
        details = PaymentDetails(
            amount=amount if amount is not None else self.amount_summary.grand_total,
            payment_method=payment_method,
            paid_at=now,
            transaction_id=transaction_id,
            provider_reference_id=provider_reference_id,
        )
        return attrs.evolve(
            self,
            payment_status=PaymentStatus.COMPLETED,
            payment_details=details,
            updated_at=now,
        )


def _as_positive_int(value: object) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 1 else None
    if isinstance(value, float) and value.is_integer() and value >= 1:
        return int(value)
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return _as_positive_int(parsed)
    return None
