from typing import Any

import attrs

from src.service.ordering.domain.entity.booking_entity import Booking


@attrs.frozen
class BookingCreationResult:
    """Terminal outcome of a create call: accepted, rejected or timeout"""

    booking: Booking
    message: str
    formatted: dict[str, Any]


@attrs.frozen
class AppliedCoupon:
    code: str
    coupon_id: str | None
    discount: float


@attrs.frozen
class VendorResponseResult:
    booking: Booking
    message: str
    data: dict[str, Any]
