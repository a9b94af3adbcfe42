"""Booking lifecycle errors, each mapped onto the platform error taxonomy"""

from typing import Any

from src.platform.exception.exceptions import (
    DomainError,
    NotFoundError,
    StateError,
)


class EmptyCartError(DomainError):
    def __init__(self) -> None:
        super().__init__('Cart is empty. Please add items before booking.', 400)


class ServiceTypeMismatchError(DomainError):
    def __init__(self, cart_service_type: str) -> None:
        super().__init__(
            f'Cart is locked to {cart_service_type}. '
            'Please keep booking service type consistent.',
            400,
        )


class VendorMissingError(DomainError):
    def __init__(self) -> None:
        super().__init__('Vendor information is missing for this cart.', 400)


class VendorNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__('Vendor associated with this cart no longer exists.')


class CouponInvalidError(DomainError):
    def __init__(self, reason: str) -> None:
        super().__init__(
            f'Coupon validation failed: {reason}. Coupon has been removed from cart.',
            400,
            data={'couponError': reason},
        )
        self.reason = reason


class OrderNotFoundError(NotFoundError):
    def __init__(self, message: str = 'Order not found or already processed') -> None:
        super().__init__(message)


class InvalidModifiedItemError(DomainError):
    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message, 400, data)


class BookingStateError(StateError):
    pass
