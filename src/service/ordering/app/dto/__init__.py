"""Application layer DTOs"""

from src.service.ordering.app.dto.booking_results import (
    AppliedCoupon,
    BookingCreationResult,
    VendorResponseResult,
)

__all__ = [
    'AppliedCoupon',
    'BookingCreationResult',
    'VendorResponseResult',
]
