"""
Coupon Repository Interface

Coupons are managed elsewhere; the booking flow only re-validates an applied
coupon and records its consumption.
"""

from abc import ABC, abstractmethod

from src.service.ordering.domain.entity.coupon_entity import CouponValidation


class ICouponRepo(ABC):
    @abstractmethod
    async def validate_coupon(
        self, *, code: str, user_id: str, order_amount: float, vendor_id: str | None
    ) -> CouponValidation:
        """
        Look the code up (case-insensitive, active only) and run the coupon rules

        Returns:
            CouponValidation with the discount on success or the first violated
            rule in ``error``; an unknown code yields 'Invalid coupon code'
        """
        pass

    @abstractmethod
    async def mark_as_used(self, *, coupon_id: str, user_id: str) -> None:
        """Increment usage and remember the user for one-time coupons"""
        pass
