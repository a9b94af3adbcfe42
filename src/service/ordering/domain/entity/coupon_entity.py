from datetime import datetime, timezone
from enum import StrEnum
from typing import List, Optional

import attrs

from src.service.ordering.domain.value_object.money import round_money


class DiscountType(StrEnum):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'


@attrs.frozen
class CouponValidation:
    valid: bool
    discount: float = 0.0
    coupon: Optional['Coupon'] = None
    error: Optional[str] = None


@attrs.define
class Coupon:
    id: str
    code: str
    discount_type: DiscountType
    discount_value: float
    vendor_id: Optional[str] = None
    max_discount_amount: Optional[float] = None
    min_order_amount: Optional[float] = None
    is_one_time_use: bool = False
    usage_limit: Optional[int] = None
    used_count: int = 0
    used_by_users: List[str] = attrs.field(factory=list)
    expires_at: Optional[datetime] = None
    is_active: bool = True

    def check_validity(
        self, *, user_id: Optional[str], order_amount: float, vendor_id: Optional[str]
    ) -> Optional[str]:
        """
        Run the coupon rules in order

        Returns:
            The first violated rule as a user-facing message, or None when valid
        """
        if not self.is_active:
            return 'Coupon is not active'

        if self.expires_at and datetime.now(timezone.utc) > self.expires_at:
            return 'Coupon has expired'

        if self.vendor_id and str(vendor_id) != str(self.vendor_id):
            return 'This coupon is not valid for this vendor'

        if self.min_order_amount and order_amount < self.min_order_amount:
            return (
                f'Minimum order amount of {self.min_order_amount:g} '
                'is required to use this coupon'
            )

        if self.usage_limit and self.used_count >= self.usage_limit:
            return 'Coupon usage limit has been reached'

        if self.is_one_time_use and user_id and user_id in self.used_by_users:
            return 'You have already used this coupon'

        return None

    def calculate_discount(self, order_amount: float) -> float:
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = order_amount * self.discount_value / 100
            if self.max_discount_amount and discount > self.max_discount_amount:
                discount = self.max_discount_amount
            return round_money(discount)
        return round_money(min(self.discount_value, order_amount))

    def validate_for_order(
        self, *, user_id: Optional[str], order_amount: float, vendor_id: Optional[str]
    ) -> CouponValidation:
        error = self.check_validity(user_id=user_id, order_amount=order_amount, vendor_id=vendor_id)
        if error:
            return CouponValidation(valid=False, error=error)
        return CouponValidation(
            valid=True, coupon=self, discount=self.calculate_discount(order_amount)
        )

    def mark_as_used(self, user_id: Optional[str]) -> None:
        self.used_count += 1
        if self.is_one_time_use and user_id and user_id not in self.used_by_users:
            self.used_by_users.append(user_id)
