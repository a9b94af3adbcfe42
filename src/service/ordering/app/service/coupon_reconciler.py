"""
Coupon Reconciler

Re-validates the cart's coupon at booking time. Time may have passed since
the coupon was applied, so its rules (amount threshold, usage limit, one-time
use) are checked again against the current order.
"""

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.dto.booking_results import AppliedCoupon
from src.service.ordering.app.interface.i_cart_repo import ICartRepo
from src.service.ordering.app.interface.i_coupon_repo import ICouponRepo
from src.service.ordering.domain.entity.cart_entity import Cart
from src.service.ordering.domain.ordering_errors import CouponInvalidError


class CouponReconciler:
    def __init__(self, *, coupon_repo: ICouponRepo, cart_repo: ICartRepo) -> None:
        self.coupon_repo = coupon_repo
        self.cart_repo = cart_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def reconcile(self, *, cart: Cart, user_id: str) -> AppliedCoupon | None:
        """
        Returns:
            The coupon to attach to the booking, or None when the cart has no coupon

        Raises:
            CouponInvalidError: The coupon no longer applies; it has already been
                stripped from the cart and the cart persisted
        """
        if not cart.coupon_code:
            return None

        code = cart.coupon_code
        order_amount = cart.totals.grand_total or cart.totals.sub_total

        with self.tracer.start_as_current_span(
            'service.reconcile_coupon',
            attributes={'coupon.code': code, 'order.amount': order_amount},
        ):
            validation = await self.coupon_repo.validate_coupon(
                code=code,
                user_id=user_id,
                order_amount=order_amount,
                vendor_id=cart.vendor_id,
            )

            if not validation.valid:
                reason = validation.error or 'Invalid coupon code'
                cart.remove_coupon()
                await self.cart_repo.save(cart=cart)
                Logger.base.info(f'🎟️ [COUPON] Removed {code} from cart {cart.id}: {reason}')
                raise CouponInvalidError(reason)

            coupon_id = validation.coupon.id if validation.coupon else None
            if coupon_id:
                await self.coupon_repo.mark_as_used(coupon_id=coupon_id, user_id=user_id)

            if cart.totals.coupon_discount != validation.discount:
                cart.apply_coupon_discount(validation.discount)
                await self.cart_repo.save(cart=cart)

            return AppliedCoupon(code=code, coupon_id=coupon_id, discount=validation.discount)
