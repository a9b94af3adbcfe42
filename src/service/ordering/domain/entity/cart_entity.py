from datetime import datetime, timezone
from typing import List, Optional

import attrs

from src.service.ordering.domain.value_object.cart_snapshot import CartTotals
from src.service.ordering.domain.value_object.money import round_money


@attrs.define
class CartCustomization:
    customization_id: Optional[str]
    name: str
    price: float
    quantity: int = 1


@attrs.define
class CartAddOn:
    add_on_id: Optional[str]
    name: str
    price: float
    quantity: int = 1


@attrs.define
class CartItem:
    food_id: str
    food_name: str
    food_type: str
    quantity: int
    base_price: float
    effective_price: float
    food_image: Optional[str] = None
    discount_price: Optional[float] = None
    uses_customization_price: bool = False
    customizations: List[CartCustomization] = attrs.field(factory=list)
    add_ons: List[CartAddOn] = attrs.field(factory=list)
    is_prebook: bool = False
    packing_charge: float = 0.0
    item_total: float = 0.0
    notes: Optional[str] = None


@attrs.define
class Cart:
    """
    A user's live cart

    Mutable on purpose: users keep editing it after a booking is placed, which
    is why bookings only ever hold a CartSnapshot copy.
    """

    id: str
    user_id: str
    vendor_id: Optional[str] = None
    service_type: Optional[str] = None
    items: List[CartItem] = attrs.field(factory=list)
    is_prebook_cart: bool = False
    gst_percentage: float = 0.0
    totals: CartTotals = attrs.field(factory=CartTotals)
    coupon_code: Optional[str] = None
    coupon_discount: float = 0.0
    connected_cart_id: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def recalculate_totals(self) -> CartTotals:
        sub_total = 0.0
        add_on_total = 0.0
        customization_total = 0.0
        packing_charge_total = 0.0
        discount_total = 0.0
        item_count = 0

        for item in self.items:
            add_on_order_total = sum(a.price * (a.quantity or 1) for a in item.add_ons)
            customization_unit_total = sum(c.price * (c.quantity or 1) for c in item.customizations)
            # customization price replaces the base price instead of adding to it
            customization_contribution = (
                0.0 if item.uses_customization_price else customization_unit_total
            )
            packing_per_unit = item.packing_charge or 0.0
            unit_total = (item.effective_price or 0.0) + customization_contribution + packing_per_unit
            item.item_total = unit_total * item.quantity + add_on_order_total

            add_on_total += add_on_order_total
            customization_total += customization_contribution * item.quantity
            packing_charge_total += packing_per_unit * item.quantity
            sub_total += item.item_total
            discount_per_unit = (
                0.0
                if item.uses_customization_price
                else max(0.0, (item.base_price or 0.0) - (item.effective_price or 0.0))
            )
            discount_total += discount_per_unit * item.quantity
            item_count += item.quantity

        gst_percentage = float(self.gst_percentage or 0)
        tax_amount = sub_total * gst_percentage / 100 if gst_percentage > 0 else 0.0
        coupon_discount = float(self.coupon_discount or 0)
        grand_total = max(0.0, sub_total + tax_amount - coupon_discount)

        self.totals = CartTotals(
            sub_total=round_money(sub_total),
            add_on_total=round_money(add_on_total),
            customization_total=round_money(customization_total),
            packing_charge_total=round_money(packing_charge_total),
            discount_total=round_money(discount_total),
            coupon_discount=round_money(coupon_discount),
            tax_amount=round_money(tax_amount),
            tax_percentage=gst_percentage,
            grand_total=round_money(grand_total),
            item_count=item_count,
        )
        self.updated_at = datetime.now(timezone.utc)
        return self.totals

    def remove_coupon(self) -> None:
        self.coupon_code = None
        self.coupon_discount = 0.0
        self.recalculate_totals()

    def apply_coupon_discount(self, discount: float) -> None:
        """Store a freshly computed discount without re-deriving the line totals"""
        totals = self.totals
        self.coupon_discount = discount
        self.totals = attrs.evolve(
            totals,
            coupon_discount=discount,
            grand_total=round_money(max(0.0, totals.sub_total + totals.tax_amount - discount)),
        )
        self.updated_at = datetime.now(timezone.utc)

    def disconnect(self) -> None:
        self.connected_cart_id = None
        self.updated_at = datetime.now(timezone.utc)
