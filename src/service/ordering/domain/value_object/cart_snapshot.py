"""
Frozen cart contents captured when a booking is created

Every class here is a frozen attrs value holding tuples, so a snapshot shares
nothing mutable with the live cart it was copied from.
"""

from typing import Optional

import attrs


@attrs.frozen
class SnapshotCustomization:
    customization_id: Optional[str]
    name: str
    price: float
    quantity: int = 1


@attrs.frozen
class SnapshotAddOn:
    add_on_id: Optional[str]
    name: str
    price: float
    quantity: int = 1


@attrs.frozen
class CartTotals:
    sub_total: float = 0.0
    add_on_total: float = 0.0
    customization_total: float = 0.0
    packing_charge_total: float = 0.0
    discount_total: float = 0.0
    coupon_discount: float = 0.0
    tax_amount: float = 0.0
    tax_percentage: float = 0.0
    grand_total: float = 0.0
    item_count: int = 0


@attrs.frozen
class CartSnapshotItem:
    food_id: str
    food_name: str
    food_type: str
    quantity: int
    base_price: float
    effective_price: float
    item_total: float
    food_image: Optional[str] = None
    discount_price: Optional[float] = None
    customizations: tuple[SnapshotCustomization, ...] = ()
    add_ons: tuple[SnapshotAddOn, ...] = ()
    is_prebook: bool = False
    packing_charge: float = 0.0
    notes: Optional[str] = None


@attrs.frozen
class CartSnapshot:
    cart_id: Optional[str]
    items: tuple[CartSnapshotItem, ...]
    totals: CartTotals

    @property
    def has_prebook_item(self) -> bool:
        return any(item.is_prebook for item in self.items)

    def find_item(self, food_id: str) -> Optional[CartSnapshotItem]:
        for item in self.items:
            if item.food_id == food_id:
                return item
        return None
