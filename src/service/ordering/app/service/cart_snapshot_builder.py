"""
Cart Snapshot Builder

Picks the cart a booking is placed from and freezes it into a CartSnapshot.
"""

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_cart_repo import ICartRepo
from src.service.ordering.domain.entity.cart_entity import Cart, CartItem
from src.service.ordering.domain.value_object.cart_snapshot import (
    CartSnapshot,
    CartSnapshotItem,
    SnapshotAddOn,
    SnapshotCustomization,
)


class CartSnapshotBuilder:
    def __init__(self, *, cart_repo: ICartRepo) -> None:
        self.cart_repo = cart_repo
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def resolve_cart(self, *, user_id: str) -> Cart | None:
        """
        Resolve the cart that should be booked for this user

        A linked (connected) cart wins over the user's own cart. A link that
        points at a deleted cart is cleared and nothing is booked.
        """
        with self.tracer.start_as_current_span(
            'service.resolve_cart', attributes={'user.id': user_id}
        ):
            user_cart = await self.cart_repo.get_by_user(user_id=user_id)
            if user_cart is None:
                return None

            if user_cart.connected_cart_id:
                connected_cart = await self.cart_repo.get_by_id(
                    cart_id=user_cart.connected_cart_id
                )
                if connected_cart is None:
                    Logger.base.warning(
                        f'🛒 [CART] Connected cart {user_cart.connected_cart_id} of user '
                        f'{user_id} no longer exists, disconnecting'
                    )
                    user_cart.disconnect()
                    await self.cart_repo.save(cart=user_cart)
                    return None
                return connected_cart

            if user_cart.is_empty:
                return None
            return user_cart

    @staticmethod
    def build_snapshot(cart: Cart) -> CartSnapshot:
        return CartSnapshot(
            cart_id=cart.id,
            items=tuple(_snapshot_item(item) for item in cart.items),
            totals=cart.totals,
        )


def _snapshot_item(item: CartItem) -> CartSnapshotItem:
    return CartSnapshotItem(
        food_id=item.food_id,
        food_name=item.food_name,
        food_image=item.food_image,
        food_type=item.food_type,
        quantity=item.quantity,
        base_price=item.base_price,
        discount_price=item.discount_price,
        effective_price=item.effective_price,
        customizations=tuple(
            SnapshotCustomization(
                customization_id=c.customization_id,
                name=c.name,
                price=c.price,
                quantity=c.quantity,
            )
            for c in item.customizations
        ),
        add_ons=tuple(
            SnapshotAddOn(add_on_id=a.add_on_id, name=a.name, price=a.price, quantity=a.quantity)
            for a in item.add_ons
        ),
        is_prebook=bool(item.is_prebook),
        packing_charge=item.packing_charge or 0.0,
        item_total=item.item_total,
        notes=item.notes,
    )
