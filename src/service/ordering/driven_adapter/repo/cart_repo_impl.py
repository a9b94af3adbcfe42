from datetime import datetime, timezone
from typing import Any, Callable

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from src.platform.database.mongo_setting import CART_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_cart_repo import ICartRepo
from src.service.ordering.domain.entity.cart_entity import (
    Cart,
    CartAddOn,
    CartCustomization,
    CartItem,
)
from src.service.ordering.driven_adapter.repo.booking_document_mapper import (
    totals_from_doc,
    totals_to_doc,
)
from src.service.ordering.driven_adapter.repo.mongo_document_utils import id_filter, str_id


class CartRepoImpl(ICartRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @property
    def collection(self) -> AsyncCollection:
        return self.database_factory()[CART_COLLECTION]

    @staticmethod
    def _doc_to_entity(doc: dict[str, Any]) -> Cart:
        return Cart(
            id=str(doc['_id']),
            user_id=str(doc['user']),
            vendor_id=str_id(doc.get('vendor')),
            service_type=doc.get('serviceType'),
            items=[
                CartItem(
                    food_id=str(item['food']),
                    food_name=item.get('foodName', ''),
                    food_image=item.get('foodImage'),
                    food_type=item.get('foodType', ''),
                    quantity=item['quantity'],
                    base_price=item.get('basePrice') or 0.0,
                    discount_price=item.get('discountPrice'),
                    effective_price=item.get('effectivePrice') or 0.0,
                    uses_customization_price=bool(item.get('usesCustomizationPrice')),
                    customizations=[
                        CartCustomization(
                            customization_id=str_id(c.get('customizationId')),
                            name=c['name'],
                            price=c['price'],
                            quantity=c.get('quantity', 1),
                        )
                        for c in item.get('customizations', [])
                    ],
                    add_ons=[
                        CartAddOn(
                            add_on_id=str_id(a.get('addOnId')),
                            name=a['name'],
                            price=a['price'],
                            quantity=a.get('quantity', 1),
                        )
                        for a in item.get('addOns', [])
                    ],
                    is_prebook=bool(item.get('isPrebook')),
                    packing_charge=item.get('packingCharge') or 0.0,
                    item_total=item.get('itemTotal') or 0.0,
                    notes=item.get('notes'),
                )
                for item in doc.get('items', [])
            ],
            is_prebook_cart=bool(doc.get('isPrebookCart')),
            gst_percentage=doc.get('gstPercentage') or 0.0,
            totals=totals_from_doc(doc.get('totals')),
            coupon_code=doc.get('couponCode'),
            coupon_discount=doc.get('couponDiscount') or 0.0,
            connected_cart_id=str_id(doc.get('connectedCart')),
            updated_at=doc.get('lastUpdatedAt'),
        )

    @staticmethod
    def _entity_to_update(cart: Cart) -> dict[str, Any]:
        return {
            'items': [
                {
                    'food': item.food_id,
                    'foodName': item.food_name,
                    'foodImage': item.food_image,
                    'foodType': item.food_type,
                    'quantity': item.quantity,
                    'basePrice': item.base_price,
                    'discountPrice': item.discount_price,
                    'effectivePrice': item.effective_price,
                    'usesCustomizationPrice': item.uses_customization_price,
                    'customizations': [
                        {
                            'customizationId': c.customization_id,
                            'name': c.name,
                            'price': c.price,
                            'quantity': c.quantity,
                        }
                        for c in item.customizations
                    ],
                    'addOns': [
                        {
                            'addOnId': a.add_on_id,
                            'name': a.name,
                            'price': a.price,
                            'quantity': a.quantity,
                        }
                        for a in item.add_ons
                    ],
                    'isPrebook': item.is_prebook,
                    'packingCharge': item.packing_charge,
                    'itemTotal': item.item_total,
                    'notes': item.notes,
                }
                for item in cart.items
            ],
            'totals': totals_to_doc(cart.totals),
            'couponCode': cart.coupon_code,
            'couponDiscount': cart.coupon_discount,
            'connectedCart': cart.connected_cart_id,
            'lastUpdatedAt': cart.updated_at or datetime.now(timezone.utc),
        }

    @Logger.io
    async def get_by_user(self, *, user_id: str) -> Cart | None:
        doc = await self.collection.find_one({'user': id_filter(user_id)})
        return self._doc_to_entity(doc) if doc else None

    @Logger.io
    async def get_by_id(self, *, cart_id: str) -> Cart | None:
        doc = await self.collection.find_one({'_id': id_filter(cart_id)})
        return self._doc_to_entity(doc) if doc else None

    @Logger.io
    async def save(self, *, cart: Cart) -> Cart:
        await self.collection.update_one(
            {'_id': id_filter(cart.id)}, {'$set': self._entity_to_update(cart)}
        )
        return cart
