from typing import Any, Callable

from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from src.platform.database.mongo_setting import COUPON_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_coupon_repo import ICouponRepo
from src.service.ordering.domain.entity.coupon_entity import Coupon, CouponValidation, DiscountType
from src.service.ordering.driven_adapter.repo.mongo_document_utils import id_filter, str_id


class CouponRepoImpl(ICouponRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @property
    def collection(self) -> AsyncCollection:
        return self.database_factory()[COUPON_COLLECTION]

    @staticmethod
    def _doc_to_entity(doc: dict[str, Any]) -> Coupon:
        return Coupon(
            id=str(doc['_id']),
            code=doc['code'],
            discount_type=DiscountType(doc.get('discountType', DiscountType.FIXED)),
            discount_value=doc.get('discountValue') or 0.0,
            vendor_id=str_id(doc.get('vendor')),
            max_discount_amount=doc.get('maxDiscountAmount'),
            min_order_amount=doc.get('minOrderAmount'),
            is_one_time_use=bool(doc.get('isOneTimeUse')),
            usage_limit=doc.get('usageLimit'),
            used_count=doc.get('usedCount') or 0,
            used_by_users=[str(user) for user in doc.get('usedByUsers', [])],
            expires_at=doc.get('expiresAt'),
            is_active=doc.get('isActive', True),
        )

    @Logger.io
    async def validate_coupon(
        self, *, code: str, user_id: str, order_amount: float, vendor_id: str | None
    ) -> CouponValidation:
        doc = await self.collection.find_one({'code': code.upper(), 'isActive': True})
        if not doc:
            return CouponValidation(valid=False, error='Invalid coupon code')

        coupon = self._doc_to_entity(doc)
        return coupon.validate_for_order(
            user_id=user_id, order_amount=order_amount, vendor_id=vendor_id
        )

    @Logger.io
    async def mark_as_used(self, *, coupon_id: str, user_id: str) -> None:
        await self.collection.update_one({'_id': id_filter(coupon_id)}, {'$inc': {'usedCount': 1}})
        await self.collection.update_one(
            {'_id': id_filter(coupon_id), 'isOneTimeUse': True},
            {'$addToSet': {'usedByUsers': user_id}},
        )
