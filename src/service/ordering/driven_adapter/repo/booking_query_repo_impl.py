from typing import Any, Callable, List, Sequence

from pymongo import DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from uuid_utils import UUID

from src.platform.database.mongo_setting import BOOKING_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.driven_adapter.repo.booking_document_mapper import doc_to_entity


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @property
    def collection(self) -> AsyncCollection:
        return self.database_factory()[BOOKING_COLLECTION]

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        doc = await self.collection.find_one({'_id': str(booking_id)})
        return doc_to_entity(doc) if doc else None

    @Logger.io
    async def list_by_user(self, *, user_id: str, skip: int, limit: int) -> List[Booking]:
        cursor = (
            self.collection.find({'user': user_id})
            .sort('createdAt', DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [doc_to_entity(doc) for doc in await cursor.to_list(length=None)]

    @Logger.io
    async def count_by_user(self, *, user_id: str) -> int:
        return await self.collection.count_documents({'user': user_id})

    @Logger.io
    async def list_by_vendor(
        self,
        *,
        vendor_id: str,
        statuses: Sequence[OrderStatus],
        payment_status: PaymentStatus | None = None,
    ) -> List[Booking]:
        query: dict[str, Any] = {
            'vendor': vendor_id,
            'orderStatus': {'$in': [status.value for status in statuses]},
        }
        if payment_status is not None:
            query['paymentStatus'] = payment_status.value

        cursor = self.collection.find(query).sort('createdAt', DESCENDING)
        return [doc_to_entity(doc) for doc in await cursor.to_list(length=None)]
