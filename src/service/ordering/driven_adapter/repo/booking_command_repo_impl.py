from datetime import datetime, timezone
from typing import Callable

from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from uuid_utils import UUID

from src.platform.database.mongo_setting import BOOKING_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.driven_adapter.repo.booking_document_mapper import (
    doc_to_entity,
    entity_to_doc,
    mutable_fields_to_doc,
)


class BookingCommandRepoImpl(IBookingCommandRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @property
    def collection(self) -> AsyncCollection:
        return self.database_factory()[BOOKING_COLLECTION]

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        await self.collection.insert_one(entity_to_doc(booking))
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        doc = await self.collection.find_one({'_id': str(booking_id)})
        return doc_to_entity(doc) if doc else None

    @Logger.io
    async def update_if_status(
        self,
        *,
        booking: Booking,
        expected_status: OrderStatus,
        expected_payment_status: PaymentStatus | None = None,
    ) -> Booking | None:
        guard = {'_id': str(booking.id), 'orderStatus': expected_status.value}
        if expected_payment_status is not None:
            guard['paymentStatus'] = expected_payment_status.value
        doc = await self.collection.find_one_and_update(
            guard,
            {'$set': mutable_fields_to_doc(booking)},
            return_document=ReturnDocument.AFTER,
        )
        return doc_to_entity(doc) if doc else None

    @Logger.io
    async def mark_timeout_if_pending(self, *, booking_id: UUID) -> Booking | None:
        now = datetime.now(timezone.utc)
        doc = await self.collection.find_one_and_update(
            {'_id': str(booking_id), 'orderStatus': OrderStatus.PENDING.value},
            {
                '$set': {
                    'orderStatus': OrderStatus.TIMEOUT.value,
                    'vendorResponseAt': now,
                    'updatedAt': now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        return doc_to_entity(doc) if doc else None

    @Logger.io
    async def delete(self, *, booking_id: UUID) -> None:
        await self.collection.delete_one({'_id': str(booking_id)})
