from typing import Callable

from pymongo.asynchronous.database import AsyncDatabase

from src.platform.database.mongo_setting import VENDOR_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_vendor_query_repo import IVendorQueryRepo
from src.service.ordering.domain.entity.vendor_entity import Vendor
from src.service.ordering.driven_adapter.repo.mongo_document_utils import id_filter


class VendorQueryRepoImpl(IVendorQueryRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @Logger.io
    async def get_by_id(self, *, vendor_id: str) -> Vendor | None:
        doc = await self.database_factory()[VENDOR_COLLECTION].find_one(
            {'_id': id_filter(vendor_id)},
            projection=['restaurantName', 'gstPercentage', 'contactNumber', 'isActive'],
        )
        if not doc:
            return None
        return Vendor(
            id=str(doc['_id']),
            restaurant_name=doc.get('restaurantName', ''),
            gst_percentage=doc.get('gstPercentage'),
            contact_number=doc.get('contactNumber'),
            is_active=doc.get('isActive', True),
        )
