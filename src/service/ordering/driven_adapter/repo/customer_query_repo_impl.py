from typing import Callable

from pymongo.asynchronous.database import AsyncDatabase

from src.platform.database.mongo_setting import USER_COLLECTION, get_database
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_customer_query_repo import ICustomerQueryRepo
from src.service.ordering.domain.value_object.party_ref import CustomerRef
from src.service.ordering.driven_adapter.repo.mongo_document_utils import id_filter


class CustomerQueryRepoImpl(ICustomerQueryRepo):
    def __init__(self, database_factory: Callable[[], AsyncDatabase] = get_database):
        self.database_factory = database_factory

    @Logger.io
    async def get_by_id(self, *, user_id: str) -> CustomerRef | None:
        doc = await self.database_factory()[USER_COLLECTION].find_one(
            {'_id': id_filter(user_id)}, projection=['name', 'phone', 'dialCode', 'userCode']
        )
        if not doc:
            return None
        return CustomerRef(
            id=str(doc['_id']),
            name=doc.get('name'),
            phone=doc.get('phone'),
            dial_code=doc.get('dialCode'),
            user_code=doc.get('userCode'),
        )
