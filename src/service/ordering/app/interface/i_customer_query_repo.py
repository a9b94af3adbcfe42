from abc import ABC, abstractmethod

from src.service.ordering.domain.value_object.party_ref import CustomerRef


class ICustomerQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, user_id: str) -> CustomerRef | None:
        """Customer contact fields shown to the vendor, None if the user is gone"""
        pass
