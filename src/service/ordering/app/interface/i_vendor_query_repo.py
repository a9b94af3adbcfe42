from abc import ABC, abstractmethod

from src.service.ordering.domain.entity.vendor_entity import Vendor


class IVendorQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, vendor_id: str) -> Vendor | None:
        pass
