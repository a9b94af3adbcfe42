from abc import ABC, abstractmethod

from src.service.ordering.domain.entity.cart_entity import Cart


class ICartRepo(ABC):
    @abstractmethod
    async def get_by_user(self, *, user_id: str) -> Cart | None:
        pass

    @abstractmethod
    async def get_by_id(self, *, cart_id: str) -> Cart | None:
        pass

    @abstractmethod
    async def save(self, *, cart: Cart) -> Cart:
        """Persist items, totals, coupon fields and the connected-cart link"""
        pass
