from abc import ABC, abstractmethod
from typing import List, Sequence

from uuid_utils import UUID

from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: str, skip: int, limit: int) -> List[Booking]:
        """Newest first"""
        pass

    @abstractmethod
    async def count_by_user(self, *, user_id: str) -> int:
        pass

    @abstractmethod
    async def list_by_vendor(
        self,
        *,
        vendor_id: str,
        statuses: Sequence[OrderStatus],
        payment_status: PaymentStatus | None = None,
    ) -> List[Booking]:
        """Newest first, optionally narrowed to one payment status"""
        pass
