"""
Booking Command Repository Interface

Writes against the persisted booking. Every state-changing write is
conditional on the status the caller read, because the creator's poll loop,
the vendor's respond call and the status-advance call all touch the same
document without any shared lock.
"""

from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Booking | None:
        """
        Read the current persisted state (used by the creator's poll loop)

        Returns:
            Booking entity or None if not found
        """
        pass

    @abstractmethod
    async def update_if_status(
        self,
        *,
        booking: Booking,
        expected_status: OrderStatus,
        expected_payment_status: PaymentStatus | None = None,
    ) -> Booking | None:
        """
        Persist the mutable fields of ``booking`` only if the stored status still
        equals ``expected_status`` (and the stored payment status equals
        ``expected_payment_status`` when given)

        Returns:
            The updated booking, or None when the guard lost the race
        """
        pass

    @abstractmethod
    async def mark_timeout_if_pending(self, *, booking_id: UUID) -> Booking | None:
        """
        Atomically move ``pending`` to ``timeout`` and stamp vendorResponseAt

        Returns:
            The timed-out booking, or None when the vendor decided first
        """
        pass

    @abstractmethod
    async def delete(self, *, booking_id: UUID) -> None:
        pass
