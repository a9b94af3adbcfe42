from typing import Any, Dict, List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.ordering.domain.enum.order_status import IN_PROGRESS_STATUSES, OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus


class ListVendorOrdersUseCase:
    """Vendor queues: orders awaiting a decision, and paid orders being worked on"""

    def __init__(self, booking_query_repo: IBookingQueryRepo):
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def list_pending(self, *, vendor_id: str) -> List[Dict[str, Any]]:
        bookings = await self.booking_query_repo.list_by_vendor(
            vendor_id=vendor_id, statuses=(OrderStatus.PENDING,)
        )
        return [format_booking(booking) for booking in bookings]

    @Logger.io
    async def list_active(self, *, vendor_id: str) -> List[Dict[str, Any]]:
        bookings = await self.booking_query_repo.list_by_vendor(
            vendor_id=vendor_id,
            statuses=IN_PROGRESS_STATUSES,
            payment_status=PaymentStatus.COMPLETED,
        )
        return [format_booking(booking) for booking in bookings]
