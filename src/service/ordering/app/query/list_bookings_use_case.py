import math
from typing import Any, Dict, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.interface.i_booking_query_repo import IBookingQueryRepo


class ListBookingsUseCase:
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
    async def list_user_bookings(
        self, *, user_id: str, page: int = 1, limit: int = 20
    ) -> Dict[str, Any]:
        page = max(page, 1)
        limit = max(limit, 1)

        bookings = await self.booking_query_repo.list_by_user(
            user_id=user_id, skip=(page - 1) * limit, limit=limit
        )
        total = await self.booking_query_repo.count_by_user(user_id=user_id)

        return {
            'orders': [format_booking(booking) for booking in bookings],
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': math.ceil(total / limit) if total else 0,
            },
        }
