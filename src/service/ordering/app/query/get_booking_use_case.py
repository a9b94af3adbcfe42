from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.ordering.domain.entity.booking_entity import Booking


class GetBookingUseCase:
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
    async def get_for_user(self, *, booking_id: UUID, user_id: str) -> Booking:
        booking = await self.booking_query_repo.get_by_id(booking_id=booking_id)

        # someone else's booking is indistinguishable from a missing one
        if booking is None or booking.user_id != user_id:
            raise NotFoundError('Booking not found')

        return booking
