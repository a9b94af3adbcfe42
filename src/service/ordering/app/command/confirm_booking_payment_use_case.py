from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ordering.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.ordering_errors import BookingStateError


class ConfirmBookingPaymentUseCase:
    """
    Record the client's payment confirmation for an accepted booking

    The confirmation is trusted as sent: no gateway verification happens here.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        default_payment_method: str = 'ONLINE',
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.default_payment_method = default_payment_method
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_command_repo: IBookingCommandRepo = Depends(
            Provide[Container.booking_command_repo]
        ),
        config: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            booking_command_repo=booking_command_repo,
            default_payment_method=config.DEFAULT_PAYMENT_METHOD,
        )

    @Logger.io
    async def confirm(
        self,
        *,
        booking_id: UUID,
        user_id: str,
        transaction_id: Optional[str] = None,
        provider_reference_id: Optional[str] = None,
        amount: Optional[float] = None,
        payment_method: Optional[str] = None,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.confirm_booking_payment',
            attributes={'booking.id': str(booking_id), 'user.id': user_id},
        ):
            booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
            if booking is None or booking.user_id != user_id:
                raise NotFoundError('Booking not found')

            paid = booking.confirm_payment(
                transaction_id=transaction_id,
                provider_reference_id=provider_reference_id,
                amount=amount,
                payment_method=payment_method or self.default_payment_method,
            )

            updated = await self.booking_command_repo.update_if_status(
                booking=paid,
                expected_status=OrderStatus.ACCEPTED,
                expected_payment_status=PaymentStatus.PENDING,
            )
            if updated is None:
                current = await self.booking_command_repo.get_by_id(booking_id=booking_id)
                if current is not None and current.payment_status == PaymentStatus.COMPLETED:
                    raise BookingStateError('Payment already completed for this order')
                raise BookingStateError('Payment can only be confirmed for accepted orders')

            Logger.base.info(f'💳 [PAYMENT] Payment confirmed for booking {booking_id}')
            return updated
