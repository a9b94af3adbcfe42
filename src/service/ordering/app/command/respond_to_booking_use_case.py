from datetime import datetime
from typing import Optional, Self, Sequence

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ordering_metrics import metrics
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.dto.booking_results import VendorResponseResult
from src.service.ordering.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.vendor_action import VendorAction
from src.service.ordering.domain.ordering_errors import OrderNotFoundError
from src.service.ordering.domain.value_object.modified_item import ItemQuantityChange


class RespondToBookingUseCase:
    """
    Vendor accepts or rejects a pending booking

    The write is guarded on ``pending`` so it can never overwrite a timeout
    that the creator's wait loop committed first; losing that race looks the
    same to the vendor as an order that was already processed.
    """

    def __init__(
        self,
        *,
        booking_command_repo: IBookingCommandRepo,
        payment_currency: str = 'INR',
    ) -> None:
        self.booking_command_repo = booking_command_repo
        self.payment_currency = payment_currency
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
            payment_currency=config.PAYMENT_CURRENCY,
        )

    @Logger.io
    async def respond(
        self,
        *,
        booking_id: UUID,
        vendor_id: str,
        action: str,
        rejection_reason: Optional[str] = None,
        suggested_time: Optional[datetime] = None,
        item_changes: Sequence[ItemQuantityChange] = (),
    ) -> VendorResponseResult:
        """
        Raises:
            ValidationError: Unknown action
            OrderNotFoundError: Missing, owned by another vendor, or no longer pending
            InvalidModifiedItemError: A modified item does not fit the order (nothing written)
        """
        with self.tracer.start_as_current_span(
            'use_case.respond_to_booking',
            attributes={'booking.id': str(booking_id), 'vendor.id': vendor_id, 'action': action},
        ):
            try:
                vendor_action = VendorAction(action)
            except ValueError:
                raise ValidationError(
                    'Invalid action. Use "accept" or "reject"',
                    errors=[{'field': 'action', 'message': 'Must be one of: accept, reject'}],
                )

            booking = await self.booking_command_repo.get_by_id(booking_id=booking_id)
            if booking is None or not booking.is_awaiting_vendor(vendor_id):
                raise OrderNotFoundError()

            if vendor_action == VendorAction.ACCEPT:
                decided = booking.accept()
            else:
                decided = booking.reject(
                    rejection_reason=rejection_reason,
                    suggested_time=suggested_time,
                    item_changes=item_changes,
                )

            updated = await self.booking_command_repo.update_if_status(
                booking=decided, expected_status=OrderStatus.PENDING
            )
            if updated is None:
                raise OrderNotFoundError()

            metrics.record_status_transition(to_status=updated.order_status.value)
            Logger.base.info(
                f'🧑‍🍳 [VENDOR-RESPOND] Vendor {vendor_id} {updated.order_status} booking {booking_id}'
            )

            formatted = format_booking(updated)
            if vendor_action == VendorAction.REJECT:
                return VendorResponseResult(
                    booking=updated, message='Order rejected successfully', data=formatted
                )

            total_amount = updated.amount_summary.grand_total
            return VendorResponseResult(
                booking=updated,
                message='Order accepted successfully',
                data={
                    'booking': formatted,
                    'totalAmount': total_amount,
                    'paymentInfo': {
                        'amount': total_amount,
                        'currency': self.payment_currency,
                        'message': 'Please proceed with payment in the frontend',
                    },
                },
            )
