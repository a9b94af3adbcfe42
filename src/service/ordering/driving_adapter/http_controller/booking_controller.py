from collections.abc import AsyncIterator

import anyio
from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace
import orjson
from sse_starlette.sse import EventSourceResponse

from src.platform.config.core_setting import settings
from src.platform.constant.route_constant import (
    BOOKING_CREATE,
    BOOKING_GET,
    BOOKING_MY_ORDERS,
    BOOKING_PAYMENT_CONFIRM,
    BOOKING_STREAM,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.ordering.app.command.confirm_booking_payment_use_case import (
    ConfirmBookingPaymentUseCase,
)
from src.service.ordering.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.query.get_booking_use_case import GetBookingUseCase
from src.service.ordering.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.ordering.app.query.stream_booking_status_use_case import (
    StreamBookingStatusUseCase,
)
from src.service.ordering.domain.entity.principal_entity import Principal
from src.service.ordering.driving_adapter.http_controller.auth.role_auth import require_user
from src.service.ordering.driving_adapter.http_controller.schema.booking_schema import (
    ApiResponse,
    BookingCreateRequest,
    PaymentConfirmRequest,
)


router = APIRouter(tags=['booking'])
tracer = trace.get_tracer(__name__)


@router.post(BOOKING_CREATE, status_code=status.HTTP_200_OK)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: Principal = Depends(require_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> ApiResponse:
    """
    Place an order from the caller's cart and hold the request open until the
    vendor accepts, rejects, or the wait window closes.

    Accepted, rejected and timeout all answer 200; the message tells them apart.
    """
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('user.id', current_user.id)
        span.set_attribute('service_type', request.service_type)

        result = await use_case.create_booking(
            user_id=current_user.id,
            service_type=request.service_type,
            address=request.address,
            latitude=request.latitude,
            longitude=request.longitude,
            name=request.name,
            phone_number=request.phone_number,
            person_count=request.person_count,
            vehicle_details=request.vehicle_details,
            reach_time=request.reach_time,
            notes=request.notes,
        )

        span.set_attribute('booking.id', str(result.booking.id))
        return ApiResponse(message=result.message, data=result.formatted)


@router.get(BOOKING_MY_ORDERS)
@Logger.io
async def list_my_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: Principal = Depends(require_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> ApiResponse:
    data = await use_case.list_user_bookings(user_id=current_user.id, page=page, limit=limit)
    return ApiResponse(message='Orders retrieved successfully', data=data)


@router.get(BOOKING_GET)
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    current_user: Principal = Depends(require_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> ApiResponse:
    booking = await use_case.get_for_user(booking_id=booking_id, user_id=current_user.id)
    return ApiResponse(message='Booking retrieved successfully', data=format_booking(booking))


@router.post(BOOKING_PAYMENT_CONFIRM)
@Logger.io
async def confirm_payment(
    booking_id: UtilsUUID7,
    request: PaymentConfirmRequest,
    current_user: Principal = Depends(require_user),
    use_case: ConfirmBookingPaymentUseCase = Depends(ConfirmBookingPaymentUseCase.depends),
) -> ApiResponse:
    booking = await use_case.confirm(
        booking_id=booking_id,
        user_id=current_user.id,
        transaction_id=request.transaction_id,
        provider_reference_id=request.provider_reference_id,
        amount=request.amount,
        payment_method=request.payment_method,
    )
    return ApiResponse(message='Payment confirmed successfully', data=format_booking(booking))


# ============================ SSE Endpoint ============================


@router.get(BOOKING_STREAM, status_code=status.HTTP_200_OK)
@Logger.io
async def stream_booking_status(
    booking_id: UtilsUUID7,
    current_user: Principal = Depends(require_user),
    use_case: StreamBookingStatusUseCase = Depends(StreamBookingStatusUseCase.depends),
) -> EventSourceResponse:
    """
    SSE live status for one booking

    Flow:
    1. Ownership is checked up front so a foreign or unknown id gets a plain 404
    2. First frame is INITIAL with the full booking
    3. Every accepted status advance pushes a STATUS_UPDATE frame
    4. Keep-alive comment frames every SSE_PING_SECONDS
    """
    await use_case.get_owned_booking(booking_id=booking_id, user_id=current_user.id)
    Logger.base.info(f'📡 [SSE] User {current_user.id} subscribing to booking {booking_id}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        try:
            async for frame in use_case.stream(booking_id=booking_id, user_id=current_user.id):
                yield {'data': orjson.dumps(frame).decode()}
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Stream closed for booking {booking_id}')
            raise

    return EventSourceResponse(event_generator(), ping=settings.SSE_PING_SECONDS)
