from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.constant.route_constant import (
    VENDOR_ORDER_ACTIVE,
    VENDOR_ORDER_LIST,
    VENDOR_ORDER_RESPOND,
    VENDOR_ORDER_STATUS,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.ordering.app.command.advance_booking_status_use_case import (
    AdvanceBookingStatusUseCase,
)
from src.service.ordering.app.command.respond_to_booking_use_case import (
    RespondToBookingUseCase,
)
from src.service.ordering.app.dto.booking_response_formatter import format_booking
from src.service.ordering.app.query.list_vendor_orders_use_case import ListVendorOrdersUseCase
from src.service.ordering.domain.entity.principal_entity import Principal
from src.service.ordering.domain.value_object.modified_item import ItemQuantityChange
from src.service.ordering.driving_adapter.http_controller.auth.role_auth import require_vendor
from src.service.ordering.driving_adapter.http_controller.schema.booking_schema import (
    ApiResponse,
    VendorRespondRequest,
)


router = APIRouter(tags=['vendor-orders'])
tracer = trace.get_tracer(__name__)


@router.get(VENDOR_ORDER_LIST)
@Logger.io
async def list_pending_orders(
    current_vendor: Principal = Depends(require_vendor),
    use_case: ListVendorOrdersUseCase = Depends(ListVendorOrdersUseCase.depends),
) -> ApiResponse:
    orders = await use_case.list_pending(vendor_id=current_vendor.id)
    return ApiResponse(message='Vendor orders retrieved successfully', data=orders)


@router.get(VENDOR_ORDER_ACTIVE)
@Logger.io
async def list_active_orders(
    current_vendor: Principal = Depends(require_vendor),
    use_case: ListVendorOrdersUseCase = Depends(ListVendorOrdersUseCase.depends),
) -> ApiResponse:
    orders = await use_case.list_active(vendor_id=current_vendor.id)
    return ApiResponse(message='Active orders retrieved successfully', data=orders)


@router.put(VENDOR_ORDER_RESPOND)
@Logger.io
async def respond_to_order(
    booking_id: UtilsUUID7,
    request: VendorRespondRequest,
    current_vendor: Principal = Depends(require_vendor),
    use_case: RespondToBookingUseCase = Depends(RespondToBookingUseCase.depends),
) -> ApiResponse:
    with tracer.start_as_current_span('controller.respond_to_order') as span:
        span.set_attribute('booking.id', str(booking_id))
        span.set_attribute('action', request.action)

        result = await use_case.respond(
            booking_id=booking_id,
            vendor_id=current_vendor.id,
            action=request.action,
            rejection_reason=request.rejection_reason,
            suggested_time=request.suggested_time,
            item_changes=[
                ItemQuantityChange(
                    food_id=item.food_id,
                    updated_quantity=item.updated_quantity,
                    reason=item.reason,
                )
                for item in request.modified_items
            ],
        )
        return ApiResponse(message=result.message, data=result.data)


@router.patch(VENDOR_ORDER_STATUS)
@Logger.io
async def advance_order_status(
    booking_id: UtilsUUID7,
    current_vendor: Principal = Depends(require_vendor),
    use_case: AdvanceBookingStatusUseCase = Depends(AdvanceBookingStatusUseCase.depends),
) -> ApiResponse:
    booking = await use_case.advance(booking_id=booking_id, vendor_id=current_vendor.id)
    return ApiResponse(
        message=f'Order status updated to {booking.order_status.value}',
        data=format_booking(booking),
    )
