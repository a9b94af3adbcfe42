"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ordering.app.command import (
    advance_booking_status_use_case,
    confirm_booking_payment_use_case,
    create_booking_use_case,
    respond_to_booking_use_case,
)
from src.service.ordering.app.query import (
    get_booking_use_case,
    list_bookings_use_case,
    list_vendor_orders_use_case,
    stream_booking_status_use_case,
)
from src.service.ordering.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    respond_to_booking_use_case,
    advance_booking_status_use_case,
    confirm_booking_payment_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    list_vendor_orders_use_case,
    stream_booking_status_use_case,
    role_auth,
]
