"""Ordering Domain Enums"""

from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.enum.service_type import ServiceGroup, ServiceType
from src.service.ordering.domain.enum.sse_event_type import SseEventType
from src.service.ordering.domain.enum.vendor_action import VendorAction

__all__ = [
    'OrderStatus',
    'PaymentStatus',
    'ServiceGroup',
    'ServiceType',
    'SseEventType',
    'VendorAction',
]
