from enum import StrEnum


class OrderStatus(StrEnum):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    TIMEOUT = 'timeout'
    PREPARING = 'preparing'
    OUT_FOR_DELIVERY = 'out_for_delivery'
    READY_FOR_PICKUP = 'ready_for_pickup'
    SERVED = 'served'
    COMPLETED = 'completed'


TERMINAL_STATUSES = frozenset({OrderStatus.REJECTED, OrderStatus.TIMEOUT, OrderStatus.COMPLETED})

# Vendor "active orders" queue
IN_PROGRESS_STATUSES = (
    OrderStatus.ACCEPTED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.SERVED,
)
