"""
Tracking step templates shown on the order tracking screen

Each service group walks the same first three milestones and differs only in
the hand-over step before completion.
"""

import attrs

from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.service_type import ServiceGroup


@attrs.frozen
class TrackingStepTemplate:
    status: OrderStatus
    label: str
    description: str


@attrs.frozen
class TrackingStep:
    status: OrderStatus
    label: str
    description: str
    completed: bool
    active: bool


_PLACED = TrackingStepTemplate(
    OrderStatus.PENDING, 'Order Placed', 'Waiting for the restaurant to confirm your order'
)
_ACCEPTED = TrackingStepTemplate(
    OrderStatus.ACCEPTED, 'Order Accepted', 'The restaurant has accepted your order'
)
_PREPARING = TrackingStepTemplate(
    OrderStatus.PREPARING, 'Preparing', 'Your food is being prepared'
)
_COMPLETED = TrackingStepTemplate(OrderStatus.COMPLETED, 'Completed', 'Enjoy your meal!')

TRACKING_TEMPLATES: dict[ServiceGroup, tuple[TrackingStepTemplate, ...]] = {
    ServiceGroup.DELIVERY: (
        _PLACED,
        _ACCEPTED,
        _PREPARING,
        TrackingStepTemplate(
            OrderStatus.OUT_FOR_DELIVERY, 'Out for Delivery', 'Your order is on the way'
        ),
        _COMPLETED,
    ),
    ServiceGroup.TAKEAWAY: (
        _PLACED,
        _ACCEPTED,
        _PREPARING,
        TrackingStepTemplate(
            OrderStatus.READY_FOR_PICKUP, 'Ready for Pickup', 'Your order is ready to collect'
        ),
        _COMPLETED,
    ),
    ServiceGroup.DINEIN: (
        _PLACED,
        _ACCEPTED,
        _PREPARING,
        TrackingStepTemplate(OrderStatus.SERVED, 'Served', 'Your food has been served'),
        _COMPLETED,
    ),
}


def build_tracking_steps(group: ServiceGroup, current: OrderStatus) -> list[TrackingStep]:
    template = TRACKING_TEMPLATES[group]
    statuses = [step.status for step in template]
    # rejected / timeout sit outside the template and mark nothing
    current_index = statuses.index(current) if current in statuses else -1

    return [
        TrackingStep(
            status=step.status,
            label=step.label,
            description=step.description,
            completed=current_index >= 0 and index <= current_index,
            active=index == current_index,
        )
        for index, step in enumerate(template)
    ]
