"""
Service type vocabulary

Clients send loosely formatted service types ("dine-in", "TAKE AWAY",
"Car Dine-in"). Everything crossing into the domain is normalized to one of the
canonical ``ServiceType`` values, and each canonical value maps to exactly one
``ServiceGroup`` that selects the tracking template and transition table.
"""

from enum import StrEnum
import re
from typing import Any

from src.platform.exception.exceptions import ValidationError


class ServiceType(StrEnum):
    DELIVERY = 'Delivery'
    DINE_IN = 'Dine in'
    TAKEAWAY = 'Takeaway'
    PICKUP = 'Pickup'
    CAR_DINE_IN = 'Car Dine in'


class ServiceGroup(StrEnum):
    DELIVERY = 'delivery'
    TAKEAWAY = 'takeaway'
    DINEIN = 'dinein'


# keyed by lowercase, single-spaced, hyphen-free form
SERVICE_TYPE_ALIASES: dict[str, ServiceType] = {
    'delivery': ServiceType.DELIVERY,
    'dine in': ServiceType.DINE_IN,
    'takeaway': ServiceType.TAKEAWAY,
    'take away': ServiceType.TAKEAWAY,
    'pickup': ServiceType.PICKUP,
    'pick up': ServiceType.PICKUP,
    'car dine in': ServiceType.CAR_DINE_IN,
}

SERVICE_GROUPS: dict[ServiceType, ServiceGroup] = {
    ServiceType.DELIVERY: ServiceGroup.DELIVERY,
    ServiceType.TAKEAWAY: ServiceGroup.TAKEAWAY,
    ServiceType.PICKUP: ServiceGroup.TAKEAWAY,
    ServiceType.DINE_IN: ServiceGroup.DINEIN,
    ServiceType.CAR_DINE_IN: ServiceGroup.DINEIN,
}

REQUIRED_FIELDS: dict[ServiceType, tuple[str, ...]] = {
    ServiceType.DELIVERY: ('address', 'latitude', 'longitude', 'name', 'phone_number'),
    ServiceType.DINE_IN: ('person_count', 'reach_time'),
    ServiceType.TAKEAWAY: ('reach_time',),
    ServiceType.PICKUP: ('reach_time',),
    ServiceType.CAR_DINE_IN: ('reach_time',),
}

_SEPARATORS = re.compile(r'[\s\-_]+')


def normalize_service_type(value: Any) -> ServiceType | None:
    if isinstance(value, ServiceType):
        return value
    if not isinstance(value, str):
        return None

    key = _SEPARATORS.sub(' ', value.strip()).lower()
    if not key:
        return None
    return SERVICE_TYPE_ALIASES.get(key)


def require_service_type(value: Any) -> ServiceType:
    service_type = normalize_service_type(value)
    if service_type is None:
        allowed = ', '.join(member.value for member in ServiceType)
        raise ValidationError(
            f'Invalid serviceType. Allowed values: {allowed}',
            errors=[{'field': 'serviceType', 'message': f'Must be one of: {allowed}'}],
        )
    return service_type


def service_group_of(service_type: ServiceType) -> ServiceGroup:
    return SERVICE_GROUPS[service_type]
