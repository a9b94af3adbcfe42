"""Ordering Domain Value Objects"""

from src.service.ordering.domain.value_object.cart_snapshot import (
    CartSnapshot,
    CartSnapshotItem,
    CartTotals,
    SnapshotAddOn,
    SnapshotCustomization,
)
from src.service.ordering.domain.value_object.modified_item import ModifiedItem
from src.service.ordering.domain.value_object.party_ref import CustomerRef, VendorRef
from src.service.ordering.domain.value_object.payment_details import PaymentDetails
from src.service.ordering.domain.value_object.service_details import ServiceDetails
from src.service.ordering.domain.value_object.tracking_step import TrackingStep

__all__ = [
    'CartSnapshot',
    'CartSnapshotItem',
    'CartTotals',
    'CustomerRef',
    'ModifiedItem',
    'PaymentDetails',
    'ServiceDetails',
    'SnapshotAddOn',
    'SnapshotCustomization',
    'TrackingStep',
    'VendorRef',
]
