"""
Booking Response Formatter

Pure projection of a Booking entity into the camelCase wire shape shared by
the HTTP responses and the SSE frames. Datetimes are rendered as ISO-8601
strings so the same dict can go through FastAPI or orjson unchanged.
"""

from datetime import datetime
from typing import Any, Optional

from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.service_type import normalize_service_type
from src.service.ordering.domain.enum.sse_event_type import SseEventType
from src.service.ordering.domain.value_object.cart_snapshot import (
    CartSnapshot,
    CartSnapshotItem,
    CartTotals,
)
from src.service.ordering.domain.value_object.payment_details import PaymentDetails
from src.service.ordering.domain.value_object.service_details import ServiceDetails
from src.service.ordering.domain.value_object.tracking_step import build_tracking_steps


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_amount_summary(totals: CartTotals) -> dict[str, Any]:
    return {
        'subTotal': totals.sub_total,
        'addOnTotal': totals.add_on_total,
        'customizationTotal': totals.customization_total,
        'packingChargeTotal': totals.packing_charge_total,
        'discountTotal': totals.discount_total,
        'couponDiscount': totals.coupon_discount,
        'taxAmount': totals.tax_amount,
        'taxPercentage': totals.tax_percentage,
        'grandTotal': totals.grand_total,
        'itemCount': totals.item_count,
    }


def _format_snapshot_item(item: CartSnapshotItem) -> dict[str, Any]:
    return {
        'food': item.food_id,
        'foodName': item.food_name,
        'foodImage': item.food_image,
        'foodType': item.food_type,
        'quantity': item.quantity,
        'basePrice': item.base_price,
        'discountPrice': item.discount_price,
        'effectivePrice': item.effective_price,
        'customizations': [
            {
                'customizationId': c.customization_id,
                'name': c.name,
                'price': c.price,
                'quantity': c.quantity,
            }
            for c in item.customizations
        ],
        'addOns': [
            {'addOnId': a.add_on_id, 'name': a.name, 'price': a.price, 'quantity': a.quantity}
            for a in item.add_ons
        ],
        'isPrebook': item.is_prebook,
        'packingCharge': item.packing_charge,
        'itemTotal': item.item_total,
        'notes': item.notes,
    }


def format_cart_snapshot(snapshot: CartSnapshot) -> dict[str, Any]:
    return {
        'cartId': snapshot.cart_id,
        'items': [_format_snapshot_item(item) for item in snapshot.items],
        'totals': format_amount_summary(snapshot.totals),
    }


def _format_service_details(details: ServiceDetails) -> dict[str, Any]:
    return {
        'address': details.address,
        'latitude': details.latitude,
        'longitude': details.longitude,
        'name': details.name,
        'phoneNumber': details.phone_number,
        'personCount': details.person_count,
        'vehicleDetails': details.vehicle_details,
        'reachTime': _iso(details.reach_time),
        'serviceType': details.service_type,
    }


def _format_payment_details(details: Optional[PaymentDetails]) -> Optional[dict[str, Any]]:
    if details is None:
        return None
    return {
        'transactionId': details.transaction_id,
        'providerReferenceId': details.provider_reference_id,
        'amount': details.amount,
        'paymentMethod': details.payment_method,
        'paidAt': _iso(details.paid_at),
    }


def format_tracking_steps(booking: Booking) -> list[dict[str, Any]]:
    return [
        {
            'status': step.status.value,
            'label': step.label,
            'description': step.description,
            'completed': step.completed,
            'active': step.active,
        }
        for step in build_tracking_steps(booking.service_group, booking.order_status)
    ]


def format_booking(booking: Booking) -> dict[str, Any]:
    totals = booking.amount_summary
    service_type = normalize_service_type(booking.service_type) or booking.service_type

    customer = booking.customer
    vendor = booking.vendor
    vendor_gst = vendor.gst_percentage if vendor and vendor.gst_percentage is not None else None

    response: dict[str, Any] = {
        'id': str(booking.id),
        'orderStatus': booking.order_status.value,
        'serviceType': str(service_type),
        'isPrebook': booking.effective_is_prebook,
        'serviceDetails': _format_service_details(booking.service_details),
        'notes': booking.notes,
        'user': {
            'id': booking.user_id,
            'name': customer.name if customer else None,
            'phone': customer.phone if customer else None,
            'dialCode': customer.dial_code if customer else None,
            'userCode': customer.user_code if customer else None,
        },
        'vendor': {
            'id': booking.vendor_id,
            'name': vendor.restaurant_name if vendor else None,
            'gstPercentage': vendor_gst if vendor_gst is not None else totals.tax_percentage,
        },
        'cartSnapshot': format_cart_snapshot(booking.cart_snapshot),
        'amountSummary': format_amount_summary(totals),
        'couponCode': booking.coupon_code,
        'couponDiscount': booking.coupon_discount,
        'paymentStatus': booking.payment_status.value,
        'paymentDetails': _format_payment_details(booking.payment_details),
        'trackingSteps': format_tracking_steps(booking),
        'vendorResponseAt': _iso(booking.vendor_response_at),
        'createdAt': _iso(booking.created_at),
        'updatedAt': _iso(booking.updated_at),
    }

    if booking.order_status == OrderStatus.REJECTED:
        response['rejectionDetails'] = {
            'rejectionReason': booking.rejection_reason,
            'suggestedTime': _iso(booking.suggested_time),
            'modifiedItems': [
                {
                    'food': item.food_id,
                    'originalQuantity': item.original_quantity,
                    'updatedQuantity': item.updated_quantity,
                    'reason': item.reason,
                }
                for item in booking.modified_items
            ],
            'hasPartialRejection': len(booking.modified_items) > 0,
            'hasTimeSuggestion': booking.suggested_time is not None,
        }

    return response


def build_status_update_event(booking: Booking) -> dict[str, Any]:
    return {
        'type': SseEventType.STATUS_UPDATE.value,
        'orderStatus': booking.order_status.value,
        'trackingSteps': format_tracking_steps(booking),
        'updatedAt': _iso(booking.updated_at),
    }
