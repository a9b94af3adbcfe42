"""Booking entity <-> MongoDB document (camelCase fields, ``_id`` is a UUID7 string)"""

from typing import Any

from uuid_utils import UUID

from src.platform.exception.exceptions import InfrastructureError
from src.service.ordering.domain.entity.booking_entity import Booking
from src.service.ordering.domain.enum.order_status import OrderStatus
from src.service.ordering.domain.enum.payment_status import PaymentStatus
from src.service.ordering.domain.enum.service_type import normalize_service_type
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
from src.service.ordering.driven_adapter.repo.mongo_document_utils import str_id


def totals_to_doc(totals: CartTotals) -> dict[str, Any]:
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


def totals_from_doc(doc: dict[str, Any] | None) -> CartTotals:
    doc = doc or {}
    sub_total = doc.get('subTotal') or 0.0
    return CartTotals(
        sub_total=sub_total,
        add_on_total=doc.get('addOnTotal') or 0.0,
        customization_total=doc.get('customizationTotal') or 0.0,
        packing_charge_total=doc.get('packingChargeTotal') or 0.0,
        discount_total=doc.get('discountTotal') or 0.0,
        coupon_discount=doc.get('couponDiscount') or 0.0,
        tax_amount=doc.get('taxAmount') or 0.0,
        tax_percentage=doc.get('taxPercentage') or 0.0,
        grand_total=doc['grandTotal'] if doc.get('grandTotal') is not None else sub_total,
        item_count=doc.get('itemCount') or 0,
    )


def _snapshot_item_to_doc(item: CartSnapshotItem) -> dict[str, Any]:
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


def _snapshot_item_from_doc(doc: dict[str, Any]) -> CartSnapshotItem:
    return CartSnapshotItem(
        food_id=str(doc['food']),
        food_name=doc.get('foodName', ''),
        food_image=doc.get('foodImage'),
        food_type=doc.get('foodType', ''),
        quantity=doc['quantity'],
        base_price=doc.get('basePrice') or 0.0,
        discount_price=doc.get('discountPrice'),
        effective_price=doc.get('effectivePrice') or 0.0,
        customizations=tuple(
            SnapshotCustomization(
                customization_id=str_id(c.get('customizationId')),
                name=c['name'],
                price=c['price'],
                quantity=c.get('quantity', 1),
            )
            for c in doc.get('customizations', [])
        ),
        add_ons=tuple(
            SnapshotAddOn(
                add_on_id=str_id(a.get('addOnId')),
                name=a['name'],
                price=a['price'],
                quantity=a.get('quantity', 1),
            )
            for a in doc.get('addOns', [])
        ),
        is_prebook=bool(doc.get('isPrebook')),
        packing_charge=doc.get('packingCharge') or 0.0,
        item_total=doc.get('itemTotal') or 0.0,
        notes=doc.get('notes'),
    )


def _service_details_to_doc(details: ServiceDetails) -> dict[str, Any]:
    return {
        'address': details.address,
        'latitude': details.latitude,
        'longitude': details.longitude,
        'name': details.name,
        'phoneNumber': details.phone_number,
        'personCount': details.person_count,
        'vehicleDetails': details.vehicle_details,
        'reachTime': details.reach_time,
        'serviceType': details.service_type,
    }


def _service_details_from_doc(doc: dict[str, Any] | None, service_type: str) -> ServiceDetails:
    doc = doc or {}
    return ServiceDetails(
        service_type=doc.get('serviceType') or service_type,
        address=doc.get('address'),
        latitude=doc.get('latitude'),
        longitude=doc.get('longitude'),
        name=doc.get('name'),
        phone_number=doc.get('phoneNumber'),
        person_count=doc.get('personCount'),
        vehicle_details=doc.get('vehicleDetails'),
        reach_time=doc.get('reachTime'),
    )


def payment_details_to_doc(details: PaymentDetails | None) -> dict[str, Any] | None:
    if details is None:
        return None
    return {
        'transactionId': details.transaction_id,
        'providerReferenceId': details.provider_reference_id,
        'amount': details.amount,
        'paymentMethod': details.payment_method,
        'paidAt': details.paid_at,
    }


def _payment_details_from_doc(doc: dict[str, Any] | None) -> PaymentDetails | None:
    if not doc or doc.get('paidAt') is None:
        return None
    return PaymentDetails(
        amount=doc.get('amount') or 0.0,
        payment_method=doc.get('paymentMethod') or '',
        paid_at=doc['paidAt'],
        transaction_id=doc.get('transactionId'),
        provider_reference_id=doc.get('providerReferenceId'),
    )


def modified_items_to_doc(items: tuple[ModifiedItem, ...]) -> list[dict[str, Any]]:
    return [
        {
            'food': item.food_id,
            'originalQuantity': item.original_quantity,
            'updatedQuantity': item.updated_quantity,
            'reason': item.reason,
        }
        for item in items
    ]


def entity_to_doc(booking: Booking) -> dict[str, Any]:
    customer = booking.customer
    vendor = booking.vendor
    return {
        '_id': str(booking.id),
        'user': booking.user_id,
        'vendor': booking.vendor_id,
        'serviceType': booking.service_type.value,
        'isPrebook': booking.is_prebook,
        'serviceDetails': _service_details_to_doc(booking.service_details),
        'cartSnapshot': {
            'cartId': booking.cart_snapshot.cart_id,
            'items': [_snapshot_item_to_doc(item) for item in booking.cart_snapshot.items],
            'totals': totals_to_doc(booking.cart_snapshot.totals),
        },
        'amountSummary': totals_to_doc(booking.amount_summary),
        'notes': booking.notes,
        'couponCode': booking.coupon_code,
        'couponDiscount': booking.coupon_discount,
        'couponId': booking.coupon_id,
        'userInfo': (
            {
                'name': customer.name,
                'phone': customer.phone,
                'dialCode': customer.dial_code,
                'userCode': customer.user_code,
            }
            if customer
            else None
        ),
        'vendorInfo': (
            {'restaurantName': vendor.restaurant_name, 'gstPercentage': vendor.gst_percentage}
            if vendor
            else None
        ),
        **mutable_fields_to_doc(booking),
        'createdAt': booking.created_at,
    }


def mutable_fields_to_doc(booking: Booking) -> dict[str, Any]:
    """Fields a status or payment change may touch; the rest is written once"""
    return {
        'orderStatus': booking.order_status.value,
        'paymentStatus': booking.payment_status.value,
        'paymentDetails': payment_details_to_doc(booking.payment_details),
        'vendorResponseAt': booking.vendor_response_at,
        'rejectionReason': booking.rejection_reason,
        'suggestedTime': booking.suggested_time,
        'modifiedItems': modified_items_to_doc(booking.modified_items),
        'updatedAt': booking.updated_at,
    }


def doc_to_entity(doc: dict[str, Any]) -> Booking:
    service_type = normalize_service_type(doc.get('serviceType'))
    if service_type is None:
        raise InfrastructureError(f'Booking {doc["_id"]} has an unknown serviceType')
    snapshot_doc = doc.get('cartSnapshot') or {}
    user_info = doc.get('userInfo')
    vendor_info = doc.get('vendorInfo')
    user_id = str(doc['user'])
    vendor_id = str(doc['vendor'])

    return Booking(
        id=UUID(str(doc['_id'])),
        user_id=user_id,
        vendor_id=vendor_id,
        service_type=service_type,
        service_details=_service_details_from_doc(doc.get('serviceDetails'), service_type.value),
        cart_snapshot=CartSnapshot(
            cart_id=str_id(snapshot_doc.get('cartId')),
            items=tuple(_snapshot_item_from_doc(item) for item in snapshot_doc.get('items', [])),
            totals=totals_from_doc(snapshot_doc.get('totals')),
        ),
        amount_summary=totals_from_doc(doc.get('amountSummary') or snapshot_doc.get('totals')),
        order_status=OrderStatus(doc.get('orderStatus', OrderStatus.PENDING)),
        payment_status=PaymentStatus(doc.get('paymentStatus', PaymentStatus.PENDING)),
        is_prebook=doc.get('isPrebook'),
        notes=doc.get('notes'),
        coupon_code=doc.get('couponCode'),
        coupon_discount=doc.get('couponDiscount') or 0.0,
        coupon_id=str_id(doc.get('couponId')),
        payment_details=_payment_details_from_doc(doc.get('paymentDetails')),
        vendor_response_at=doc.get('vendorResponseAt'),
        rejection_reason=doc.get('rejectionReason'),
        suggested_time=doc.get('suggestedTime'),
        modified_items=tuple(
            ModifiedItem(
                food_id=str(item['food']),
                original_quantity=item['originalQuantity'],
                updated_quantity=item['updatedQuantity'],
                reason=item.get('reason'),
            )
            for item in doc.get('modifiedItems', [])
        ),
        customer=(
            CustomerRef(
                id=user_id,
                name=user_info.get('name'),
                phone=user_info.get('phone'),
                dial_code=user_info.get('dialCode'),
                user_code=user_info.get('userCode'),
            )
            if user_info
            else None
        ),
        vendor=(
            VendorRef(
                id=vendor_id,
                restaurant_name=vendor_info.get('restaurantName'),
                gst_percentage=vendor_info.get('gstPercentage'),
            )
            if vendor_info
            else None
        ),
        created_at=doc.get('createdAt'),
        updated_at=doc.get('updatedAt'),
    )
