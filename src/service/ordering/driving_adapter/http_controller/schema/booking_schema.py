from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCreateRequest(CamelModel):
    service_type: str
    address: Optional[str] = Field(None, min_length=5, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    name: Optional[str] = Field(None, min_length=2, max_length=120)
    phone_number: Optional[str] = Field(None, pattern=r'^\+?[0-9]{6,15}$')
    person_count: Optional[int] = Field(None, ge=1, le=50)
    reach_time: Optional[datetime] = None
    vehicle_details: Optional[str] = Field(None, max_length=150)
    notes: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {
                    'serviceType': 'Delivery',
                    'address': '12 MG Road, Bengaluru',
                    'latitude': 12.9716,
                    'longitude': 77.5946,
                    'name': 'Asha',
                    'phoneNumber': '+919876543210',
                },
                {'serviceType': 'Dine in', 'personCount': 4, 'reachTime': '2025-01-10T19:30:00Z'},
            ]
        },
    )

    @field_validator('address', 'name', 'phone_number', 'vehicle_details', 'notes', mode='before')
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ModifiedItemRequest(CamelModel):
    food_id: str
    updated_quantity: Optional[int] = Field(None, ge=1)
    reason: Optional[str] = Field(None, max_length=200)


class VendorRespondRequest(CamelModel):
    action: str
    rejection_reason: Optional[str] = Field(None, max_length=500)
    suggested_time: Optional[datetime] = None
    modified_items: List[ModifiedItemRequest] = []

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {'action': 'accept'},
                {
                    'action': 'reject',
                    'rejectionReason': 'Out of paneer',
                    'suggestedTime': '2025-01-10T20:00:00Z',
                    'modifiedItems': [{'foodId': '64f0c2...', 'updatedQuantity': 1}],
                },
            ]
        },
    )

    @field_validator('suggested_time', 'rejection_reason', mode='before')
    @classmethod
    def blank_as_missing(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PaymentConfirmRequest(CamelModel):
    transaction_id: Optional[str] = None
    provider_reference_id: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    payment_method: Optional[str] = None


class ApiResponse(BaseModel):
    """Envelope shared by every booking endpoint"""

    success: bool = True
    message: str
    data: Any = None
