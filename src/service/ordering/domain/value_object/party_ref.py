from typing import Optional

import attrs


@attrs.frozen
class CustomerRef:
    """Customer fields denormalized onto a booking for vendor screens"""

    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    dial_code: Optional[str] = None
    user_code: Optional[str] = None


@attrs.frozen
class VendorRef:
    id: str
    restaurant_name: Optional[str] = None
    gst_percentage: Optional[float] = None
