from datetime import datetime
from typing import Optional

import attrs


@attrs.frozen
class ServiceDetails:
    """Service-type-specific fields captured from the booking request"""

    service_type: str
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    name: Optional[str] = None
    phone_number: Optional[str] = None
    person_count: Optional[int] = None
    vehicle_details: Optional[str] = None
    reach_time: Optional[datetime] = None
