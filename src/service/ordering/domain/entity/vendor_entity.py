from typing import Optional

import attrs

from src.service.ordering.domain.value_object.party_ref import VendorRef


@attrs.define
class Vendor:
    id: str
    restaurant_name: str
    gst_percentage: Optional[float] = None
    contact_number: Optional[str] = None
    is_active: bool = True

    def to_ref(self) -> VendorRef:
        return VendorRef(
            id=self.id,
            restaurant_name=self.restaurant_name,
            gst_percentage=self.gst_percentage,
        )
