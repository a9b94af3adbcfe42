from typing import Any, Optional

import attrs


@attrs.frozen
class ModifiedItem:
    """Partial-quantity reduction proposed by a vendor when rejecting"""

    food_id: str
    original_quantity: int
    updated_quantity: int
    reason: Optional[str] = None


@attrs.frozen
class ItemQuantityChange:
    """A vendor's requested change before it is checked against the order"""

    food_id: str
    updated_quantity: Any
    reason: Optional[str] = None
