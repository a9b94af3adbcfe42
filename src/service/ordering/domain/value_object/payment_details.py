from datetime import datetime
from typing import Optional

import attrs


@attrs.frozen
class PaymentDetails:
    amount: float
    payment_method: str
    paid_at: datetime
    transaction_id: Optional[str] = None
    provider_reference_id: Optional[str] = None
