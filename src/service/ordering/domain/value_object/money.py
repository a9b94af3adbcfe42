from decimal import ROUND_HALF_UP, Decimal


def round_money(value: float | int | None) -> float:
    """Round half-up to 2 decimals, the way amounts are shown on a bill"""
    if not value:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))
