"""Helpers shared by the Mongo repositories"""

from typing import Any

from bson import ObjectId


def id_filter(value: str) -> Any:
    """
    Match an id stored either as a string or as an ObjectId

    Carts, vendors, users and coupons may carry ObjectId keys written by
    other services, while bookings always use UUID7 strings.
    """
    if ObjectId.is_valid(value):
        return {'$in': [value, ObjectId(value)]}
    return value


def str_id(value: Any) -> str | None:
    return str(value) if value is not None else None
