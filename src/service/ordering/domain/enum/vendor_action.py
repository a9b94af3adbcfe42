from enum import StrEnum


class VendorAction(StrEnum):
    ACCEPT = 'accept'
    REJECT = 'reject'
