"""
SSE Event Type Enum - Domain Value Object

Frame types pushed on a booking's live status stream.
"""

from enum import StrEnum


class SseEventType(StrEnum):
    """SSE event type enumeration for real-time streaming"""

    INITIAL = 'INITIAL'
    STATUS_UPDATE = 'STATUS_UPDATE'
