"""Domain models for calendar import."""

from cal_import.models.event import EventRecord

__all__ = [
    "EventRecord",
]
