"""
Shipment normalization - Response shapes, carrier identifiers, events, status
"""

from .response import normalize_response, normalize_tracking, select_tracking
from .identifiers import extract_identifiers, find_carrier_identifiers
from .carrier_detector import detect_carrier
from .events import pick_latest_event, sort_events, parse_timestamp
from .status import to_display_label, classify_notification

__all__ = [
    "normalize_response",
    "normalize_tracking",
    "select_tracking",
    "extract_identifiers",
    "find_carrier_identifiers",
    "detect_carrier",
    "pick_latest_event",
    "sort_events",
    "parse_timestamp",
    "to_display_label",
    "classify_notification",
]
