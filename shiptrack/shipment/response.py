"""
Response normalizer - Turn a provider payload into a TrackingSnapshot

The provider's payload shape varies between endpoints and API revisions:

- envelope: {"data": {"trackings": [...]}}, {"data": {"trackers": [...]}}
  or {"data": [...]}
- events under "events" or "trackingEvents"
- event time under "datetime" or "occurrenceDatetime"
- secondary numbers as plain strings or {"tn": ..., "courierCode": ...}

All of that is resolved here, once. Nothing in this module raises on
malformed input; missing or mistyped sections come back empty.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models import RawTrackingIdentifier, TrackingEvent, TrackingSection, TrackingSnapshot

logger = logging.getLogger(__name__)


IDENTIFIER_VALUE_KEYS = ("tn", "trackingNumber", "value")

# Any of these at the top level marks a bare tracking object
TRACKING_SECTION_KEYS = ("tracker", "shipment", "events", "trackingEvents", "metadata")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _text(value: Any) -> Optional[str]:
    """Trimmed string for scalar values, None for empty or non-scalar"""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    return text or None


def select_tracking(payload: Any) -> Optional[Dict[str, Any]]:
    """
    Find the first tracking object in a provider payload.

    Accepts the full response envelope or a bare tracking object.

    Returns:
        The tracking dict, or None when the payload holds no tracking
    """
    if not isinstance(payload, dict):
        return None

    if "data" not in payload and any(key in payload for key in TRACKING_SECTION_KEYS):
        return payload

    data = payload.get("data")
    if isinstance(data, dict):
        for key in ("trackings", "trackers"):
            items = _as_list(data.get(key))
            if items and isinstance(items[0], dict):
                return items[0]
    elif isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]

    return None


def parse_identifier(entry: Any) -> Optional[RawTrackingIdentifier]:
    """Parse one entry of a trackingNumbers list"""
    if isinstance(entry, dict):
        value = None
        for key in IDENTIFIER_VALUE_KEYS:
            value = _text(entry.get(key))
            if value:
                break
        if not value:
            return None
        return RawTrackingIdentifier(
            value=value,
            courier_code=_text(entry.get("courierCode")),
            courier_name=_text(entry.get("courierName")),
        )

    value = _text(entry)
    return RawTrackingIdentifier(value=value) if value else None


def parse_section(section: Any) -> TrackingSection:
    """Parse the tracker or shipment block"""
    section = _as_dict(section)
    identifiers = []
    for entry in _as_list(section.get("trackingNumbers")):
        identifier = parse_identifier(entry)
        if identifier:
            identifiers.append(identifier)

    return TrackingSection(
        tracking_number=_text(section.get("trackingNumber")),
        client_tracker_id=_text(section.get("clientTrackerId")),
        status_milestone=_text(section.get("statusMilestone")),
        identifiers=identifiers,
    )


def parse_event(event: Any) -> Optional[TrackingEvent]:
    """Parse one tracking event, None if it is not a mapping"""
    if not isinstance(event, dict):
        return None

    return TrackingEvent(
        timestamp=_text(event.get("datetime")) or _text(event.get("occurrenceDatetime")),
        status=_text(event.get("status")),
        location=_text(event.get("location")),
        courier_code=_text(event.get("courierCode")),
        status_code=_text(event.get("statusCode")) or _text(event.get("statusCategory")),
        status_milestone=_text(event.get("statusMilestone")),
        tracking_number=_text(event.get("trackingNumber")),
    )


def normalize_tracking(tracking: Any, raw: Any = None) -> TrackingSnapshot:
    """
    Build a TrackingSnapshot from a single tracking object.

    raw is the payload the tracking came from; defaults to the tracking.
    """
    tracking = _as_dict(tracking)

    raw_events = tracking.get("events")
    if not isinstance(raw_events, list):
        raw_events = _as_list(tracking.get("trackingEvents"))

    events = []
    for raw_event in raw_events:
        event = parse_event(raw_event)
        if event is not None:
            events.append(event)

    snapshot = TrackingSnapshot(
        tracker=parse_section(tracking.get("tracker")),
        shipment=parse_section(tracking.get("shipment")),
        events=events,
        generated_at=_text(_as_dict(tracking.get("metadata")).get("generatedAt")),
        raw=tracking if raw is None else raw,
    )
    logger.debug(
        f"Normalized tracking {snapshot.primary_tracking_number}: "
        f"{len(snapshot.events)} events, milestone={snapshot.milestone}"
    )
    return snapshot


def normalize_response(payload: Any) -> Optional[TrackingSnapshot]:
    """
    Normalize a full provider payload.

    Returns:
        TrackingSnapshot for the first tracking, or None if there is none
    """
    tracking = select_tracking(payload)
    if tracking is None:
        return None
    return normalize_tracking(tracking, raw=payload)
