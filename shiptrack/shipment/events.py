"""
Event selection - Deterministic ordering of tracking events
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from ..models import TrackingEvent

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Offsets and a trailing "Z" are honoured; naive values are read as UTC.

    Returns:
        datetime, or None if the value is missing or unparsable
    """
    if not value or not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        parsed = date_parser.isoparse(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # shifting a value at the edge of the datetime range can overflow
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        logger.debug(f"Unparsable event timestamp: {value!r}")
        return None


def _sort_key(indexed: Tuple[int, TrackingEvent]) -> tuple:
    index, event = indexed
    moment = parse_timestamp(event.timestamp)
    if moment is None:
        # unknown recency: after every dated event, original order kept
        return (1, 0.0, (), index)
    content = (event.status or "", event.location or "", event.courier_code or "")
    return (0, -moment.timestamp(), content, index)


def sort_events(events: Sequence[TrackingEvent]) -> List[TrackingEvent]:
    """
    Order events most recent first.

    Dated events sort by time descending; events sharing a timestamp are
    ordered by content so the result does not depend on input order.
    Undated or unparsable events follow, in their original order.
    """
    return [event for _, event in sorted(enumerate(events), key=_sort_key)]


def pick_latest_event(events: Sequence[TrackingEvent]) -> Optional[TrackingEvent]:
    """
    Pick the most recent event.

    Returns:
        The latest event, or None for an empty list
    """
    if not events:
        return None
    return sort_events(events)[0]
