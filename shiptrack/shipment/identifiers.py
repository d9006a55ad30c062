"""
Carrier identifier extraction - PostNord and CityMail numbers

The provider reports secondary tracking numbers at tracker, shipment and
event level. They are collected from the snapshot, deduplicated and
classified by format. When the structured scan finds nothing for a carrier,
every string in the raw provider payload is searched as a last resort.
"""

import re
from typing import Any, Iterator, List, Optional, Pattern, Set

from ..models import CarrierIdentifiers, RawTrackingIdentifier, TrackingSnapshot


CITYMAIL_MIN_LENGTH = 8

POSTNORD_PATTERN = re.compile(r"^(UJ)[A-Z0-9]+SE$|^(003)[0-9]+")
CITYMAIL_PATTERN = re.compile(r"^(BC)[A-Z0-9]+CN$")


def _normalize(value: Optional[str]) -> str:
    return str(value or "").strip().upper()


def is_postnord_label(value: Optional[str]) -> bool:
    """PostNord parcel label: UJ...SE"""
    tn = _normalize(value)
    return tn.startswith("UJ") and tn.endswith("SE")


def is_postnord_number(value: Optional[str]) -> bool:
    """PostNord number: UJ...SE label or 003-prefixed shipment id"""
    tn = _normalize(value)
    return is_postnord_label(tn) or tn.startswith("003")


def is_citymail_number(value: Optional[str]) -> bool:
    """CityMail number: BC...CN, at least CITYMAIL_MIN_LENGTH characters"""
    tn = _normalize(value)
    return len(tn) >= CITYMAIL_MIN_LENGTH and tn.startswith("BC") and tn.endswith("CN")


def extract_identifiers(snapshot: TrackingSnapshot) -> List[RawTrackingIdentifier]:
    """
    Collect every secondary tracking number in the snapshot.

    Scan order: shipment list, tracker list, tracker number, shipment
    number, event-level numbers. Duplicates (by trimmed value) keep their
    first occurrence.

    Args:
        snapshot: Normalized tracking snapshot

    Returns:
        Identifiers in scan order, without duplicates
    """
    candidates: List[RawTrackingIdentifier] = []
    candidates.extend(snapshot.shipment.identifiers)
    candidates.extend(snapshot.tracker.identifiers)
    for number in (snapshot.tracker.tracking_number, snapshot.shipment.tracking_number):
        if number:
            candidates.append(RawTrackingIdentifier(value=number))
    for event in snapshot.events:
        if event.tracking_number:
            candidates.append(
                RawTrackingIdentifier(value=event.tracking_number, courier_code=event.courier_code)
            )

    seen: Set[str] = set()
    identifiers = []
    for candidate in candidates:
        value = candidate.value.strip()
        if not value or value in seen:
            continue
        seen.add(value)
        if value != candidate.value:
            candidate = RawTrackingIdentifier(
                value=value,
                courier_code=candidate.courier_code,
                courier_name=candidate.courier_name,
            )
        identifiers.append(candidate)
    return identifiers


def pick_postnord_number(values: List[str]) -> Optional[str]:
    """First UJ...SE label, else first 003 number"""
    for value in values:
        if is_postnord_label(value):
            return value
    for value in values:
        if is_postnord_number(value):
            return value
    return None


def pick_citymail_number(values: List[str]) -> Optional[str]:
    """First CityMail-formatted number"""
    for value in values:
        if is_citymail_number(value):
            return value
    return None


def _iter_strings(obj: Any) -> Iterator[str]:
    """Depth-first walk over every string in a nested structure"""
    visited: Set[int] = set()
    stack = [obj]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            yield current
            continue
        if isinstance(current, (dict, list, tuple)):
            if id(current) in visited:
                continue
            visited.add(id(current))
            children = list(current.values()) if isinstance(current, dict) else list(current)
            # reversed so children are visited in their original order
            stack.extend(reversed(children))


def scan_for_pattern(obj: Any, pattern: Pattern[str]) -> Optional[str]:
    """
    Last-resort search for a carrier number anywhere in a raw structure.

    Safe against reference cycles.

    Returns:
        First matching string in traversal order, or None
    """
    for value in _iter_strings(obj):
        candidate = value.strip()
        if candidate and pattern.match(candidate):
            return candidate
    return None


def find_carrier_identifiers(snapshot: TrackingSnapshot) -> CarrierIdentifiers:
    """
    Pick the canonical PostNord and CityMail numbers for a snapshot.

    Args:
        snapshot: Normalized tracking snapshot

    Returns:
        CarrierIdentifiers with zero or one number per carrier
    """
    values = [i.value for i in extract_identifiers(snapshot)]

    postnord = pick_postnord_number(values)
    if postnord is None:
        postnord = scan_for_pattern(snapshot.raw, POSTNORD_PATTERN)

    citymail = pick_citymail_number(values)
    if citymail is None:
        citymail = scan_for_pattern(snapshot.raw, CITYMAIL_PATTERN)

    return CarrierIdentifiers(postnord=postnord, citymail=citymail)
