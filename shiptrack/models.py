"""
ShipTrack Models - Canonical data shapes shared by the tracking engine

Everything downstream of the response normalizer works on these types;
raw provider dictionaries never leak past shipment/response.py.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


DEFAULT_RULE_PRIORITY = 9999


class Carrier(str, Enum):
    """Last-mile carriers the engine can tell apart"""
    CITYMAIL = "citymail"
    POSTNORD = "postnord"
    UNKNOWN = "unknown"


class Milestone(str, Enum):
    """Coarse lifecycle stages reported by the tracking provider"""
    INFO_RECEIVED = "info_received"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    AVAILABLE_FOR_PICKUP = "available_for_pickup"
    DELIVERED = "delivered"
    FAILED_ATTEMPT = "failed_attempt"
    EXCEPTION = "exception"
    PENDING = "pending"


class MatchType(str, Enum):
    """How a rule's match_value is tested against status text"""
    CONTAINS = "contains"
    EQUALS = "equals"
    REGEX = "regex"


class NotificationKind(str, Enum):
    """Customer notification a status change maps to"""
    TRACKING_CREATED = "tracking_created"
    IN_TRANSIT = "in_transit"
    PICKUP_READY = "pickup_ready"
    DELIVERED = "delivered"


@dataclass(frozen=True)
class Rule:
    """
    One row of the ETA rule table.

    match_type is kept as configured (lowercased) so the matched rule can be
    reported back verbatim; values outside MatchType evaluate as contains.
    """
    carrier: str
    match_value: str
    priority: int = DEFAULT_RULE_PRIORITY
    match_type: str = MatchType.CONTAINS.value
    eta_min_business_days: int = 0
    eta_max_business_days: int = 0
    eta_label: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class MatchedRule:
    """Identity of the rule that produced an estimate"""
    carrier: str
    priority: int
    match_type: str
    match_value: str

    @classmethod
    def from_rule(cls, rule: Rule) -> "MatchedRule":
        return cls(
            carrier=rule.carrier,
            priority=rule.priority,
            match_type=rule.match_type,
            match_value=rule.match_value,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carrier": self.carrier,
            "priority": self.priority,
            "match_type": self.match_type,
            "match_value": self.match_value,
        }


@dataclass(frozen=True)
class EtaEstimate:
    """Estimated delivery window"""
    estimated_delivery: str
    eta_min_business_days: Optional[int] = None
    eta_max_business_days: Optional[int] = None
    eta_note: Optional[str] = None
    matched_rule: Optional[MatchedRule] = None


@dataclass(frozen=True)
class RawTrackingIdentifier:
    """A secondary tracking number as reported by the provider"""
    value: str
    courier_code: Optional[str] = None
    courier_name: Optional[str] = None


@dataclass(frozen=True)
class TrackingEvent:
    """A single checkpoint in the shipment history"""
    timestamp: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None
    courier_code: Optional[str] = None
    status_code: Optional[str] = None
    status_milestone: Optional[str] = None
    tracking_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "location": self.location,
            "status": self.status,
            "courier_code": self.courier_code,
        }


@dataclass
class TrackingSection:
    """Tracker- or shipment-level block of a provider response"""
    tracking_number: Optional[str] = None
    client_tracker_id: Optional[str] = None
    status_milestone: Optional[str] = None
    identifiers: List[RawTrackingIdentifier] = field(default_factory=list)


@dataclass
class TrackingSnapshot:
    """
    Canonical view of one tracking returned by the provider.

    raw keeps the provider payload the tracking came from; it is only
    consulted by the last-resort identifier scan.
    """
    tracker: TrackingSection = field(default_factory=TrackingSection)
    shipment: TrackingSection = field(default_factory=TrackingSection)
    events: List[TrackingEvent] = field(default_factory=list)
    generated_at: Optional[str] = None
    raw: Any = field(default_factory=dict)

    @property
    def milestone(self) -> Optional[str]:
        """Shipment milestone, falling back to the tracker's"""
        return self.shipment.status_milestone or self.tracker.status_milestone

    @property
    def primary_tracking_number(self) -> Optional[str]:
        return self.tracker.tracking_number or self.shipment.tracking_number


@dataclass(frozen=True)
class CarrierIdentifiers:
    """Canonical identifiers picked per known carrier"""
    postnord: Optional[str] = None
    citymail: Optional[str] = None


@dataclass
class TrackingResult:
    """
    Normalized lookup result handed back to the calling layer.

    Example:
        result = pipeline.run(payload, requested_value="UJ123456789SE")
        body = {"ok": True, **result.to_dict()}
    """
    tracking_number: Optional[str]
    carrier: Carrier
    status_label: str
    eta: EtaEstimate
    identifiers: CarrierIdentifiers = field(default_factory=CarrierIdentifiers)
    client_tracker_id: Optional[str] = None
    status_milestone: Optional[str] = None
    last_update: Optional[str] = None
    latest_event_timestamp: Optional[str] = None
    latest_status_text: str = ""
    notification: Optional[NotificationKind] = None
    events: List[TrackingEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready mapping of the result"""
        eta = self.eta
        return {
            "tracking_number": self.tracking_number,
            "client_tracker_id": self.client_tracker_id,
            "postnord_number": self.identifiers.postnord,
            "citymail_number": self.identifiers.citymail,
            "carrier_detected": self.carrier.value,
            "status_milestone": self.status_milestone,
            "status_label": self.status_label,
            "last_update": self.last_update,
            "latest_event_timestamp": self.latest_event_timestamp,
            "latest_status_text": self.latest_status_text,
            "notification": self.notification.value if self.notification else None,
            "estimated_delivery": eta.estimated_delivery,
            "eta_min_business_days": eta.eta_min_business_days,
            "eta_max_business_days": eta.eta_max_business_days,
            "eta_note": eta.eta_note,
            "eta_matched_rule": eta.matched_rule.to_dict() if eta.matched_rule else None,
            "events": [e.to_dict() for e in self.events],
        }
