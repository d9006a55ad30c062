"""
ShipTrack - Shipment tracking normalization and ETA estimation

ShipTrack interprets responses from a multi-carrier tracking provider
(Ship24), works out which Swedish last-mile carrier (PostNord or CityMail)
is handling the parcel, picks the latest tracking event and estimates a
delivery window from a rule table.

Quick Start:
    from shiptrack import ShipTrack

    app = ShipTrack("config.yaml")
    result = app.interpret(payload, requested_value="UJ123456789SE")
    print(result.carrier, result.eta.estimated_delivery)

Using the engine directly:
    from shiptrack import RuleStore, CsvRuleSource, EtaEstimator, TrackingPipeline

    store = RuleStore(CsvRuleSource("eta_rules.csv"))
    pipeline = TrackingPipeline(EtaEstimator(store))
    result = pipeline.run(payload)
"""

__version__ = "0.1.0"

# Models
from .models import (
    Carrier,
    Milestone,
    MatchType,
    NotificationKind,
    Rule,
    MatchedRule,
    EtaEstimate,
    RawTrackingIdentifier,
    TrackingEvent,
    TrackingSection,
    TrackingSnapshot,
    CarrierIdentifiers,
    TrackingResult,
)

# ETA
from .eta import (
    RuleStore,
    CsvRuleSource,
    InlineRuleSource,
    ConfigLoadError,
    MalformedRuleRow,
    EtaEstimator,
)

# Shipment normalization
from .shipment import (
    normalize_response,
    extract_identifiers,
    find_carrier_identifiers,
    detect_carrier,
    pick_latest_event,
    to_display_label,
    classify_notification,
)

# Pipeline / app
from .pipeline import TrackingPipeline
from .config import ShipTrackConfig, ConfigError, load_config
from .app import ShipTrack

__all__ = [
    "Carrier",
    "Milestone",
    "MatchType",
    "NotificationKind",
    "Rule",
    "MatchedRule",
    "EtaEstimate",
    "RawTrackingIdentifier",
    "TrackingEvent",
    "TrackingSection",
    "TrackingSnapshot",
    "CarrierIdentifiers",
    "TrackingResult",
    "RuleStore",
    "CsvRuleSource",
    "InlineRuleSource",
    "ConfigLoadError",
    "MalformedRuleRow",
    "EtaEstimator",
    "normalize_response",
    "extract_identifiers",
    "find_carrier_identifiers",
    "detect_carrier",
    "pick_latest_event",
    "to_display_label",
    "classify_notification",
    "TrackingPipeline",
    "ShipTrackConfig",
    "ConfigError",
    "load_config",
    "ShipTrack",
]
