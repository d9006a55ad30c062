"""
Tracking pipeline - From provider payload to a normalized TrackingResult

Flow:
1. normalize the payload into a TrackingSnapshot
2. pick PostNord / CityMail identifiers
3. detect the last-mile carrier
4. select the latest event
5. label the milestone, classify the notification and estimate the ETA
"""

import logging
from typing import Any, Optional

from .eta import EtaEstimator
from .models import TrackingResult, TrackingSnapshot
from .shipment import (
    classify_notification,
    detect_carrier,
    find_carrier_identifiers,
    normalize_response,
    pick_latest_event,
    to_display_label,
)

logger = logging.getLogger(__name__)


class TrackingPipeline:
    """
    Runs the normalization and ETA engine over one provider response.

    Example:
        pipeline = TrackingPipeline(EtaEstimator(store))
        result = pipeline.run(payload, requested_value="UJ123456789SE")
    """

    def __init__(self, estimator: EtaEstimator):
        self.estimator = estimator

    def run(self, payload: Any, requested_value: str = "") -> Optional[TrackingResult]:
        """
        Normalize a provider payload.

        Args:
            payload: Provider response (envelope or single tracking object)
            requested_value: Tracking number or order id the caller asked for

        Returns:
            TrackingResult, or None when the payload contains no tracking

        Raises:
            ConfigLoadError: If the ETA rule table cannot be loaded
        """
        snapshot = normalize_response(payload)
        if snapshot is None:
            logger.info(f"No tracking found in provider response for {requested_value!r}")
            return None
        return self.run_snapshot(snapshot, requested_value)

    def run_snapshot(self, snapshot: TrackingSnapshot, requested_value: str = "") -> TrackingResult:
        """Normalize an already parsed snapshot"""
        tracking_number = snapshot.primary_tracking_number or (requested_value or "").strip() or None

        identifiers = find_carrier_identifiers(snapshot)
        carrier = detect_carrier(
            citymail_id=identifiers.citymail,
            postnord_id=identifiers.postnord,
            primary_tracking_number=tracking_number,
        )

        latest = pick_latest_event(snapshot.events)
        latest_status_text = (latest.status if latest else None) or ""
        milestone = snapshot.milestone
        notification = classify_notification((latest.status_code if latest else None) or milestone)

        eta = self.estimator.estimate(carrier.value, latest_status_text, milestone)

        logger.info(
            f"Tracking {tracking_number}: carrier={carrier.value}, milestone={milestone}, "
            f"eta={eta.estimated_delivery!r}"
        )

        return TrackingResult(
            tracking_number=tracking_number,
            client_tracker_id=snapshot.tracker.client_tracker_id,
            identifiers=identifiers,
            carrier=carrier,
            status_milestone=milestone,
            status_label=to_display_label(milestone),
            last_update=snapshot.generated_at,
            latest_event_timestamp=latest.timestamp if latest else None,
            latest_status_text=latest_status_text,
            notification=notification,
            eta=eta,
            events=list(snapshot.events),
        )
