"""
Status normalization - Display labels and notification kinds
"""

from typing import Dict, Optional

from ..models import Milestone, NotificationKind


UNKNOWN_STATUS_LABEL = "Unknown status"

MILESTONE_LABELS: Dict[str, str] = {
    Milestone.INFO_RECEIVED.value: "Information received (shipment registered but not yet sent)",
    Milestone.IN_TRANSIT.value: "In transit",
    Milestone.OUT_FOR_DELIVERY.value: "Out for delivery",
    Milestone.AVAILABLE_FOR_PICKUP.value: "Ready for pickup at service point",
    Milestone.DELIVERED.value: "Delivered",
    Milestone.FAILED_ATTEMPT.value: "Delivery attempt failed",
    Milestone.EXCEPTION.value: "Problem with the shipment",
    Milestone.PENDING.value: "No tracking information yet",
}

# Checked in order; the first keyword found in the status decides
NOTIFICATION_KEYWORDS = (
    ("delivered", NotificationKind.DELIVERED),
    ("pickup", NotificationKind.PICKUP_READY),
    ("out_for_delivery", NotificationKind.PICKUP_READY),
    ("transit", NotificationKind.IN_TRANSIT),
    ("created", NotificationKind.TRACKING_CREATED),
)


def to_display_label(milestone: Optional[str]) -> str:
    """Map a provider milestone to its display label, unknown for anything else"""
    if isinstance(milestone, Milestone):
        milestone = milestone.value
    if not isinstance(milestone, str):
        return UNKNOWN_STATUS_LABEL
    return MILESTONE_LABELS.get(milestone, UNKNOWN_STATUS_LABEL)


def classify_notification(status: Optional[str]) -> Optional[NotificationKind]:
    """
    Decide which customer notification a provider status code warrants.

    Args:
        status: Provider status code or category (e.g. "delivery_delivered")

    Returns:
        NotificationKind, or None when the status needs no notification
    """
    if not status or not isinstance(status, str):
        return None

    lowered = status.lower()
    for keyword, kind in NOTIFICATION_KEYWORDS:
        if keyword in lowered:
            return kind
    return None
