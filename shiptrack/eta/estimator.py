"""
ETA Estimator - First-match, priority-ordered delivery window estimation
"""

import logging
from typing import Optional

from ..models import Carrier, EtaEstimate, MatchedRule, Milestone, Rule
from .matching import matches_rule
from .rules import RuleStore

logger = logging.getLogger(__name__)


DELIVERED_LABEL = "Delivered"
UNAVAILABLE_LABEL = "Estimated delivery unavailable for this status"
UNAVAILABLE_NOTE = "Estimate based on current status only"


def format_business_days(min_days: int, max_days: int) -> str:
    """Label for a business-day window, e.g. '1–3 business days'"""
    return f"{min_days}–{max_days} business days"


class EtaEstimator:
    """
    Estimates delivery windows from the rule table.

    Rules for the detected carrier are walked in stored order and the first
    one whose match_value fits the latest status text wins. There is no
    best-match scoring: rule order in the table decides precedence.

    Example:
        estimator = EtaEstimator(RuleStore(CsvRuleSource("eta_rules.csv")))
        eta = estimator.estimate("postnord", "Parcel is in transit", "in_transit")
        print(eta.estimated_delivery)
    """

    def __init__(self, rule_store: RuleStore):
        self.rule_store = rule_store

    def estimate(
        self,
        carrier: str,
        latest_status_text: Optional[str],
        milestone: Optional[str] = None,
    ) -> EtaEstimate:
        """
        Estimate the delivery window for a shipment.

        Args:
            carrier: Detected carrier ("postnord", "citymail", "unknown")
            latest_status_text: Status text of the latest tracking event
            milestone: Provider milestone, used for the delivered fallback

        Returns:
            EtaEstimate from the first matching rule, or a fallback

        Raises:
            ConfigLoadError: If the rule table cannot be loaded
        """
        carrier_key = (carrier.value if isinstance(carrier, Carrier) else str(carrier or "")).strip().lower()
        rules = [r for r in self.rule_store.load_rules() if r.carrier.lower() == carrier_key]

        for rule in rules:
            if matches_rule(latest_status_text, rule):
                logger.debug(
                    f"ETA rule matched for {carrier_key}: priority={rule.priority} "
                    f"{rule.match_type}={rule.match_value!r}"
                )
                return self._from_rule(rule)

        if (milestone or "").strip().lower() == Milestone.DELIVERED.value:
            return EtaEstimate(
                estimated_delivery=DELIVERED_LABEL,
                eta_min_business_days=0,
                eta_max_business_days=0,
            )

        return EtaEstimate(
            estimated_delivery=UNAVAILABLE_LABEL,
            eta_min_business_days=None,
            eta_max_business_days=None,
            eta_note=UNAVAILABLE_NOTE,
        )

    def _from_rule(self, rule: Rule) -> EtaEstimate:
        label = rule.eta_label or format_business_days(
            rule.eta_min_business_days, rule.eta_max_business_days
        )
        return EtaEstimate(
            estimated_delivery=label,
            eta_min_business_days=rule.eta_min_business_days,
            eta_max_business_days=rule.eta_max_business_days,
            eta_note=rule.note,
            matched_rule=MatchedRule.from_rule(rule),
        )
