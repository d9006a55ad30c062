"""
ShipTrack Application - Single entry point for tracking lookups.

Usage:
    from shiptrack import ShipTrack

    app = ShipTrack("config.yaml")

    # Interpret a response the caller already fetched
    result = app.interpret(payload, requested_value="UJ123456789SE")

    # Fetch from the provider and interpret
    body = await app.track("UJ123456789SE")
"""

import logging
from typing import Any, Dict, Optional, Union

from .config import ShipTrackConfig, load_config
from .eta import CsvRuleSource, EtaEstimator, RuleStore
from .models import TrackingResult
from .pipeline import TrackingPipeline
from .providers import MODE_TRACKING, Ship24Provider

logger = logging.getLogger(__name__)


class ShipTrack:
    """
    ShipTrack application entry point.

    Builds the rule store, estimator, pipeline and provider client once.
    The rule table is loaded on the first lookup, or at construction when
    eta.preload_rules is set.

    Args:
        config: Path to a YAML config file, a config mapping, or a
            ShipTrackConfig. None uses defaults.
        rule_store: Rule store to use instead of the configured CSV file.
        provider: Provider client to use instead of the configured one.

    Example:
        app = ShipTrack({"provider": {"api_key": "..."}})
        body = await app.track("BC1234567CN")
    """

    def __init__(
        self,
        config: Union[str, Dict[str, Any], ShipTrackConfig, None] = None,
        rule_store: Optional[RuleStore] = None,
        provider: Optional[Ship24Provider] = None,
    ):
        if isinstance(config, ShipTrackConfig):
            self.config = config
        elif isinstance(config, str):
            self.config = load_config(config)
        else:
            self.config = ShipTrackConfig.from_dict(config)

        eta_cfg = self.config.eta
        self.rule_store = rule_store or RuleStore(
            CsvRuleSource(eta_cfg.rules_path),
            default_priority=eta_cfg.default_priority,
        )
        self.estimator = EtaEstimator(self.rule_store)
        self.pipeline = TrackingPipeline(self.estimator)

        provider_cfg = self.config.provider
        self.provider = provider or Ship24Provider(
            api_key=provider_cfg.api_key,
            base_url=provider_cfg.base_url,
            timeout=provider_cfg.timeout,
        )

        if eta_cfg.preload_rules:
            self.rule_store.load_rules()

    def interpret(self, payload: Any, requested_value: str = "") -> Optional[TrackingResult]:
        """
        Normalize an already fetched provider response.

        Returns:
            TrackingResult, or None if the payload has no tracking

        Raises:
            ConfigLoadError: If the ETA rule table cannot be loaded
        """
        return self.pipeline.run(payload, requested_value=requested_value)

    async def track(self, value: str, mode: str = MODE_TRACKING) -> Dict[str, Any]:
        """
        Look up a shipment at the provider and normalize the answer.

        Args:
            value: Tracking number, or order id when mode is "order"
            mode: "tracking" or "order"

        Returns:
            {"success": True, "mode", "status_code", **result} on success,
            otherwise the provider's error dict
        """
        fetched = await self.provider.track(value, mode=mode)
        if not fetched.get("success"):
            return fetched

        result = self.interpret(fetched.get("data"), requested_value=value)
        if result is None:
            return {
                "success": False,
                "error": "No shipment found at the tracking provider",
                "status_code": 404,
                "raw": fetched.get("data"),
            }

        return {
            "success": True,
            "mode": mode,
            "status_code": fetched.get("status_code"),
            **result.to_dict(),
        }
