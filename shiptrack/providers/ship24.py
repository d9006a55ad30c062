"""
Ship24 tracking provider - Fetch raw tracking data for a number or order id

Only fetches. Interpreting the response is the pipeline's job.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import DEFAULT_PROVIDER_URL

logger = logging.getLogger(__name__)


MODE_TRACKING = "tracking"
MODE_ORDER = "order"


class Ship24Provider:
    """
    Thin client for Ship24's trackers API.

    Results are plain dicts: {"success": True, "status_code", "data"} or
    {"success": False, "error", ...}. Errors are never raised.

    Example:
        provider = Ship24Provider(api_key="...")
        result = await provider.track("UJ123456789SE")
        if result["success"]:
            payload = result["data"]
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = DEFAULT_PROVIDER_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_base = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def track(self, value: str, mode: str = MODE_TRACKING) -> Dict[str, Any]:
        """
        Create-or-get a tracker and return its tracking results.

        Args:
            value: Tracking number, or client tracker id when mode is "order"
            mode: "tracking" or "order"

        Returns:
            Result dict (see class docstring)
        """
        value = (value or "").strip()
        if not value:
            return {"success": False, "error": "No tracking number provided", "status_code": 400}

        if not self.api_key:
            logger.error("Ship24 API key not configured")
            return {
                "success": False,
                "error": "Tracking provider API key is not configured.",
                "status_code": 500,
            }

        body: Dict[str, Any] = {"trackingNumber": value}
        if mode == MODE_ORDER:
            body["searchBy"] = "clientTrackerId"

        logger.info(f"Tracking {value} via Ship24 (mode={mode})")

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.api_base}/trackers/track",
                    headers={
                        "Content-Type": "application/json",
                        "Authorization": f"Bearer {self.api_key}",
                    },
                    json=body,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Ship24 API timeout: {e}")
            return {
                "success": False,
                "error": self._get_user_friendly_error("timeout"),
                "status_code": 504,
            }
        except httpx.HTTPError as e:
            logger.error(f"Ship24 API connection error: {e}", exc_info=True)
            return {
                "success": False,
                "error": self._get_user_friendly_error("connection_error"),
                "status_code": 502,
            }

        try:
            data = response.json()
        except ValueError:
            data = {"body": response.text}

        if response.is_error:
            logger.error(f"Ship24 API HTTP error: {response.status_code} - {response.text[:200]}")
            return {
                "success": False,
                "error": self._get_user_friendly_error("http_error", response.status_code),
                "status_code": response.status_code,
                "raw": data,
            }

        return {"success": True, "status_code": response.status_code, "data": data}

    def _get_user_friendly_error(self, error_type: str, details: Any = None) -> str:
        """Convert technical errors to user-friendly messages."""
        if error_type == "timeout":
            return "The tracking service took too long to answer. Please try again."

        elif error_type == "connection_error":
            return "Unable to check tracking status right now. Please try again in a few minutes."

        elif error_type == "http_error":
            status_code = details
            if status_code in (401, 403):
                return "Tracking service authentication failed. Please contact support."
            elif status_code == 429:
                return "Too many tracking requests. Please try again later."
            elif status_code >= 500:
                return "Tracking service is experiencing issues. Please try again later."
            else:
                return "The tracking service rejected the request. Please check the tracking number."

        return "Something went wrong. Please try again later."
