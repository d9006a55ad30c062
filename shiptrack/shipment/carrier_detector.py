"""
Carrier detection based on extracted identifiers and tracking number format
"""

from typing import Optional

from ..models import Carrier
from .identifiers import is_citymail_number, is_postnord_number


def detect_carrier(
    citymail_id: Optional[str] = None,
    postnord_id: Optional[str] = None,
    primary_tracking_number: Optional[str] = None,
) -> Carrier:
    """
    Decide which last-mile carrier handles a shipment.

    Precedence, first match wins:
    1. a CityMail identifier was extracted
    2. a PostNord identifier was extracted
    3. the primary tracking number has CityMail format
    4. the primary tracking number has PostNord format

    Args:
        citymail_id: Extracted CityMail number, if any
        postnord_id: Extracted PostNord number, if any
        primary_tracking_number: Tracking number the provider resolved

    Returns:
        Carrier, UNKNOWN when nothing matches
    """
    if citymail_id and str(citymail_id).strip():
        return Carrier.CITYMAIL
    if postnord_id and str(postnord_id).strip():
        return Carrier.POSTNORD

    if is_citymail_number(primary_tracking_number):
        return Carrier.CITYMAIL
    if is_postnord_number(primary_tracking_number):
        return Carrier.POSTNORD

    return Carrier.UNKNOWN
