"""
Tracking providers - Fetch raw tracking data
"""

from .ship24 import Ship24Provider, MODE_ORDER, MODE_TRACKING

__all__ = [
    "Ship24Provider",
    "MODE_ORDER",
    "MODE_TRACKING",
]
