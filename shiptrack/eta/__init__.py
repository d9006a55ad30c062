"""
ETA estimation - Rule table and delivery window estimation
"""

from .rules import (
    RuleStore,
    CsvRuleSource,
    InlineRuleSource,
    ConfigLoadError,
    MalformedRuleRow,
)
from .matching import matches_rule
from .estimator import EtaEstimator, format_business_days

__all__ = [
    "RuleStore",
    "CsvRuleSource",
    "InlineRuleSource",
    "ConfigLoadError",
    "MalformedRuleRow",
    "matches_rule",
    "EtaEstimator",
    "format_business_days",
]
