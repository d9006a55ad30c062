"""Shared fixtures: a Ship24-style response and a small rule table."""

import copy

import pytest

from shiptrack.eta import EtaEstimator, InlineRuleSource, RuleStore


RULE_HEADER = [
    "carrier", "priority", "match_type", "match_value",
    "eta_min_business_days", "eta_max_business_days", "eta_label", "note",
]

RULE_ROWS = [
    ["postnord", "10", "contains", "levererad", "0", "0", "Delivered", ""],
    ["postnord", "20", "contains", "transit", "1", "3", "", "Moving between terminals"],
    ["postnord", "30", "regex", "^sorterad", "1", "2", "", ""],
    ["citymail", "10", "equals", "Out for delivery", "0", "0", "Today", ""],
    ["citymail", "20", "contains", "sorted", "1", "2", "", ""],
]


SHIP24_RESPONSE = {
    "data": {
        "trackings": [
            {
                "tracker": {
                    "trackerId": "8f3c0b5e-1111-2222-3333-444455556666",
                    "trackingNumber": "ABC123456789",
                    "clientTrackerId": "ORDER-1001",
                    "statusMilestone": "in_transit",
                    "trackingNumbers": [{"tn": "ABC123456789"}],
                },
                "shipment": {
                    "shipmentId": "2a7d4c1e-aaaa-bbbb-cccc-ddddeeeeffff",
                    "statusMilestone": "in_transit",
                    "trackingNumbers": [
                        {"tn": "ABC123456789"},
                        {"tn": "UJ123456789SE"},
                    ],
                },
                "events": [
                    {
                        "datetime": "2024-03-01T08:00:00Z",
                        "status": "Electronic information received",
                        "location": "Stockholm",
                        "courierCode": "postnord",
                        "statusCode": "info_received",
                    },
                    {
                        "datetime": "2024-03-02T14:30:00Z",
                        "status": "Parcel is in transit",
                        "location": "Jönköping",
                        "courierCode": "postnord",
                        "statusCode": "in_transit",
                    },
                    {
                        "datetime": "2024-03-01T18:15:00Z",
                        "status": "Sorterad på terminal",
                        "location": "Rosersberg",
                        "courierCode": "postnord",
                    },
                ],
                "metadata": {"generatedAt": "2024-03-02T15:00:00Z"},
            }
        ]
    }
}


@pytest.fixture
def rule_rows():
    return [list(RULE_HEADER)] + [list(r) for r in RULE_ROWS]


@pytest.fixture
def rule_store(rule_rows):
    return RuleStore(InlineRuleSource(rule_rows))


@pytest.fixture
def estimator(rule_store):
    return EtaEstimator(rule_store)


@pytest.fixture
def ship24_response():
    return copy.deepcopy(SHIP24_RESPONSE)


@pytest.fixture
def tracking(ship24_response):
    return ship24_response["data"]["trackings"][0]
