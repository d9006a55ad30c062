"""Tests for shiptrack.shipment.identifiers"""

import re

from shiptrack.models import (
    RawTrackingIdentifier,
    TrackingEvent,
    TrackingSection,
    TrackingSnapshot,
)
from shiptrack.shipment.identifiers import (
    extract_identifiers,
    find_carrier_identifiers,
    is_citymail_number,
    is_postnord_label,
    is_postnord_number,
    pick_citymail_number,
    pick_postnord_number,
    scan_for_pattern,
)
from shiptrack.shipment.response import normalize_response, normalize_tracking


def _ids(*values):
    return [RawTrackingIdentifier(value=v) for v in values]


# =========================================================================
# Format checks
# =========================================================================


class TestFormats:

    def test_postnord_label(self):
        assert is_postnord_label("UJ123456789SE")
        assert is_postnord_label(" uj123456789se ")
        assert not is_postnord_label("00370712345678901")

    def test_postnord_number(self):
        assert is_postnord_number("UJ123456789SE")
        assert is_postnord_number("00370712345678901")
        assert not is_postnord_number("BC12345678CN")
        assert not is_postnord_number(None)

    def test_citymail_number(self):
        assert is_citymail_number("BC12345678CN")
        assert is_citymail_number("bc123456cn")
        assert not is_citymail_number("BC12CN")
        assert not is_citymail_number("UJ123456789SE")
        assert not is_citymail_number("")


# =========================================================================
# extract_identifiers
# =========================================================================


class TestExtractIdentifiers:

    def test_scan_order_and_dedup(self):
        snapshot = TrackingSnapshot(
            tracker=TrackingSection(tracking_number="T-NUM", identifiers=_ids("T-LIST", "S-LIST")),
            shipment=TrackingSection(tracking_number="S-NUM", identifiers=_ids("S-LIST", " T-NUM ")),
            events=[
                TrackingEvent(tracking_number="E-NUM", courier_code="postnord"),
                TrackingEvent(tracking_number="S-NUM"),
                TrackingEvent(status="no number"),
            ],
        )
        identifiers = extract_identifiers(snapshot)

        assert [i.value for i in identifiers] == ["S-LIST", "T-NUM", "T-LIST", "S-NUM", "E-NUM"]
        assert identifiers[-1].courier_code == "postnord"

    def test_keeps_courier_metadata(self):
        snapshot = TrackingSnapshot(
            shipment=TrackingSection(identifiers=[
                RawTrackingIdentifier(value="BC12345678CN", courier_code="citymail", courier_name="CityMail"),
            ]),
        )
        assert extract_identifiers(snapshot)[0].courier_name == "CityMail"

    def test_empty_snapshot(self):
        assert extract_identifiers(TrackingSnapshot()) == []


# =========================================================================
# Picking per carrier
# =========================================================================


class TestPickNumbers:

    def test_postnord_prefers_label_over_003(self):
        values = ["00370712345678901", "UJ123456789SE"]
        assert pick_postnord_number(values) == "UJ123456789SE"

    def test_postnord_falls_back_to_003(self):
        assert pick_postnord_number(["X", "00370712345678901"]) == "00370712345678901"

    def test_citymail_first_match(self):
        assert pick_citymail_number(["UJ1SE", "BC11111111CN", "BC22222222CN"]) == "BC11111111CN"

    def test_none_found(self):
        assert pick_postnord_number(["ABC"]) is None
        assert pick_citymail_number(["ABC"]) is None


# =========================================================================
# Raw scan
# =========================================================================


class TestScanForPattern:

    def test_finds_nested_string_in_document_order(self):
        raw = {"a": {"b": ["x", "UJ111SE"]}, "c": "UJ222SE"}
        assert scan_for_pattern(raw, re.compile(r"^UJ[0-9]+SE$")) == "UJ111SE"

    def test_survives_reference_cycles(self):
        raw = {"name": "root"}
        raw["self"] = raw
        child = [raw]
        raw["children"] = child
        assert scan_for_pattern(raw, re.compile(r"^BC")) is None

    def test_ignores_non_string_leaves(self):
        assert scan_for_pattern({"n": 3, "b": True, "x": None}, re.compile(r".")) is None


class TestFindCarrierIdentifiers:

    def test_structured_identifiers(self, tracking):
        found = find_carrier_identifiers(normalize_tracking(tracking))
        assert found.postnord == "UJ123456789SE"
        assert found.citymail is None

    def test_fallback_scans_raw_payload(self):
        tracking = {
            "tracker": {"trackingNumber": "ABC"},
            "events": [{"status": "Handed over", "extra": {"ref": "BC98765432CN"}}],
            "notes": ["00371234567"],
        }
        found = find_carrier_identifiers(normalize_tracking(tracking))
        assert found.citymail == "BC98765432CN"
        assert found.postnord == "00371234567"

    def test_fallback_scans_whole_envelope(self, ship24_response):
        ship24_response["data"]["references"] = {"citymail": "BC55555555CN"}
        found = find_carrier_identifiers(normalize_response(ship24_response))
        assert found.citymail == "BC55555555CN"
        assert found.postnord == "UJ123456789SE"

    def test_structured_match_beats_raw_scan(self):
        tracking = {
            "misc": "UJ999999999SE",
            "shipment": {"trackingNumbers": ["UJ111111111SE"]},
        }
        found = find_carrier_identifiers(normalize_tracking(tracking))
        assert found.postnord == "UJ111111111SE"

    def test_nothing_found(self):
        found = find_carrier_identifiers(normalize_tracking({"tracker": {"trackingNumber": "ABC"}}))
        assert found.postnord is None
        assert found.citymail is None
