"""Tests for shiptrack.cli"""

import io
import json

from shiptrack.cli import main


class TestCli:

    def test_prints_normalized_result(self, tmp_path, ship24_response, capsys):
        response_file = tmp_path / "response.json"
        response_file.write_text(json.dumps(ship24_response), encoding="utf-8")

        code = main([str(response_file), "--value", "ABC123456789"])

        assert code == 0
        body = json.loads(capsys.readouterr().out)
        assert body["ok"] is True
        assert body["carrier_detected"] == "postnord"
        assert body["postnord_number"] == "UJ123456789SE"

    def test_reads_stdin(self, ship24_response, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(ship24_response)))
        assert main(["-"]) == 0
        assert json.loads(capsys.readouterr().out)["ok"] is True

    def test_custom_rules(self, tmp_path, ship24_response, capsys):
        rules = tmp_path / "rules.csv"
        rules.write_text(
            "carrier,priority,match_type,match_value,eta_min_business_days,eta_max_business_days\n"
            "postnord,1,regex,in\\s+transit,4,6\n",
            encoding="utf-8",
        )
        response_file = tmp_path / "response.json"
        response_file.write_text(json.dumps(ship24_response), encoding="utf-8")

        assert main([str(response_file), "--rules", str(rules)]) == 0
        body = json.loads(capsys.readouterr().out)
        assert body["estimated_delivery"] == "4–6 business days"

    def test_no_tracking(self, tmp_path, capsys):
        response_file = tmp_path / "response.json"
        response_file.write_text('{"data": {"trackings": []}}', encoding="utf-8")

        assert main([str(response_file)]) == 1
        assert json.loads(capsys.readouterr().out)["ok"] is False

    def test_unreadable_rules(self, tmp_path, ship24_response):
        response_file = tmp_path / "response.json"
        response_file.write_text(json.dumps(ship24_response), encoding="utf-8")

        assert main([str(response_file), "--rules", str(tmp_path / "missing.csv")]) == 2

    def test_malformed_response_file(self, tmp_path, caplog, capsys):
        response_file = tmp_path / "response.json"
        response_file.write_text("{not json", encoding="utf-8")

        assert main([str(response_file)]) == 1
        assert "Cannot read provider response" in caplog.text
        assert capsys.readouterr().out == ""

    def test_missing_response_file(self, tmp_path, caplog):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "missing.json" in caplog.text
