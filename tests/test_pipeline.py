import json

import pytest

from tripfare.errors import OfferFileError
from tripfare.models import FlightOffer
from tripfare.pipeline import main_cli, run_batch
from tripfare.processing.offers import OfferProcessor

OFFERS = [
    {
        "airline": "Ryanair",
        "flight_number": "FR1234",
        "departure_date": "2025-03-01",
        "departure": "2025-03-01T06:00:00Z",
        "duration": "2h 30m",
    },
    {
        "airline": "Emirates",
        "flight_number": "EK72",
        "departure_date": "2025-03-01",
        "departure": "2025-03-01T22:00:00Z",
        "arrival": "2025-03-01T20:00:00Z",
        "duration": "PT8H00M",
        "fare_tier": "basic",
        "cabin_class": "BUSINESS",
    },
    {
        "airline": "UnknownAir",
        "departure_date": "2025-03-04",
    },
]


@pytest.fixture
def offers_file(tmp_path):
    path = tmp_path / "offers.json"
    path.write_text(json.dumps(OFFERS), encoding="utf-8")
    return path


def test_process_offer():
    report = OfferProcessor().process_offer(FlightOffer(
        airline="Ryanair",
        departure_date="2025-03-01",
        departure="2025-03-01T06:00:00Z",
        duration="2h 30m",
    ))
    assert report.times.arrival_time == "08:30"
    assert report.times.duration_minutes == 150
    assert report.low_cost is True
    assert report.allowance.personal_item is False
    assert report.baggage.checked_text == "Not included"


def test_parse_offers_defaults():
    offers = OfferProcessor.parse_offers(OFFERS)
    assert offers[0].fare_tier == "basic"
    assert offers[0].cabin_class == "ECONOMY"
    assert offers[2].departure is None


@pytest.mark.parametrize("raw", [
    {"airline": "Ryanair"},
    [{"departure_date": "2025-03-01"}],
    [{"airline": "Ryanair", "departure_date": "2025-03-01", "departure": 1740808800}],
    ["Ryanair"],
])
def test_parse_offers_rejects_malformed_records(raw):
    with pytest.raises(OfferFileError):
        OfferProcessor.parse_offers(raw)


def test_load_offers_unreadable(tmp_path):
    with pytest.raises(OfferFileError):
        OfferProcessor().load_offers(tmp_path / "missing.json")


def test_run_batch_writes_json_and_html(offers_file, tmp_path):
    output = tmp_path / "out.json"
    html = tmp_path / "out.html"
    assert run_batch(offers_file, output, html) == output

    reports = json.loads(output.read_text(encoding="utf-8"))
    assert [r["airline"] for r in reports] == ["Ryanair", "Emirates", "UnknownAir"]
    assert reports[0]["lowCostCarrier"] is True
    emirates = reports[1]
    assert emirates["times"]["arrivalDate"] == "2025-03-02"
    assert emirates["times"]["durationMinutes"] == 480
    assert emirates["baggage"]["checked"] == {"pieces": 2, "weightKg": 40, "included": True}
    assert emirates["baggageText"]["checked"] == "2 suitcases of 40 kg"
    assert reports[2]["times"]["duration"] == "N/A"

    rendered = html.read_text(encoding="utf-8")
    assert "FR1234" in rendered
    assert "2 suitcases of 40 kg" in rendered
    assert "low-cost" in rendered


def test_cli_reconcile(capsys):
    code = main_cli([
        "reconcile",
        "--departure", "2025-03-01T22:00:00Z",
        "--arrival", "2025-03-01T20:00:00Z",
        "--duration", "PT8H00M",
        "--date", "2025-03-01",
    ])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["arrivalTime"] == "06:00"
    assert payload["isNextDay"] is True


def test_cli_baggage(capsys):
    assert main_cli(["baggage", "Emirates", "--fare-tier", "BASIC", "--cabin-class", "economy"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["allowance"]["checked"] == {"pieces": 1, "weightKg": 30, "included": True}
    assert payload["lowCostCarrier"] is False


def test_cli_baggage_with_policy_file(capsys, tmp_path):
    policies = tmp_path / "policies.json"
    policies.write_text(json.dumps({
        "defaults": {"basic": {"ECONOMY": {
            "cabin": {"pieces": 1, "weight_kg": 5, "description": "Cabin bag"},
            "checked": {"pieces": 0, "weight_kg": 0, "included": False},
            "personal_item": False,
        }}},
        "low_cost_carriers": ["Acme"],
    }), encoding="utf-8")
    assert main_cli(["baggage", "Acme", "--policies", str(policies)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["cabin"] == "1 Cabin bag (5 kg)"
    assert payload["personalItem"] is None
    assert payload["lowCostCarrier"] is True


def test_cli_batch(offers_file, tmp_path):
    output = tmp_path / "report.json"
    assert main_cli(["batch", str(offers_file), "--output", str(output)]) == 0
    assert len(json.loads(output.read_text(encoding="utf-8"))) == len(OFFERS)


def test_cli_batch_failure_returns_1(tmp_path):
    assert main_cli(["batch", str(tmp_path / "missing.json"), "--output", str(tmp_path / "out.json")]) == 1
