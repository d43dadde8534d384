import json
from datetime import timedelta

import lockerhub.api.client as client_mod
import lockerhub.cli as cli
from factories import booking_payload, business_payload
from lockerhub.core.time import utcnow


def _setup(monkeypatch, settings, tmp_path, routes):
    configured = settings.model_copy(
        update={"session": settings.session.model_copy(update={"path": str(tmp_path / "session.json")})}
    )
    monkeypatch.setattr(cli, "get_settings", lambda: configured)

    async def fake_request_json(method, url, *, params=None, json=None, headers=None, timeout_seconds=10):
        return routes[(method, url.removeprefix("https://api.test"))]

    monkeypatch.setattr(client_mod, "request_json", fake_request_json)


def test_search_by_zip_outputs_json(monkeypatch, settings, tmp_path, capsys):
    _setup(
        monkeypatch,
        settings,
        tmp_path,
        {("GET", "/businesses/search"): [business_payload("b1", lat=33.7729, lon=-84.3627)]},
    )

    assert cli.main(["search", "--zip", "30309", "--json"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out[0]["_id"] == "b1"
    assert out[0]["location"]["coordinates"] == [-84.3627, 33.7729]


def test_invalid_zip_is_rejected_before_any_request(monkeypatch, settings, tmp_path, capsys):
    _setup(monkeypatch, settings, tmp_path, {})

    assert cli.main(["search", "--zip", "abc"]) == 1
    assert "Invalid input" in capsys.readouterr().out


def test_region_for_debug_zip(monkeypatch, settings, tmp_path, capsys):
    _setup(
        monkeypatch,
        settings,
        tmp_path,
        {("GET", "/businesses/nearby"): [business_payload("b1", lat=33.7729, lon=-84.3627)]},
    )

    assert cli.main(["region", "--zip", "30068", "--json"]) == 0

    region = json.loads(capsys.readouterr().out)
    assert round(region["latitude"], 4) == 33.8578
    assert round(region["latitudeDelta"], 4) == 0.4245
    assert region["markers"] == 2


def test_cancel_refused_inside_cutoff(monkeypatch, settings, tmp_path, capsys):
    soon = utcnow() + timedelta(minutes=10)
    _setup(monkeypatch, settings, tmp_path, {("GET", "/bookings/k1"): booking_payload("k1", start=soon)})

    assert cli.main(["cancel", "k1"]) == 1
    assert "can no longer be cancelled" in capsys.readouterr().out


def test_debug_zip_search_runs_nearby_search(monkeypatch, settings, tmp_path, capsys):
    _setup(
        monkeypatch,
        settings,
        tmp_path,
        {("GET", "/businesses/nearby"): [business_payload("b1", lat=33.9400, lon=-84.4400)]},
    )

    assert cli.main(["search", "--zip", "30068", "--json"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out[0]["_id"] == "b1"
    assert out[0]["distanceKm"] < 1


def test_malformed_booking_time_is_rejected(monkeypatch, settings, tmp_path, capsys):
    _setup(monkeypatch, settings, tmp_path, {})

    assert cli.main(["book", "--business-id", "b1", "--start", "tomorrow", "--hours", "2"]) == 1
    assert "Invalid input: Invalid start time 'tomorrow'" in capsys.readouterr().out

    assert cli.main(["book", "--business-id", "b1", "--start", "2030-01-01T10:00", "--end", "later"]) == 1
    assert "Invalid end time 'later'" in capsys.readouterr().out
