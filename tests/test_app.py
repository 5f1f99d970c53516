"""
Tests for the command line interface.
"""

import json

import pytest
import requests

from roommatch import __version__
from roommatch.app import main
from roommatch.storage import load_store


@pytest.fixture(autouse=True)
def clean_env(tmp_path, monkeypatch):
    """Run from an empty directory with no geocoding settings in the environment."""
    monkeypatch.chdir(tmp_path)
    for var in ("GOOGLE_MAPS_API_KEY", "ROOMMATCH_DEVICE_LAT", "ROOMMATCH_DEVICE_LON", "ROOMMATCH_GEOCODE_DELAY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def seeker_file(tmp_path):
    path = tmp_path / "seeker.json"
    path.write_text(json.dumps({
        "city": "Mumbai",
        "home_district": "Jaipur",
        "college": "IIT Mumbai",
        "gender": "male",
    }))
    return path


@pytest.fixture
def fake_http(monkeypatch, fake_session_factory):
    """Install a fake requests.Session and return it."""
    def _install(responses):
        session = fake_session_factory(responses)
        monkeypatch.setattr(requests, "Session", lambda: session)
        return session
    return _install


class TestVersion:

    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__


class TestDistance:

    def test_prints_distance(self, capsys):
        main(["distance", "19.0760", "72.8777", "28.6139", "77.2090"])
        assert capsys.readouterr().out.strip() == "1148.1 km"

    def test_rejects_out_of_range(self):
        with pytest.raises(SystemExit):
            main(["distance", "91", "0", "0", "0"])


class TestScore:

    def test_scores_candidate(self, tmp_path, seeker_file, capsys):
        candidate = tmp_path / "listing.json"
        candidate.write_text(json.dumps({
            "listing_id": "l1",
            "city": "Mumbai",
            "location": "Powai",
            "gender_preference": "any",
            "poster_college": "IIT Mumbai",
            "poster_home_district": "Jaipur",
        }))

        main(["score", "--seeker", str(seeker_file), "--candidate", str(candidate)])

        out = capsys.readouterr().out
        assert "Score: 100%" in out
        assert "Tier: Excellent (green)" in out
        assert " - Same college" in out

    def test_missing_input(self, seeker_file):
        with pytest.raises(SystemExit, match="Input file not found"):
            main(["score", "--seeker", str(seeker_file), "--candidate", "nope.json"])


class TestRank:

    def test_ranks_store(self, seeker_file, populated_store, capsys):
        main(["rank", "--seeker", str(seeker_file), "--store", str(populated_store)])

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2
        assert "lst-1" in lines[0]
        assert "req-1" in lines[1]

    def test_ranks_with_origin(self, seeker_file, populated_store, capsys):
        main([
            "rank", "--seeker", str(seeker_file), "--store", str(populated_store),
            "--lat", "19.0760", "--lon", "72.8777",
        ])
        assert "5.5 km away" in capsys.readouterr().out

    def test_here_uses_configured_location(self, seeker_file, populated_store, monkeypatch, capsys):
        monkeypatch.setenv("ROOMMATCH_DEVICE_LAT", "19.0760")
        monkeypatch.setenv("ROOMMATCH_DEVICE_LON", "72.8777")
        main(["rank", "--seeker", str(seeker_file), "--store", str(populated_store), "--here"])
        assert "5.5 km away" in capsys.readouterr().out

    def test_here_without_location(self, seeker_file, populated_store, capsys):
        main(["rank", "--seeker", str(seeker_file), "--store", str(populated_store), "--here"])
        out = capsys.readouterr().out
        assert "Current location unavailable" in out
        assert "km away" not in out

    def test_sections(self, seeker_file, populated_store, capsys):
        main(["rank", "--seeker", str(seeker_file), "--store", str(populated_store), "--sections"])
        out = capsys.readouterr().out
        assert "== Emergency (1)" in out
        assert "req-1" in out

    def test_missing_store(self, seeker_file):
        with pytest.raises(SystemExit, match="Store not found"):
            main(["rank", "--seeker", str(seeker_file), "--store", "missing.json"])


class TestValidate:

    def test_valid_candidate(self, tmp_path, listing_document, capsys):
        path = tmp_path / "listing.json"
        path.write_text(json.dumps(listing_document))
        main(["validate", "--input", str(path)])
        assert capsys.readouterr().out.strip() == "Valid"

    def test_invalid_seeker(self, tmp_path, capsys):
        path = tmp_path / "seeker.json"
        path.write_text(json.dumps({"city": "Pune", "gender": "robot"}))
        with pytest.raises(SystemExit) as exc:
            main(["validate", "--input", str(path), "--kind", "seeker"])
        assert exc.value.code == 2
        assert "Invalid:" in capsys.readouterr().out


class TestGeocode:

    def test_requires_api_key(self):
        with pytest.raises(SystemExit, match="GOOGLE_MAPS_API_KEY"):
            main(["geocode", "--address", "Powai, Mumbai"])

    def test_prints_coordinates(self, monkeypatch, fake_http, google_responses, capsys):
        google_ok, _ = google_responses
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "k")
        fake_http([google_ok(19.1176, 72.906)])

        main(["geocode", "--address", "Powai, Mumbai"])

        assert capsys.readouterr().out.strip() == "19.1176, 72.906"

    def test_no_match_exits_nonzero(self, monkeypatch, fake_http, google_responses):
        _, google_status = google_responses
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "k")
        fake_http([google_status("ZERO_RESULTS")])

        with pytest.raises(SystemExit) as exc:
            main(["geocode", "--address", "asdfghjkl"])
        assert exc.value.code == 1

    def test_geocode_store(self, populated_store, monkeypatch, fake_http, google_responses, capsys):
        google_ok, _ = google_responses
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "k")
        session = fake_http([google_ok(18.5074, 73.8077)])

        main(["geocode-store", "--store", str(populated_store), "--delay", "0"])

        assert "success=1 failed=0 skipped=1" in capsys.readouterr().out
        assert session.calls[0]["params"]["address"] == "Kothrud, Pune, India"
        stored = load_store(populated_store)["requests"]["req-1"]
        assert (stored["latitude"], stored["longitude"]) == (18.5074, 73.8077)
