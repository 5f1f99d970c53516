"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from roommatch.logger import get_logger, reset_logger
from roommatch.models import MatchCandidate, SeekerProfile


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger to a temp dir so tests never write to ./logs."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload: Any = None, status_code: int = 200, json_error: bool = False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.json_error:
            raise ValueError("No JSON object could be decoded")
        return self.payload


class FakeSession:
    """
    Records GET calls and answers from a list of canned responses or
    exceptions, or from a callable taking the request params.
    """

    def __init__(self, responses: Optional[List[Any]] = None, handler=None):
        self.responses = list(responses or [])
        self.handler = handler
        self.calls: List[Dict[str, Any]] = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.handler is not None:
            outcome = self.handler(params or {})
        else:
            outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def google_ok(lat: float, lng: float) -> FakeResponse:
    return FakeResponse({
        "status": "OK",
        "results": [{"geometry": {"location": {"lat": lat, "lng": lng}}}],
    })


def google_status(status: str, message: str = "") -> FakeResponse:
    payload = {"status": status, "results": []}
    if message:
        payload["error_message"] = message
    return FakeResponse(payload)


@pytest.fixture
def fake_session_factory():
    return FakeSession


@pytest.fixture
def fake_response_factory():
    return FakeResponse


@pytest.fixture
def google_responses():
    """(ok, status) builders for canned Geocoding API payloads."""
    return google_ok, google_status


@pytest.fixture
def student_seeker() -> SeekerProfile:
    return SeekerProfile(
        city="Mumbai",
        home_district="Jaipur",
        college="IIT Mumbai",
        gender="male",
    )


@pytest.fixture
def professional_seeker() -> SeekerProfile:
    return SeekerProfile(
        city="Bengaluru",
        home_district="Kochi",
        company="Infosys",
        gender="female",
    )


@pytest.fixture
def perfect_candidate() -> MatchCandidate:
    """Listing that satisfies every criterion for student_seeker."""
    return MatchCandidate(
        city="Mumbai",
        location="Powai",
        gender_preference="any",
        poster_college="IIT Mumbai",
        poster_home_district="Jaipur",
    )


@pytest.fixture
def listing_document() -> Dict[str, Any]:
    return {
        "listing_id": "lst-1",
        "poster_id": "user-9",
        "title": "2BHK near campus",
        "city": "Mumbai",
        "location": "Powai",
        "listing_type": "flatmate",
        "gender_preference": "male",
        "rent_amount": 15000,
        "latitude": 19.1176,
        "longitude": 72.9060,
        "poster_college": "IIT Mumbai",
    }


@pytest.fixture
def request_document() -> Dict[str, Any]:
    return {
        "request_id": "req-1",
        "searcher_id": "user-3",
        "city": "Pune",
        "location": "Kothrud",
        "request_type": "emergency",
        "budget_min": 5000,
        "budget_max": 9000,
        "preferences": {"gender_preference": "female"},
    }


@pytest.fixture
def populated_store(tmp_path, listing_document, request_document) -> Path:
    """Create a store with one listing and one request."""
    store_file = tmp_path / "store.json"
    data = {
        "listings": {"lst-1": listing_document},
        "requests": {"req-1": request_document},
    }
    store_file.write_text(json.dumps(data, indent=2))
    return store_file
