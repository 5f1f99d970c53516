"""
Plain records passed between the data-access layer and the matching core.

Input records are built from the snake_case documents the application
stores (``from_document``); the scorer itself only ever sees these
already-resolved values and never fetches anything.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .schema import validate_coordinates


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


def _opt_str(doc: Dict[str, Any], *keys: str) -> Optional[str]:
    for k in keys:
        v = doc.get(k)
        if isinstance(v, str) and v.strip():
            return v
    return None


def _opt_float(v: Any) -> Optional[float]:
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return float(v)


@dataclass(frozen=True)
class SeekerProfile:
    city: str = ""
    home_district: str = ""
    college: Optional[str] = None
    company: Optional[str] = None
    gender: str = ""

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "SeekerProfile":
        return cls(
            city=_opt_str(doc, "city") or "",
            home_district=_opt_str(doc, "home_district", "homeDistrict") or "",
            college=_opt_str(doc, "college"),
            company=_opt_str(doc, "company"),
            gender=_opt_str(doc, "gender") or "",
        )


@dataclass(frozen=True)
class MatchCandidate:
    """
    A listing or room request as seen by the scorer.

    ``gender_preference`` is already resolved from whichever field the
    variant carries; ``None`` means no preference was stated.
    """

    city: str = ""
    location: str = ""
    gender_preference: Optional[str] = None
    poster_college: Optional[str] = None
    poster_company: Optional[str] = None
    poster_home_district: Optional[str] = None
    candidate_id: Optional[str] = None
    kind: str = "listing"
    category: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Known coordinates, or None. A zero latitude means not geocoded."""
        if self.latitude is None or self.longitude is None or self.latitude == 0:
            return None
        if not validate_coordinates(self.latitude, self.longitude):
            return None
        return Coordinates(self.latitude, self.longitude)

    @classmethod
    def from_document(
        cls,
        doc: Dict[str, Any],
        kind: Optional[str] = None,
        candidate_id: Optional[str] = None,
    ) -> "MatchCandidate":
        prefs = doc.get("preferences")
        if kind is None:
            kind = "request" if ("request_id" in doc or isinstance(prefs, dict)) else "listing"

        if kind == "request":
            gender_pref = _opt_str(prefs, "gender_preference", "genderPreference") if isinstance(prefs, dict) else None
            category = _opt_str(doc, "request_type")
            doc_id = _opt_str(doc, "request_id")
        else:
            gender_pref = _opt_str(doc, "gender_preference", "genderPreference")
            category = _opt_str(doc, "listing_type")
            doc_id = _opt_str(doc, "listing_id")

        return cls(
            city=_opt_str(doc, "city") or "",
            location=_opt_str(doc, "location") or "",
            gender_preference=gender_pref,
            poster_college=_opt_str(doc, "poster_college", "posterCollegeHint"),
            poster_company=_opt_str(doc, "poster_company", "posterCompanyHint"),
            poster_home_district=_opt_str(doc, "poster_home_district", "posterHomeDistrictHint"),
            candidate_id=candidate_id or doc_id,
            kind=kind,
            category=category,
            latitude=_opt_float(doc.get("latitude")),
            longitude=_opt_float(doc.get("longitude")),
        )


@dataclass(frozen=True)
class MatchResult:
    score: int
    label: str
    color: str
    details: Tuple[str, ...] = ()
