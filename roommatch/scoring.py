"""
Compatibility scoring between a seeker and a listing or room request.

Responsibilities:
- Compute a deterministic 0-100 score from additive criteria.
- Emit the human-readable reasons behind the score, in evaluation order.

Non-Responsibilities:
- No data fetching (poster hints arrive already resolved).
- No filtering; a conflicting gender preference only withholds points.
- No distance; proximity is a separate ranking signal.

Invariant:
Given identical inputs, this module must always return
the same score, tier and details.
"""

from typing import List, Tuple

from .models import MatchCandidate, MatchResult, SeekerProfile
from .normalize import normalize_gender, normalize_text, overlaps, same_text

SAME_CITY_POINTS = 40
NEARBY_AREA_POINTS = 20
SAME_HOMETOWN_POINTS = 20
SAME_INSTITUTION_POINTS = 20
GENDER_MATCH_POINTS = 20

MIN_SCORE = 0
MAX_SCORE = 100

# (minimum score, label, color), highest band first
TIERS = (
    (70, "Excellent", "green"),
    (45, "Good", "yellow"),
    (20, "Fair", "orange"),
)
LOW_TIER = ("Low", "gray")


def match_tier(score: int) -> Tuple[str, str]:
    """Return (label, color) for a clamped score."""
    for threshold, label, color in TIERS:
        if score >= threshold:
            return label, color
    return LOW_TIER


def _location_points(seeker: SeekerProfile, candidate: MatchCandidate, details: List[str]) -> int:
    if same_text(seeker.city, candidate.city):
        details.append("Same city")
        return SAME_CITY_POINTS
    if overlaps(seeker.city, candidate.location):
        details.append("Nearby area")
        return NEARBY_AREA_POINTS
    return 0


def _hometown_points(seeker: SeekerProfile, candidate: MatchCandidate, details: List[str]) -> int:
    if same_text(seeker.home_district, candidate.poster_home_district):
        details.append("Same hometown")
        return SAME_HOMETOWN_POINTS
    return 0


def _institution_points(seeker: SeekerProfile, candidate: MatchCandidate, details: List[str]) -> int:
    # A profile is either student or professional; college wins if both are set
    if normalize_text(seeker.college):
        if same_text(seeker.college, candidate.poster_college):
            details.append("Same college")
            return SAME_INSTITUTION_POINTS
        return 0
    if same_text(seeker.company, candidate.poster_company):
        details.append("Same company")
        return SAME_INSTITUTION_POINTS
    return 0


def _gender_points(seeker: SeekerProfile, candidate: MatchCandidate, details: List[str]) -> int:
    preference = normalize_gender(candidate.gender_preference)
    if preference == "any" or preference == normalize_text(seeker.gender):
        details.append("Gender preference matches")
        return GENDER_MATCH_POINTS
    return 0


CRITERIA = (_location_points, _hometown_points, _institution_points, _gender_points)


def compute_match_score(seeker: SeekerProfile, candidate: MatchCandidate) -> MatchResult:
    details: List[str] = []
    points = sum(criterion(seeker, candidate, details) for criterion in CRITERIA)
    score = max(MIN_SCORE, min(MAX_SCORE, int(points)))
    label, color = match_tier(score)
    return MatchResult(score=score, label=label, color=color, details=tuple(details))
