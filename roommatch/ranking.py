"""
Ordering and grouping of scored candidates for the browse views.

Distance never changes a match score; it only adds a sort boost for
candidates close to the seeker and breaks ties between equal totals.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .geo import NEARBY_RADIUS_KM, compute_distance_km, proximity_boost
from .models import Coordinates, MatchCandidate, MatchResult, SeekerProfile
from .normalize import normalize_text
from .scoring import compute_match_score

BEST_MATCH_THRESHOLD = 70

SECTIONS = ("emergency", "nearby", "best_matches", "same_college", "same_hometown")


@dataclass(frozen=True)
class RankedCandidate:
    candidate: MatchCandidate
    match: MatchResult
    distance_km: Optional[float] = None
    boost: int = 0

    @property
    def total(self) -> int:
        return self.match.score + self.boost


def distance_to(origin: Optional[Coordinates], candidate: MatchCandidate) -> Optional[float]:
    """Distance from origin to the candidate, or None if either side is unknown."""
    target = candidate.coordinates
    if origin is None or target is None:
        return None
    return compute_distance_km(origin.latitude, origin.longitude, target.latitude, target.longitude)


def score_candidates(
    seeker: SeekerProfile,
    candidates: Iterable[MatchCandidate],
    origin: Optional[Coordinates] = None,
) -> List[RankedCandidate]:
    """Score every candidate, keeping input order."""
    ranked = []
    for candidate in candidates:
        distance = distance_to(origin, candidate)
        ranked.append(
            RankedCandidate(
                candidate=candidate,
                match=compute_match_score(seeker, candidate),
                distance_km=distance,
                boost=proximity_boost(distance),
            )
        )
    return ranked


def _sort_key(item: RankedCandidate):
    distance = item.distance_km if item.distance_km is not None else math.inf
    return (-item.total, distance)


def rank_candidates(
    seeker: SeekerProfile,
    candidates: Iterable[MatchCandidate],
    origin: Optional[Coordinates] = None,
) -> List[RankedCandidate]:
    """Best first: score plus proximity boost, then nearest, then input order."""
    return sorted(score_candidates(seeker, candidates, origin), key=_sort_key)


def _mentions(candidate: MatchCandidate, needle: Optional[str]) -> bool:
    needle = normalize_text(needle)
    if not needle:
        return False
    place = normalize_text(" ".join(p for p in (candidate.location, candidate.city) if isinstance(p, str)))
    if not place:
        return False
    return needle in place or place.split()[0] in needle


def _section_for(seeker: SeekerProfile, item: RankedCandidate) -> Optional[str]:
    candidate = item.candidate
    if normalize_text(candidate.category) == "emergency":
        return "emergency"
    if item.distance_km is not None and item.distance_km < NEARBY_RADIUS_KM:
        return "nearby"
    if item.match.score >= BEST_MATCH_THRESHOLD:
        return "best_matches"
    if _mentions(candidate, seeker.college):
        return "same_college"
    if _mentions(candidate, seeker.home_district):
        return "same_hometown"
    return None


def categorize_candidates(
    seeker: SeekerProfile,
    candidates: Iterable[MatchCandidate],
    origin: Optional[Coordinates] = None,
) -> Dict[str, List[RankedCandidate]]:
    """
    Group candidates into browse sections.

    Each candidate lands in the first section it qualifies for (in
    SECTIONS order) and nowhere else. Sections are sorted by score,
    highest first; every section key is always present.
    """
    sections: Dict[str, List[RankedCandidate]] = {name: [] for name in SECTIONS}
    for item in score_candidates(seeker, candidates, origin):
        name = _section_for(seeker, item)
        if name is not None:
            sections[name].append(item)

    for name in SECTIONS:
        sections[name].sort(key=lambda item: -item.match.score)
    return sections
