from typing import Any, Dict, List

GENDERS = {"male", "female", "other"}
GENDER_PREFERENCES = GENDERS | {"any"}
LISTING_TYPES = {"long_term", "pg", "flatmate", "short_stay", "emergency"}
REQUEST_TYPES = {"normal", "emergency"}

SEEKER_REQUIRED_STR_FIELDS = ["city", "gender"]
SEEKER_OPTIONAL_STR_FIELDS = ["home_district", "college", "company"]
CANDIDATE_REQUIRED_STR_FIELDS = ["city"]
CANDIDATE_OPTIONAL_STR_FIELDS = [
    "location",
    "poster_college",
    "poster_company",
    "poster_home_district",
]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def validate_coordinates(latitude: float, longitude: float) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def _check_strings(data: Dict[str, Any], required: List[str], optional: List[str]) -> List[str]:
    errors: List[str] = []
    for f in required:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
    for f in optional:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")
    return errors


def validate_seeker(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a seeker profile
    document. Empty list means valid.
    """
    errors = _check_strings(data, SEEKER_REQUIRED_STR_FIELDS, SEEKER_OPTIONAL_STR_FIELDS)

    gender = data.get("gender")
    if _is_non_empty_str(gender) and gender.strip().lower() not in GENDERS:
        errors.append(f"Field 'gender' must be one of: {', '.join(sorted(GENDERS))}")

    return errors


def validate_candidate(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a listing or room
    request document. Empty list means valid.
    """
    errors = _check_strings(data, CANDIDATE_REQUIRED_STR_FIELDS, CANDIDATE_OPTIONAL_STR_FIELDS)

    # Gender preference lives at the top level on listings, nested on requests
    prefs = data.get("preferences")
    pref = data.get("gender_preference")
    if pref is None and isinstance(prefs, dict):
        pref = prefs.get("gender_preference")
    if pref is not None:
        if not isinstance(pref, str) or pref.strip().lower() not in GENDER_PREFERENCES:
            errors.append(
                f"Gender preference must be one of: {', '.join(sorted(GENDER_PREFERENCES))}"
            )

    listing_type = data.get("listing_type")
    if listing_type is not None and listing_type not in LISTING_TYPES:
        errors.append(f"Unknown listing_type: {listing_type}")
    request_type = data.get("request_type")
    if request_type is not None and request_type not in REQUEST_TYPES:
        errors.append(f"Unknown request_type: {request_type}")

    lat = data.get("latitude")
    lon = data.get("longitude")
    if lat is not None or lon is not None:
        if not (_is_number(lat) and _is_number(lon)):
            errors.append("Fields 'latitude' and 'longitude' must both be numbers if provided")
        elif not validate_coordinates(lat, lon):
            errors.append("Coordinates out of range (latitude -90..90, longitude -180..180)")

    return errors
