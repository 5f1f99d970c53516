import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .batch import geocode_documents
from .config import Settings
from .env import load_env
from .geo import compute_distance_km
from .geocoding import GeocodingClient
from .location import provider_from_settings, resolve_current_device_location
from .logger import get_logger
from .models import Coordinates, MatchCandidate, SeekerProfile
from .ranking import RankedCandidate, SECTIONS, categorize_candidates, rank_candidates
from .schema import validate_candidate, validate_coordinates, validate_seeker
from .scoring import compute_match_score
from .storage import iter_candidates, iter_documents, load_store, save_store


def _read_json(path_str: str) -> Dict[str, Any]:
    path = Path(path_str)
    if not path.exists():
        raise SystemExit(f"Input file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {path}: {e}")
    if not isinstance(data, dict):
        raise SystemExit(f"Expected a JSON object in {path}")
    return data


def _load_seeker(path_str: str) -> SeekerProfile:
    doc = _read_json(path_str)
    errors = validate_seeker(doc)
    if errors:
        # Scoring tolerates gaps; surface them but carry on
        for e in errors:
            print(f"[warn] seeker: {e}")
    return SeekerProfile.from_document(doc)


def _make_client(settings: Settings) -> GeocodingClient:
    try:
        return GeocodingClient.from_settings(settings)
    except ValueError as e:
        raise SystemExit(str(e))


def _format_ranked(item: RankedCandidate) -> str:
    c = item.candidate
    line = f"[{item.match.score:3d}% {item.match.label}] {c.kind} {c.candidate_id or '-'} ({c.location or '-'}, {c.city or '-'})"
    if item.distance_km is not None:
        line += f" {item.distance_km} km away"
    if item.match.details:
        line += " | " + ", ".join(item.match.details)
    return line


def _resolve_origin(args: argparse.Namespace, settings: Settings) -> Optional[Coordinates]:
    if args.lat is not None or args.lon is not None:
        if args.lat is None or args.lon is None:
            raise SystemExit("Pass both --lat and --lon.")
        if not validate_coordinates(args.lat, args.lon):
            raise SystemExit("Coordinates out of range.")
        return Coordinates(args.lat, args.lon)
    if args.here:
        origin = resolve_current_device_location(provider_from_settings(settings, use_ip=args.ip))
        if origin is None:
            print("Current location unavailable; ranking without distance.")
        return origin
    return None


def cmd_distance(args: argparse.Namespace, settings: Settings) -> None:
    for lat, lon in ((args.lat1, args.lon1), (args.lat2, args.lon2)):
        if not validate_coordinates(lat, lon):
            raise SystemExit(f"Coordinates out of range: {lat}, {lon}")
    print(f"{compute_distance_km(args.lat1, args.lon1, args.lat2, args.lon2)} km")


def cmd_score(args: argparse.Namespace, settings: Settings) -> None:
    seeker = _load_seeker(args.seeker)
    candidate = MatchCandidate.from_document(_read_json(args.candidate))
    result = compute_match_score(seeker, candidate)
    print(f"Score: {result.score}%")
    print(f"Tier: {result.label} ({result.color})")
    for d in result.details:
        print(f" - {d}")


def cmd_rank(args: argparse.Namespace, settings: Settings) -> None:
    seeker = _load_seeker(args.seeker)
    store_path = Path(args.store)
    if not store_path.exists():
        raise SystemExit(f"Store not found: {store_path}")
    candidates: List[MatchCandidate] = list(iter_candidates(load_store(store_path)))
    if not candidates:
        print("No listings or requests in store.")
        return
    origin = _resolve_origin(args, settings)

    if args.sections:
        sections = categorize_candidates(seeker, candidates, origin)
        for name in SECTIONS:
            if not sections[name]:
                continue
            print(f"== {name.replace('_', ' ').title()} ({len(sections[name])})")
            for item in sections[name]:
                print(_format_ranked(item))
        return

    ranked = rank_candidates(seeker, candidates, origin)
    if args.limit is not None:
        ranked = ranked[:args.limit]
    for item in ranked:
        print(_format_ranked(item))


def cmd_geocode(args: argparse.Namespace, settings: Settings) -> None:
    client = _make_client(settings)
    coords = client.resolve_forward_geocode(args.address)
    if coords is None:
        print("No match.")
        raise SystemExit(1)
    print(f"{coords.latitude}, {coords.longitude}")


def cmd_geocode_store(args: argparse.Namespace, settings: Settings) -> None:
    store_path = Path(args.store)
    if not store_path.exists():
        raise SystemExit(f"Store not found: {store_path}")
    client = _make_client(settings)
    store = load_store(store_path)
    delay = settings.geocode_delay if args.delay is None else args.delay
    result = geocode_documents(iter_documents(store), client, delay=delay)
    if result.success:
        save_store(store_path, store)
    print(f"Done. success={result.success} failed={result.failed} skipped={result.skipped}")
    get_logger().log_metrics_summary()


def cmd_validate(args: argparse.Namespace, settings: Settings) -> None:
    doc = _read_json(args.input)
    errors = validate_seeker(doc) if args.kind == "seeker" else validate_candidate(doc)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roommatch", description="Room and roommate matching tools")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    dist = subparsers.add_parser("distance", help="Great-circle distance in km between two points")
    dist.add_argument("lat1", type=float)
    dist.add_argument("lon1", type=float)
    dist.add_argument("lat2", type=float)
    dist.add_argument("lon2", type=float)
    dist.set_defaults(func=cmd_distance)

    sc = subparsers.add_parser("score", help="Score one listing or request against a seeker profile")
    sc.add_argument("--seeker", required=True, help="Path to seeker profile JSON")
    sc.add_argument("--candidate", required=True, help="Path to listing/request JSON")
    sc.set_defaults(func=cmd_score)

    rk = subparsers.add_parser("rank", help="Rank stored listings and requests for a seeker")
    rk.add_argument("--seeker", required=True, help="Path to seeker profile JSON")
    rk.add_argument("--store", default="data/store.json", help="Path to JSON store (default: data/store.json)")
    rk.add_argument("--lat", type=float, help="Seeker latitude for nearby ranking")
    rk.add_argument("--lon", type=float, help="Seeker longitude for nearby ranking")
    rk.add_argument("--here", action="store_true", help="Use the current device location")
    rk.add_argument("--ip", action="store_true", help="With --here, locate by IP instead of configured coordinates")
    rk.add_argument("--sections", action="store_true", help="Group results into browse sections")
    rk.add_argument("--limit", type=int, help="Show only the top N results")
    rk.set_defaults(func=cmd_rank)

    geo = subparsers.add_parser("geocode", help="Resolve a free-text address to coordinates")
    geo.add_argument("--address", required=True, help="Address, e.g. \"Powai, Mumbai, India\"")
    geo.set_defaults(func=cmd_geocode)

    gst = subparsers.add_parser("geocode-store", help="Fill in missing coordinates on stored listings and requests")
    gst.add_argument("--store", default="data/store.json", help="Path to JSON store (default: data/store.json)")
    gst.add_argument("--delay", type=float, help="Seconds between provider calls (default: ROOMMATCH_GEOCODE_DELAY or 0.2)")
    gst.set_defaults(func=cmd_geocode_store)

    val = subparsers.add_parser("validate", help="Validate a seeker or candidate JSON document")
    val.add_argument("--input", required=True, help="Path to JSON document")
    val.add_argument("--kind", choices=["seeker", "candidate"], default="candidate", help="Document kind")
    val.set_defaults(func=cmd_validate)

    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (GOOGLE_MAPS_API_KEY, ROOMMATCH_* settings)
    load_env()
    settings = Settings.from_env()
    get_logger(level=settings.log_level)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args, settings)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
