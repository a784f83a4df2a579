"""CLI for classifying labels, measuring distances and previewing nearby results."""

import argparse
import asyncio
import json
import logging
from typing import List, Optional

from localfinder.core.classifier import classify_domain, classify_industrial_group, classify_wedding_group
from localfinder.core.config import ConfigError, get_settings
from localfinder.core.geo import distance_km, format_distance
from localfinder.core.taxonomy import Domain
from localfinder.jobs.live_search import resolve_nearby
from localfinder.models import Coordinate

logger = logging.getLogger(__name__)


def run_classify(label: str) -> dict:
    classification = classify_domain(label)
    result = {
        "domain": classification.domain.value,
        "route_path": classification.route_path,
        "matched": classification.matched,
    }
    if classification.domain is Domain.INDUSTRIAL:
        result["industrial_group"] = classify_industrial_group(classification.route_slug)
    elif classification.domain is Domain.PLACE_GENERIC:
        result["wedding_group"] = classify_wedding_group(classification.route_slug)
    return result


def run_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> dict:
    km = distance_km(Coordinate(lat1, lon1), Coordinate(lat2, lon2))
    return {"distance_km": km, "text": format_distance(km)}


def run_nearby(label: str, lat: Optional[float], lon: Optional[float], radius: Optional[float]) -> dict:
    coordinate = Coordinate(lat, lon) if lat is not None and lon is not None else None
    settings = get_settings()
    if radius is not None and radius not in settings.radius_presets_km:
        raise ValueError(f"--radius must be one of {', '.join(f'{r:g}' for r in settings.radius_presets_km)}")
    classification, view = asyncio.run(resolve_nearby(label, coordinate, radius, settings))
    return {"route_path": classification.route_path, **view.to_dict()}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Category classification and nearby results")
    sub = parser.add_subparsers(dest="command", required=True)

    classify = sub.add_parser("classify", help="Resolve a category label to its domain and route")
    classify.add_argument("label", help="Category label, e.g. 'Spa & Massage'")

    distance = sub.add_parser("distance", help="Great-circle distance between two points")
    for name in ("lat1", "lon1", "lat2", "lon2"):
        distance.add_argument(name, type=float)

    nearby = sub.add_parser("nearby", help="Compose the static and live results for a label")
    nearby.add_argument("label", help="Category label")
    nearby.add_argument("--lat", type=float, help="User latitude")
    nearby.add_argument("--lon", type=float, help="User longitude")
    nearby.add_argument("--radius", type=float, help="Search radius in km (one of the presets)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "classify":
            result = run_classify(args.label)
        elif args.command == "distance":
            result = run_distance(args.lat1, args.lon1, args.lat2, args.lon2)
        else:
            result = run_nearby(args.label, args.lat, args.lon, args.radius)
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return 2

    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
