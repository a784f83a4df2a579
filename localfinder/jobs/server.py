"""HTTP entrypoint exposing classification and nearby results as JSON (Cloud Run friendly)."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from localfinder.core.classifier import (
    Classification,
    classify_domain,
    classify_industrial_group,
    classify_wedding_group,
)
from localfinder.core.config import get_settings
from localfinder.core.taxonomy import Domain
from localfinder.jobs.live_search import resolve_nearby
from localfinder.models import Coordinate

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "radius_presets_km": list(settings.radius_presets_km),
                "default_radius_km": settings.default_radius_km,
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/classify")
def classify() -> Any:
    label = request.args.get("label", "")
    if not label.strip():
        return jsonify({"error": "label is required"}), 400

    classification = classify_domain(label)
    return jsonify({"data": _classification_payload(classification)}), 200


@app.get("/nearby")
def nearby() -> Any:
    """
    Compose the results feed for a category label.
    Required: label. Optional: latitude + longitude (both or neither), radius (km, one of the presets).
    """
    label = request.args.get("label", "")
    if not label.strip():
        return jsonify({"error": "label is required"}), 400

    settings = get_settings()

    try:
        coordinate = _coordinate_from_args(request.args.get("latitude"), request.args.get("longitude"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    radius_raw = request.args.get("radius")
    radius_km = settings.default_radius_km
    if radius_raw is not None:
        try:
            radius_km = float(radius_raw)
        except ValueError:
            return jsonify({"error": "radius must be numeric"}), 400
    if radius_km not in settings.radius_presets_km:
        allowed = ", ".join(f"{value:g}" for value in settings.radius_presets_km)
        return jsonify({"error": f"radius must be one of {allowed}"}), 400

    classification, view = asyncio.run(resolve_nearby(label, coordinate, radius_km, settings))
    logger.info(
        "Composed nearby view label=%s domain=%s state=%s static=%d live=%d",
        label,
        classification.domain.value,
        view.state.value,
        len(view.static.entries),
        len(view.live.entries),
    )
    return jsonify({"data": {"classification": _classification_payload(classification), **view.to_dict()}}), 200


# ---------- Internals ----------


def _classification_payload(classification: Classification) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "domain": classification.domain.value,
        "route_slug": classification.route_slug,
        "route_path": classification.route_path,
        "matched": classification.matched,
        "matched_variant": classification.matched_variant,
    }
    if classification.domain is Domain.INDUSTRIAL:
        payload["industrial_group"] = classify_industrial_group(classification.route_slug)
    elif classification.domain is Domain.PLACE_GENERIC:
        payload["wedding_group"] = classify_wedding_group(classification.route_slug)
    return payload


def _coordinate_from_args(latitude: Optional[str], longitude: Optional[str]) -> Optional[Coordinate]:
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise ValueError("latitude and longitude must be provided together")
    try:
        return Coordinate(float(latitude), float(longitude))
    except ValueError as exc:
        raise ValueError(f"invalid coordinate: {exc}") from exc


def main() -> None:
    port = get_settings().port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
