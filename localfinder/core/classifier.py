"""Resolve category labels to a business domain and a navigable route."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from localfinder.core.slug import normalize
from localfinder.core.taxonomy import FALLBACK_DOMAIN, Domain, Taxonomy, VariantGroup, get_taxonomy

logger = logging.getLogger(__name__)

INDUSTRIAL_CARDS: Mapping[str, str] = MappingProxyType(
    {
        "borewell": "BorewellServiceCard",
        "fabricators": "FabricatorServiceCard",
        "transporters": "TransporterServiceCard",
        "water-tank-cleaning": "WaterTankCleaningCard",
        "scrap-dealers": "ScrapDealerCard",
        "machine-repair": "MachineWorkCard",
        "movers-packers": "PackersMoversCard",
    }
)
DEFAULT_INDUSTRIAL_CARD = "IndustrialServiceCard"

WEDDING_CARDS: Mapping[str, str] = MappingProxyType(
    {
        "wedding-planners": "NearbyWeddingPlanner",
        "poojari": "NearbyPanditService",
        "music-team": "NearbyWeddingBands",
        "flower-decoration": "NearbyFlowerDecoration",
        "sangeet-choreographers": "NearbyChoreographerCard",
    }
)
DEFAULT_WEDDING_CARD = "WeddingServiceCard"


@dataclass(frozen=True)
class Classification:
    domain: Domain
    route_slug: str
    matched_variant: Optional[str] = None

    @property
    def matched(self) -> bool:
        """False when the domain is the fallback for an unrecognised label."""
        return self.matched_variant is not None

    @property
    def route_path(self) -> str:
        prefix = self.domain.route_prefix
        return f"{prefix}/{self.route_slug}" if self.route_slug else prefix


def classify_domain(slug: str, taxonomy: Optional[Taxonomy] = None) -> Classification:
    """Return the single domain owning ``slug``.

    Tables are tried in precedence order and the first one with a variant that
    equals, contains or is contained in the slug wins. Anything unmatched,
    including the empty slug, falls back to the worker-generic domain.
    """
    taxonomy = taxonomy or get_taxonomy()
    slug = normalize(slug)
    if not slug:
        logger.debug("Empty slug; defaulting to %s", FALLBACK_DOMAIN.value)
        return Classification(domain=FALLBACK_DOMAIN, route_slug="")

    for table in taxonomy.tables:
        variant = table.match(slug)
        if variant is not None:
            return Classification(domain=table.domain, route_slug=slug, matched_variant=variant)

    logger.debug("No taxonomy match for %r; defaulting to %s", slug, FALLBACK_DOMAIN.value)
    return Classification(domain=FALLBACK_DOMAIN, route_slug=slug)


def _match_group(slug: str, groups: Iterable[VariantGroup]) -> Optional[str]:
    slug = normalize(slug)
    if not slug:
        return None
    for group in groups:
        if group.match(slug) is not None:
            return group.key
    return None


def classify_industrial_group(slug: str, taxonomy: Optional[Taxonomy] = None) -> Optional[str]:
    """Return the industrial group key for ``slug`` or None when nothing matches."""
    taxonomy = taxonomy or get_taxonomy()
    return _match_group(slug, taxonomy.industrial_groups)


def classify_wedding_group(slug: str, taxonomy: Optional[Taxonomy] = None) -> Optional[str]:
    """Return the wedding service group key for ``slug`` or None when nothing matches."""
    taxonomy = taxonomy or get_taxonomy()
    return _match_group(slug, taxonomy.wedding_groups)


def industrial_card_for(slug: str, taxonomy: Optional[Taxonomy] = None) -> str:
    group = classify_industrial_group(slug, taxonomy)
    if group is None:
        logger.warning("No industrial group for %r; using %s", slug, DEFAULT_INDUSTRIAL_CARD)
        return DEFAULT_INDUSTRIAL_CARD
    return INDUSTRIAL_CARDS.get(group, DEFAULT_INDUSTRIAL_CARD)


def wedding_card_for(slug: str, taxonomy: Optional[Taxonomy] = None) -> str:
    group = classify_wedding_group(slug, taxonomy)
    if group is None:
        logger.warning("No wedding group for %r; using %s", slug, DEFAULT_WEDDING_CARD)
        return DEFAULT_WEDDING_CARD
    return WEDDING_CARDS.get(group, DEFAULT_WEDDING_CARD)
