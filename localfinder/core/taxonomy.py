"""Taxonomy tables: which label variants each business domain recognises.

The tables are read-only configuration. They are assembled once per process
(see :func:`get_taxonomy`) and every variant is normalised at build time so the
classifier only ever compares canonical slugs.

A ``TAXONOMY_PATH`` JSON file may replace the variant list of any domain,
industrial group or wedding group::

    {
      "domains": {"food": ["restaurants", "cafes"]},
      "industrial_groups": {"borewell": ["borewell", "bore well"]},
      "wedding_groups": {"poojari": ["pandits", "poojari"]}
    }

The precedence order is not configurable.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from localfinder.core.config import ConfigError, get_settings
from localfinder.core.slug import normalize

logger = logging.getLogger(__name__)


class Domain(Enum):
    FOOD = "food"
    HOSPITAL = "hospital"
    HOTEL = "hotel"
    BEAUTY = "beauty"
    REAL_ESTATE = "real-estate"
    SHOPPING = "shopping"
    EDUCATION = "education"
    INDUSTRIAL = "industrial"
    AUTOMOTIVE = "automotive"
    PLACE_GENERIC = "place-generic"
    WORKER_GENERIC = "worker-generic"

    @property
    def route_prefix(self) -> str:
        return ROUTE_PREFIXES[self]


ROUTE_PREFIXES: Mapping[Domain, str] = MappingProxyType(
    {
        Domain.FOOD: "/food-services",
        Domain.HOSPITAL: "/hospital-services",
        Domain.HOTEL: "/hotel-services",
        Domain.BEAUTY: "/beauty-services",
        Domain.REAL_ESTATE: "/real-estate",
        Domain.SHOPPING: "/shopping",
        Domain.EDUCATION: "/education",
        Domain.INDUSTRIAL: "/industrial-services",
        Domain.AUTOMOTIVE: "/automotive",
        Domain.PLACE_GENERIC: "/nearby-places",
        Domain.WORKER_GENERIC: "/matched-workers",
    }
)

# First match wins. Automotive and education carry short, specific lists that
# broader tables would otherwise swallow; beauty must precede place-generic.
PRECEDENCE: Tuple[Domain, ...] = (
    Domain.AUTOMOTIVE,
    Domain.EDUCATION,
    Domain.FOOD,
    Domain.HOSPITAL,
    Domain.HOTEL,
    Domain.BEAUTY,
    Domain.REAL_ESTATE,
    Domain.SHOPPING,
    Domain.INDUSTRIAL,
    Domain.PLACE_GENERIC,
    Domain.WORKER_GENERIC,
)

FALLBACK_DOMAIN = Domain.WORKER_GENERIC


def variant_matches(slug: str, variant: str) -> bool:
    """Bidirectional containment between two canonical slugs."""
    if not slug or not variant:
        return False
    return variant in slug or slug in variant


def _normalized_variants(variants: Sequence[str]) -> Tuple[str, ...]:
    # dict.fromkeys keeps declaration order while dropping duplicates
    return tuple(dict.fromkeys(slug for slug in map(normalize, variants) if slug))


class _VariantSet:
    """Normalises ``variants`` once and matches slugs against them."""

    variants: Tuple[str, ...]
    normalized: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "variants", tuple(self.variants))
        object.__setattr__(self, "normalized", _normalized_variants(self.variants))

    def match(self, slug: str) -> Optional[str]:
        """Return the first normalised variant matching ``slug``, if any."""
        for variant in self.normalized:
            if variant_matches(slug, variant):
                return variant
        return None


@dataclass(frozen=True)
class TaxonomyTable(_VariantSet):
    domain: Domain
    variants: Tuple[str, ...]
    normalized: Tuple[str, ...] = field(init=False, repr=False)


@dataclass(frozen=True)
class VariantGroup(_VariantSet):
    """A keyed group inside a two-level domain (industrial or wedding services)."""

    key: str
    variants: Tuple[str, ...]
    normalized: Tuple[str, ...] = field(init=False, repr=False)


@dataclass(frozen=True)
class Taxonomy:
    tables: Tuple[TaxonomyTable, ...]
    industrial_groups: Tuple[VariantGroup, ...]
    wedding_groups: Tuple[VariantGroup, ...] = ()

    def table(self, domain: Domain) -> TaxonomyTable:
        for table in self.tables:
            if table.domain is domain:
                return table
        raise KeyError(domain)


# ---------- Default tables ----------

AUTOMOTIVE_VARIANTS = (
    "car repair",
    "bike repair",
    "car wash",
    "bike wash",
    "automobile parts",
    "towing services",
    "tyre shops",
    "battery shops",
    "car rental",
)

EDUCATION_VARIANTS = (
    "schools",
    "colleges",
    "coaching centres",
    "coaching",
    "tuition teachers",
    "computer training institutes",
    "music & dance classes",
    "spoken english classes",
    "driving schools",
    "skill development centres",
)

FOOD_VARIANTS = (
    "restaurants",
    "cafes",
    "bakeries",
    "street food",
    "juice shops",
    "sweet shops",
    "ice cream parlours",
    "catering services",
    "food delivery",
    "mess services",
)

HOSPITAL_VARIANTS = (
    "hospitals",
    "medical clinics",
    "general clinics",
    "multispeciality clinics",
    "dental clinics",
    "eye hospitals",
    "dermatologists",
    "diagnostic labs",
    "blood banks",
    "ambulance services",
    "physiotherapy centres",
    "nursing services",
    "vet hospitals",
    "medical shops",
)

HOTEL_VARIANTS = (
    "hotels",
    "budget hotels",
    "luxury hotels",
    "resorts",
    "lodges",
    "guest houses",
    "homestays",
    "service apartments",
    "hostels",
    "pg / paying guest",
    "travel agencies",
    "tour packages",
    "taxi services",
    "vehicle rentals",
    "bus ticket booking",
    "train ticket booking",
)

BEAUTY_VARIANTS = (
    "beauty parlours",
    "beauty parlour",
    "salons",
    "salon",
    "spa & massage centres",
    "spa & massage",
    "spa",
    "massage centres",
    "massage",
    "makeup artists",
    "makeup artist",
    "mehendi artists",
    "mehendi artist",
    "mehndi artists",
    "fitness centres",
    "yoga centres",
    "yoga centre",
    "skin clinics",
    "skin clinic",
    "tattoo studios",
    "tattoo studio",
)

REAL_ESTATE_VARIANTS = (
    "property dealers",
    "property",
    "real estate agents",
    "rent lease listings",
    "rent lease",
    "rental properties",
    "properties for rent",
    "builders developers",
    "builders & developers",
    "builders",
    "construction companies",
    "architect services",
    "architects",
    "architectural services",
    "interior designers",
    "interior design",
    "construction contractors",
    "home construction",
)

SHOPPING_VARIANTS = (
    "supermarkets",
    "supermarket",
    "clothing stores",
    "clothing",
    "clothes",
    "garments",
    "apparel",
    "shoe shops",
    "shoes",
    "footwear",
    "mobile stores",
    "phone stores",
    "electronics shops",
    "electronics",
    "furniture stores",
    "furniture",
    "jewellery stores",
    "jewellery showrooms",
    "jewellery",
    "jewelry",
    "jeweller",
    "stationery shops",
    "stationery",
    "stationary",
    "gift shops",
    "optical shops",
    "optical",
    "opticals",
    "eyewear",
)

INDUSTRIAL_VARIANTS = (
    "transporters",
    "water tank cleaning",
    "borewell services",
    "fabricators",
    "industrial machine repair",
    "scrap dealers",
    "packers and movers",
)

# Overlaps the beauty and shopping tables on purpose; precedence decides.
PLACE_GENERIC_VARIANTS = (
    "beauty parlours",
    "salons",
    "makeup artists",
    "fitness centres / gyms",
    "yoga centres",
    "tattoo studios",
    "supermarkets",
    "clothing stores",
    "gift shops",
    "pet shops",
    "pet clinics",
    "courier offices",
    "parcel services",
    "gyms",
    "sports clubs",
    "indoor play areas",
    "stadiums",
    "fertilizer shops",
    "seeds shops",
    "farming tools",
    "wedding planners",
    "pandits",
    "wedding bands",
    "flower decoration",
    "sangeet choreographers",
)

WORKER_GENERIC_VARIANTS = (
    "plumbers",
    "electricians",
    "carpenters",
    "painters",
    "painting contractors",
    "ac repair",
    "fridge repair",
    "washing machine repair",
    "water purifier service",
    "gas stove repair",
    "solar panel installation",
    "maid services",
    "cook services",
    "babysitters",
    "elderly care",
    "laundry services",
    "house keeping services",
    "water can supply",
    "chartered accountant",
    "lawyers",
    "notary",
    "insurance agents",
    "marketing agencies",
    "printing & xerox shops",
    "event planners",
    "placement services",
    "mobile repair",
    "computer & laptop repair",
    "cctv installation",
    "software services",
    "website development",
    "digital marketing",
    "graphic designers",
    "pet grooming",
    "pet training",
    "dj services",
    "party decorations",
    "construction labor",
    "loading workers",
    "cleaning helpers",
    "watchmen",
    "tractor rental",
    "veterinary doctors",
    "water pump repair",
    "background verification",
    "document courier",
    "office cleaning",
    "painting artists",
    "caricature artists",
    "wall murals",
)

DEFAULT_DOMAIN_VARIANTS: Mapping[Domain, Tuple[str, ...]] = MappingProxyType(
    {
        Domain.AUTOMOTIVE: AUTOMOTIVE_VARIANTS,
        Domain.EDUCATION: EDUCATION_VARIANTS,
        Domain.FOOD: FOOD_VARIANTS,
        Domain.HOSPITAL: HOSPITAL_VARIANTS,
        Domain.HOTEL: HOTEL_VARIANTS,
        Domain.BEAUTY: BEAUTY_VARIANTS,
        Domain.REAL_ESTATE: REAL_ESTATE_VARIANTS,
        Domain.SHOPPING: SHOPPING_VARIANTS,
        Domain.INDUSTRIAL: INDUSTRIAL_VARIANTS,
        Domain.PLACE_GENERIC: PLACE_GENERIC_VARIANTS,
        Domain.WORKER_GENERIC: WORKER_GENERIC_VARIANTS,
    }
)

# Declaration order is the sub-classifier's evaluation order.
DEFAULT_INDUSTRIAL_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "transporters": (
            "transporters",
            "transporter",
            "transport services",
            "goods transport",
            "logistics",
            "logistics services",
            "cargo services",
            "cargo",
            "freight services",
            "freight",
            "goods carrier",
        ),
        "water-tank-cleaning": (
            "water tank cleaning",
            "watertankcleaning",
            "tank cleaning services",
            "tank cleaning",
            "overhead tank cleaning",
            "underground tank cleaning",
            "water tank",
            "sump cleaning",
        ),
        "borewell": (
            "borewell services",
            "borewellservices",
            "borewell",
            "bore well",
            "borewell drilling",
            "bore well drilling",
            "drilling services",
            "well drilling",
            "borewell contractors",
            "borewell repair",
        ),
        "fabricators": (
            "fabricators",
            "fabricator",
            "fabrication work",
            "fabrication",
            "welding services",
            "welding",
            "metal fabrication",
            "steel fabrication",
            "iron fabrication",
            "metal work",
            "steel work",
        ),
        # No bare "machine": it would claim "washing machine repair".
        "machine-repair": (
            "industrial machine repair",
            "machinerepair",
            "machine work",
            "machinery repair",
            "machine services",
            "lathe work",
        ),
        "scrap-dealers": (
            "scrap dealers",
            "scrapdealers",
            "scrap dealer",
            "scrap buyers",
            "scrap buyer",
            "scrap",
            "battery scrap",
            "e-waste scrap",
            "e-waste",
            "ewaste",
            "metal scrap",
            "recycling",
            "recycling services",
            "scrap metal",
            "kabadi",
            "raddi",
        ),
        "movers-packers": (
            "packers and movers",
            "movers and packers",
            "packers & movers",
            "movers & packers",
            "movers",
            "house shifting",
            "relocation services",
        ),
    }
)

# Wedding services sit in the place-generic domain and pick a card per group.
# No bare "music" or "dance": "music & dance classes" is education.
DEFAULT_WEDDING_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "wedding-planners": (
            "wedding planners",
            "wedding planner",
            "wedding planning",
            "marriage planners",
            "marriage planner",
            "event coordination",
            "planners",
            "planner",
        ),
        "poojari": (
            "pandits / poojari",
            "pandits",
            "pandit",
            "poojari",
            "priest services",
            "wedding priest",
            "hindu priest",
            "priest",
            "pooja services",
            "puja services",
            "pooja",
            "puja",
        ),
        "music-team": (
            "band / music team",
            "music team",
            "music band",
            "wedding bands",
            "wedding band",
            "live band",
            "baraat band",
            "wedding music",
            "nadaswaram team",
            "nadaswaram",
            "shehnai",
            "bands",
            "band",
        ),
        "flower-decoration": (
            "flower decoration",
            "flower decorations",
            "floral decoration",
            "floral decorations",
            "flowers",
            "flower",
            "floral",
        ),
        "sangeet-choreographers": (
            "sangeet choreographers",
            "sangeet choreographer",
            "sangeet choreography",
            "wedding choreographers",
            "wedding choreographer",
            "dance choreographers",
            "choreographers",
            "choreographer",
            "choreography",
            "wedding dance",
            "sangeet dance",
            "bridal choreography",
            "sangeet",
        ),
    }
)


def build_taxonomy(
    domain_variants: Mapping[Domain, Sequence[str]],
    industrial_groups: Mapping[str, Sequence[str]],
    wedding_groups: Optional[Mapping[str, Sequence[str]]] = None,
) -> Taxonomy:
    """Assemble tables in precedence order from raw variant lists."""
    missing = [domain.value for domain in PRECEDENCE if domain not in domain_variants]
    if missing:
        raise ConfigError(f"taxonomy is missing domains: {', '.join(missing)}")

    tables = tuple(TaxonomyTable(domain, tuple(domain_variants[domain])) for domain in PRECEDENCE)
    return Taxonomy(
        tables=tables,
        industrial_groups=_groups(industrial_groups),
        wedding_groups=_groups(wedding_groups or {}),
    )


def _groups(raw: Mapping[str, Sequence[str]]) -> Tuple[VariantGroup, ...]:
    return tuple(VariantGroup(key, tuple(variants)) for key, variants in raw.items())


def _load_overrides(path: str) -> Dict[str, Any]:
    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Unable to read taxonomy file {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"Taxonomy file {path} must contain a JSON object")
    return payload


def _string_list(name: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{name} must be a list of strings")
    return tuple(value)


def load_taxonomy(path: Optional[str] = None) -> Taxonomy:
    """Build the taxonomy from the defaults plus an optional JSON override file."""
    domain_variants: Dict[Domain, Tuple[str, ...]] = dict(DEFAULT_DOMAIN_VARIANTS)
    groups = {
        "industrial_groups": dict(DEFAULT_INDUSTRIAL_GROUPS),
        "wedding_groups": dict(DEFAULT_WEDDING_GROUPS),
    }

    if path:
        overrides = _load_overrides(path)
        for name, variants in (overrides.get("domains") or {}).items():
            try:
                domain = Domain(name)
            except ValueError as exc:
                raise ConfigError(f"Unknown domain in taxonomy file: {name}") from exc
            domain_variants[domain] = _string_list(f"domains.{name}", variants)
        for section, current in groups.items():
            for key, variants in (overrides.get(section) or {}).items():
                current[normalize(key)] = _string_list(f"{section}.{key}", variants)
        logger.info("Loaded taxonomy overrides from %s", path)

    return build_taxonomy(domain_variants, groups["industrial_groups"], groups["wedding_groups"])


@lru_cache(maxsize=1)
def get_taxonomy() -> Taxonomy:
    """Process-wide taxonomy, built once on first use."""
    return load_taxonomy(get_settings().taxonomy_path)
