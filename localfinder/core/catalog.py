"""Compiled-in sample listings shown before live results arrive."""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from localfinder.core.classifier import Classification, classify_industrial_group
from localfinder.core.taxonomy import Domain, Taxonomy, variant_matches
from localfinder.models import Coordinate, ProviderRecord

Catalog = Mapping[Domain, Mapping[str, Tuple[ProviderRecord, ...]]]


def _sample(
    id: str,
    name: str,
    address: str,
    lat: float,
    lon: float,
    rating: float,
    reviews: int,
    phone: str,
    tags: Tuple[str, ...],
    is_open: bool = True,
) -> ProviderRecord:
    return ProviderRecord(
        id=id,
        name=name,
        address=address,
        coordinate=Coordinate(lat, lon),
        rating=rating,
        review_count=reviews,
        is_open=is_open,
        phones=(phone,),
        tags=tags,
        source="static",
    )


STATIC_CATALOG: Catalog = MappingProxyType(
    {
        Domain.AUTOMOTIVE: MappingProxyType(
            {
                "car-wash": (
                    _sample("carwash-1", "SpeedClean Car Wash", "Gachibowli, Hyderabad", 17.4401, 78.3489,
                            4.5, 312, "+91 98765 22201", ("Foam Wash", "Interior Vacuum")),
                    _sample("carwash-2", "AutoShine Car Care", "Madhapur, Hyderabad", 17.4483, 78.3915,
                            4.7, 198, "+91 98765 22202", ("Ceramic Coating", "Paint Protection")),
                ),
                "bike-repair": (
                    _sample("bikerepair-1", "Ride Right Two Wheeler Works", "Kukatpally, Hyderabad", 17.4948, 78.3996,
                            4.3, 87, "+91 98765 22301", ("General Service", "Engine Repair")),
                ),
            }
        ),
        Domain.FOOD: MappingProxyType(
            {
                "restaurants": (
                    _sample("restaurant-1", "Paradise Biryani", "Secunderabad, Hyderabad", 17.4416, 78.4983,
                            4.4, 5120, "+91 40 6666 1111", ("Biryani", "North Indian")),
                    _sample("restaurant-2", "Chutneys", "Banjara Hills, Hyderabad", 17.4156, 78.4347,
                            4.3, 2210, "+91 40 6666 2222", ("South Indian", "Breakfast")),
                ),
                "cafes": (
                    _sample("cafe-1", "Roastery Coffee House", "Banjara Hills, Hyderabad", 17.4126, 78.4392,
                            4.6, 940, "+91 40 6666 3333", ("Coffee", "Desserts")),
                ),
            }
        ),
        Domain.HOSPITAL: MappingProxyType(
            {
                "hospitals": (
                    _sample("hospital-1", "City Care Multispeciality Hospital", "Ameerpet, Hyderabad", 17.4375, 78.4482,
                            4.2, 1540, "+91 40 2345 6789", ("Emergency", "Cardiology")),
                ),
            }
        ),
        Domain.HOTEL: MappingProxyType(
            {
                "hotels": (
                    _sample("hotel-1", "Lakeview Residency", "Tank Bund, Hyderabad", 17.4239, 78.4738,
                            4.1, 860, "+91 40 2765 4321", ("Free WiFi", "Breakfast")),
                ),
            }
        ),
        Domain.BEAUTY: MappingProxyType(
            {
                "spa": (
                    _sample("spa-1", "Serenity Spa & Wellness", "Jubilee Hills, Hyderabad", 17.4325, 78.4071,
                            4.8, 412, "+91 98480 11223", ("Swedish Massage", "Aromatherapy")),
                ),
                "salons": (
                    _sample("salon-1", "Style Studio Unisex Salon", "Kondapur, Hyderabad", 17.4700, 78.3637,
                            4.5, 655, "+91 98480 33445", ("Haircut", "Hair Colour")),
                ),
            }
        ),
        Domain.INDUSTRIAL: MappingProxyType(
            {
                "borewell": (
                    _sample("borewell-1", "Deccan Borewell Drilling", "Medchal, Hyderabad", 17.6297, 78.4814,
                            4.2, 64, "+91 99890 45678", ("Drilling", "Motor Installation")),
                ),
                "scrap-dealers": (
                    _sample("scrap-1", "Green Cycle Scrap Buyers", "Balanagar, Hyderabad", 17.4717, 78.4447,
                            4.0, 41, "+91 99890 56789", ("Metal Scrap", "E-Waste"), is_open=False),
                ),
            }
        ),
    }
)


def static_entries_for(
    classification: Classification,
    catalog: Optional[Catalog] = None,
    taxonomy: Optional[Taxonomy] = None,
) -> Tuple[ProviderRecord, ...]:
    """Sample listings for a classified route, or an empty tuple."""
    catalog = STATIC_CATALOG if catalog is None else catalog
    by_slug = catalog.get(classification.domain) or {}
    slug = classification.route_slug
    if not slug:
        return ()

    if slug in by_slug:
        return tuple(by_slug[slug])
    if classification.domain is Domain.INDUSTRIAL:
        group = classify_industrial_group(slug, taxonomy)
        if group in by_slug:
            return tuple(by_slug[group])
    for key, records in by_slug.items():
        if variant_matches(slug, key):
            return tuple(records)
    return ()
