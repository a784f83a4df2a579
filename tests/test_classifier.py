import pytest

from localfinder.core import classifier, taxonomy
from localfinder.core.taxonomy import Domain


@pytest.mark.parametrize(
    "label,domain,route_path",
    [
        ("Car Wash", Domain.AUTOMOTIVE, "/automotive/car-wash"),
        ("Coaching Centres", Domain.EDUCATION, "/education/coaching-centres"),
        ("Restaurants", Domain.FOOD, "/food-services/restaurants"),
        ("Dental Clinics", Domain.HOSPITAL, "/hospital-services/dental-clinics"),
        ("Resorts", Domain.HOTEL, "/hotel-services/resorts"),
        ("Spa & Massage", Domain.BEAUTY, "/beauty-services/spa-&-massage"),
        ("Interior Designers", Domain.REAL_ESTATE, "/real-estate/interior-designers"),
        ("Furniture Stores", Domain.SHOPPING, "/shopping/furniture-stores"),
        ("Borewell Services", Domain.INDUSTRIAL, "/industrial-services/borewell-services"),
        ("Pet Shops", Domain.PLACE_GENERIC, "/nearby-places/pet-shops"),
        ("Plumbers", Domain.WORKER_GENERIC, "/matched-workers/plumbers"),
    ],
)
def test_classify_domain_routes(label, domain, route_path):
    result = classifier.classify_domain(label)

    assert result.domain is domain
    assert result.route_path == route_path
    assert result.matched


def test_partial_label_matches_by_containment():
    result = classifier.classify_domain("salon")

    assert result.domain is Domain.BEAUTY
    assert result.matched_variant == "salons"


def test_spa_alone_is_beauty():
    assert classifier.classify_domain("Spa").domain is Domain.BEAUTY


def test_beauty_wins_over_place_generic_for_shared_labels():
    # "salons" appears in both tables.
    assert "salons" in taxonomy.load_taxonomy().table(Domain.PLACE_GENERIC).normalized
    assert classifier.classify_domain("Salons").domain is Domain.BEAUTY


def test_unknown_label_falls_back_to_workers():
    result = classifier.classify_domain("zzz-unknown")

    assert result.domain is Domain.WORKER_GENERIC
    assert not result.matched
    assert result.route_path == "/matched-workers/zzz-unknown"


@pytest.mark.parametrize("label", ["", "   ", None])
def test_empty_label_falls_back_without_slug(label):
    result = classifier.classify_domain(label)

    assert result.domain is Domain.WORKER_GENERIC
    assert result.route_slug == ""
    assert result.route_path == "/matched-workers"


def test_classification_is_deterministic():
    first = classifier.classify_domain("Fitness Centres / Gyms")
    assert classifier.classify_domain("fitness centres / gyms") == first


def test_first_table_in_precedence_wins():
    shared = {domain: ("shared label",) for domain in Domain}
    custom = taxonomy.build_taxonomy(shared, {})

    assert classifier.classify_domain("Shared Label", custom).domain is Domain.AUTOMOTIVE

    shared[Domain.AUTOMOTIVE] = ()
    custom = taxonomy.build_taxonomy(shared, {})
    assert classifier.classify_domain("Shared Label", custom).domain is Domain.EDUCATION


@pytest.mark.parametrize(
    "label,group",
    [
        ("Borewell Services", "borewell"),
        ("bore well drilling", "borewell"),
        ("Scrap dealers", "scrap-dealers"),
        ("welding", "fabricators"),
        ("Tank Cleaning", "water-tank-cleaning"),
        ("packers and movers", "movers-packers"),
        ("Goods Transport", "transporters"),
        ("Machinery Repair", "machine-repair"),
    ],
)
def test_classify_industrial_group(label, group):
    assert classifier.classify_industrial_group(label) == group


def test_classify_industrial_group_no_match():
    assert classifier.classify_industrial_group("zzz") is None
    assert classifier.classify_industrial_group("") is None


def test_industrial_card_for():
    assert classifier.industrial_card_for("bore well drilling") == "BorewellServiceCard"
    assert classifier.industrial_card_for("Scrap dealers") == "ScrapDealerCard"
    assert classifier.industrial_card_for("packers and movers") == "PackersMoversCard"


def test_industrial_card_for_unknown_logs_warning(caplog):
    with caplog.at_level("WARNING"):
        card = classifier.industrial_card_for("zzz")

    assert card == classifier.DEFAULT_INDUSTRIAL_CARD
    assert "No industrial group" in " ".join(caplog.messages)


@pytest.mark.parametrize(
    "label,domain",
    [
        ("Skin Clinics", Domain.BEAUTY),
        ("Pet Clinics", Domain.PLACE_GENERIC),
        ("Clinics", Domain.HOSPITAL),
        ("Washing Machine Repair", Domain.WORKER_GENERIC),
        ("Machine Repair", Domain.INDUSTRIAL),
    ],
)
def test_specific_labels_are_not_captured_by_broader_tables(label, domain):
    assert classifier.classify_domain(label).domain is domain


def test_washing_machine_repair_has_no_industrial_group():
    assert classifier.classify_industrial_group("Washing Machine Repair") is None


@pytest.mark.parametrize(
    "label,group",
    [
        ("Wedding Planners", "wedding-planners"),
        ("Pandits / Poojari", "poojari"),
        ("Hindu Priest", "poojari"),
        ("Wedding Bands", "music-team"),
        ("Nadaswaram", "music-team"),
        ("Flower Decoration", "flower-decoration"),
        ("Sangeet Choreographers", "sangeet-choreographers"),
        ("Wedding Dance", "sangeet-choreographers"),
    ],
)
def test_classify_wedding_group(label, group):
    assert classifier.classify_wedding_group(label) == group


def test_wedding_labels_route_to_nearby_places():
    result = classifier.classify_domain("Pandits / Poojari")

    assert result.domain is Domain.PLACE_GENERIC
    assert result.route_path == "/nearby-places/pandits-poojari"


def test_classify_wedding_group_no_match():
    assert classifier.classify_wedding_group("zzz") is None
    assert classifier.classify_wedding_group("") is None


def test_wedding_card_for():
    assert classifier.wedding_card_for("Pandits / Poojari") == "NearbyPanditService"
    assert classifier.wedding_card_for("wedding bands") == "NearbyWeddingBands"
    assert classifier.wedding_card_for("Sangeet Choreographers") == "NearbyChoreographerCard"


def test_wedding_card_for_unknown_logs_warning(caplog):
    with caplog.at_level("WARNING"):
        card = classifier.wedding_card_for("zzz")

    assert card == classifier.DEFAULT_WEDDING_CARD
    assert "No wedding group" in " ".join(caplog.messages)
