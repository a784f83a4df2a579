import json

from localfinder.jobs import lookup


def test_classify_command(capsys):
    assert lookup.main(["classify", "Scrap dealers"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result == {
        "domain": "industrial",
        "route_path": "/industrial-services/scrap-dealers",
        "matched": True,
        "industrial_group": "scrap-dealers",
    }


def test_distance_command(capsys):
    assert lookup.main(["distance", "17.3850", "78.4867", "17.3860", "78.4870"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["text"] == "116 m"


def test_distance_command_rejects_bad_coordinate(capsys):
    assert lookup.main(["distance", "95", "0", "0", "0"]) == 2
    assert capsys.readouterr().out == ""


def test_nearby_command_without_location(capsys):
    assert lookup.main(["nearby", "Spa & Massage"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["route_path"] == "/beauty-services/spa-&-massage"
    assert result["state"] == "location_denied"
    assert result["static"]["entries"][0]["name"] == "Serenity Spa & Wellness"


def test_nearby_command_rejects_radius(capsys):
    assert lookup.main(["nearby", "Spa", "--radius", "7"]) == 2
    assert capsys.readouterr().out == ""


def test_classify_command_reports_wedding_group(capsys):
    assert lookup.main(["classify", "Flower Decoration"]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["domain"] == "place-generic"
    assert result["wedding_group"] == "flower-decoration"
