from geo_engine.models import GeoPoint, format_coordinate


def test_format_coordinate_rounds_to_requested_places() -> None:
    assert format_coordinate(40.712849, 4) == "40.7128"
    assert format_coordinate(-74.00601, 3) == "-74.006"


def test_format_coordinate_folds_negative_zero() -> None:
    assert format_coordinate(-0.0, 3) == "0.000"
    assert format_coordinate(-0.00001, 4) == "0.0000"


def test_geo_point_as_text_with_places() -> None:
    assert GeoPoint(lat=-0.00001, lng=-74.00601).as_text(3) == "0.000,-74.006"
    assert GeoPoint(lat=40.7128, lng=-74.006).as_text() == "40.7128,-74.006"
