import pytest

from llm_maps.core.exceptions import InvalidInput
from llm_maps.utils.validation import (
    validate_location,
    validate_origin_destination,
    validate_place_id,
    validate_query,
    validate_radius,
)


@pytest.mark.parametrize("raw", ["", " ", "a", "  b  ", "x" * 501, None, 42, ["pizza"]])
def test_validate_query_rejects_bad_input(raw):
    with pytest.raises(InvalidInput) as exc:
        validate_query(raw)
    assert exc.value.field == "query"


def test_validate_query_strips_markup_and_whitespace():
    assert validate_query("  <b>pizza</b> near me  ") == "bpizza/b near me"


def test_validate_query_accepts_bounds():
    assert validate_query("ok") == "ok"
    assert validate_query("y" * 500) == "y" * 500


@pytest.mark.parametrize("raw", ["<>", "<a>", " <<>> ", "<> <>"])
def test_validate_query_rejects_markup_only_input(raw):
    with pytest.raises(InvalidInput) as exc:
        validate_query(raw)
    assert exc.value.field == "query"
    assert "at least" in exc.value.reason


def test_validate_location_optional():
    assert validate_location(None) is None
    assert validate_location("") is None
    assert validate_location(" <Jakarta> ") == "Jakarta"


def test_validate_location_rejects_long_or_non_string():
    with pytest.raises(InvalidInput) as exc:
        validate_location("z" * 201)
    assert exc.value.field == "location"

    with pytest.raises(InvalidInput):
        validate_location(123)


def test_validate_origin_destination():
    assert validate_origin_destination(" <Monas> ", "Kota Tua ") == ("Monas", "Kota Tua")


@pytest.mark.parametrize(
    "origin, destination, field",
    [
        (None, "Kota Tua", "origin"),
        ("   ", "Kota Tua", "origin"),
        ("Monas", "", "destination"),
        ("Monas", 7, "destination"),
        ("o" * 201, "Kota Tua", "origin_destination"),
        ("Monas", "d" * 201, "origin_destination"),
    ],
)
def test_validate_origin_destination_failures(origin, destination, field):
    with pytest.raises(InvalidInput) as exc:
        validate_origin_destination(origin, destination)
    assert exc.value.field == field


def test_validate_place_id():
    assert validate_place_id("  ChIJN1t_tDeuEmsRUsoyG83frY4 ") == "ChIJN1t_tDeuEmsRUsoyG83frY4"

    for raw in (None, "", "   ", "p" * 101):
        with pytest.raises(InvalidInput) as exc:
            validate_place_id(raw)
        assert exc.value.field == "placeId"


@pytest.mark.parametrize("raw, expected", [(None, None), (1, 1), (50000, 50000), ("1500", 1500), (250.0, 250)])
def test_validate_radius_accepts(raw, expected):
    assert validate_radius(raw) == expected


@pytest.mark.parametrize("raw", [0, -5, 50001, "abc", True, 12.5, float("nan"), float("inf"), [100]])
def test_validate_radius_rejects(raw):
    with pytest.raises(InvalidInput) as exc:
        validate_radius(raw)
    assert exc.value.field == "radius"
