import pytest

from app.core.errors import ValidationError
from app.services.availability import active_bookings, is_available, overlaps, parse_date_range
from conftest import make_car, make_rental


def test_overlap_is_inclusive_on_shared_day():
    assert overlaps("2024-01-01", "2024-01-05", "2024-01-05", "2024-01-10")
    assert overlaps("2024-01-05", "2024-01-10", "2024-01-01", "2024-01-05")


def test_adjacent_ranges_do_not_overlap():
    assert not overlaps("2024-01-01", "2024-01-04", "2024-01-05", "2024-01-10")
    assert not overlaps("2024-01-05", "2024-01-10", "2024-01-01", "2024-01-04")


def test_containment_overlaps():
    assert overlaps("2024-01-01", "2024-01-31", "2024-01-10", "2024-01-12")
    assert overlaps("2024-01-10", "2024-01-12", "2024-01-01", "2024-01-31")


@pytest.mark.parametrize("start,end", [
    ("not-a-date", "2024-01-05"),
    ("2024-01-05", "2024-13-40"),
    ("", "2024-01-05"),
    (None, None),
])
def test_malformed_dates_raise(start, end):
    with pytest.raises(ValidationError):
        parse_date_range(start, end)


def test_end_before_start_raises():
    with pytest.raises(ValidationError):
        parse_date_range("2024-01-05", "2024-01-01")


def test_datetime_strings_are_reduced_to_dates():
    s, e = parse_date_range("2024-01-01T10:00:00", "2024-01-03")
    assert s.isoformat() == "2024-01-01"
    assert e.isoformat() == "2024-01-03"


def test_only_active_rentals_block(store):
    car = make_car(store)
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "1"), status="cancelled")
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "1"), status="completed",
                start="2024-02-01", end="2024-02-05")
    assert is_available(store, car, "2024-01-02", "2024-01-03")
    assert is_available(store, car, "2024-02-02", "2024-02-03")


def test_other_cars_do_not_block(store):
    car = make_car(store)
    other = make_car(store, model="Yaris")
    make_rental(store, car_ref=("surrogate", other["key"]), user_ref=("numeric", "1"))
    assert is_available(store, car, "2024-01-01", "2024-01-05")
    assert not is_available(store, other, "2024-01-05", "2024-01-06")


def test_legacy_references_block_the_same_car(store):
    car = make_car(store, legacy_num=7)
    # older rows stored the catalog id as text
    make_rental(store, car_ref=("string", "7"), user_ref=("numeric", "1"))
    assert not is_available(store, car, "2024-01-03", "2024-01-04")


def test_active_bookings_are_sorted(store):
    car = make_car(store)
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "1"), start="2024-03-01", end="2024-03-02")
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "1"), start="2024-01-01", end="2024-01-02")
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "1"), start="2024-02-01",
                end="2024-02-02", status="cancelled")
    assert active_bookings(store, car) == [
        {"startDate": "2024-01-01", "endDate": "2024-01-02"},
        {"startDate": "2024-03-01", "endDate": "2024-03-02"},
    ]
