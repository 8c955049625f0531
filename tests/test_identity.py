from app.services.identity import (
    RENTAL_ORDER,
    IdScheme,
    Ref,
    aliases,
    public_id,
    resolve,
    resolve_ref,
    split_legacy_id,
)
from app.storage.base import CARS, RENTALS
from conftest import make_car, make_rental


def test_numeric_legacy_id_resolves_from_string(store):
    car = make_car(store, legacy_num=7)
    assert resolve(store, CARS, "7")["key"] == car["key"]


def test_surrogate_key_resolves(store):
    car = make_car(store)
    assert resolve(store, CARS, car["key"])["key"] == car["key"]
    assert resolve(store, CARS, car["key"].upper())["key"] == car["key"]


def test_store_key_only_car_is_not_found_by_number(store):
    make_car(store)
    assert resolve(store, CARS, "12345") is None


def test_string_legacy_id_resolves(store):
    car = make_car(store, legacy_id="toyota-corolla-2022")
    assert resolve(store, CARS, "toyota-corolla-2022")["key"] == car["key"]


def test_unknown_and_empty_ids(store):
    make_car(store, legacy_num=1)
    assert resolve(store, CARS, "nope") is None
    assert resolve(store, CARS, "") is None
    assert resolve(store, CARS, None) is None


def test_resolution_is_deterministic(store):
    make_car(store, legacy_num=3)
    first = resolve(store, CARS, "3")
    assert all(resolve(store, CARS, "3") == first for _ in range(3))


def test_rental_order_prefers_string_over_numeric(store):
    by_string = make_rental(store, car_ref=("numeric", "1"), user_ref=("numeric", "1"), legacy_id="42")
    make_rental(store, car_ref=("numeric", "1"), user_ref=("numeric", "1"), legacy_num=42)
    assert resolve(store, RENTALS, "42", RENTAL_ORDER)["key"] == by_string["key"]


def test_stored_ref_falls_back_to_other_schemes(store):
    car = make_car(store, legacy_num=9)
    assert resolve_ref(store, CARS, Ref(IdScheme.STRING, "9"))["key"] == car["key"]
    assert resolve_ref(store, CARS, Ref(IdScheme.SURROGATE, car["key"]))["key"] == car["key"]
    assert resolve_ref(store, CARS, None) is None


def test_aliases_cover_every_scheme():
    rec = {"key": "k", "legacy_num": 5, "legacy_id": None}
    assert aliases(rec) == {
        Ref(IdScheme.SURROGATE, "k"),
        Ref(IdScheme.NUMERIC, "5"),
        Ref(IdScheme.STRING, "5"),
    }


def test_public_id_prefers_legacy_ids():
    assert public_id({"key": "k", "legacy_id": "abc"}) == "abc"
    assert public_id({"key": "k", "legacy_num": 4}) == "4"
    assert public_id({"key": "k"}) == "k"


def test_split_legacy_id():
    assert split_legacy_id(7) == {"legacy_num": 7}
    assert split_legacy_id("7") == {"legacy_id": "7"}
    assert split_legacy_id(None) == {}


def test_out_of_range_number_is_a_miss(store):
    make_car(store, legacy_num=7)
    assert resolve(store, CARS, "99999999999999999999") is None
    assert resolve(store, CARS, "-99999999999999999999") is None


def test_out_of_range_number_falls_through_to_string_id(store):
    car = make_car(store, legacy_id="99999999999999999999")
    assert resolve(store, CARS, "99999999999999999999")["key"] == car["key"]


def test_split_legacy_id_keeps_oversized_numbers_as_strings():
    assert split_legacy_id(2 ** 40) == {"legacy_id": str(2 ** 40)}
    assert split_legacy_id(2 ** 31 - 1) == {"legacy_num": 2 ** 31 - 1}
