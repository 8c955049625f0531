import logging

from app.core.errors import Conflict, NotFound
from app.services.identity import CAR_ORDER, resolve, split_legacy_id
from app.storage.base import CARS, Record, Store

logger = logging.getLogger(__name__)


def list_cars(store: Store) -> list[Record]:
    return store.scan(CARS)


def get_car(store: Store, car_id: str) -> Record:
    car = resolve(store, CARS, car_id, CAR_ORDER)
    if car is None:
        raise NotFound("Car not found")
    return car


def create_car(store: Store, data: dict, legacy_id=None) -> Record:
    legacy = split_legacy_id(legacy_id)
    for field, value in legacy.items():
        if store.find_one(CARS, field, value):
            raise Conflict(f'Car with ID "{legacy_id}" already exists. Please use a different ID.')
    dupes = store.scan(CARS, where={"make": data["make"], "model": data["model"], "year": data["year"]})
    if dupes:
        raise Conflict(f'Car "{data["year"]} {data["make"]} {data["model"]}" already exists.')
    car = store.insert(CARS, {**data, **legacy})
    logger.info("car %s created (%s %s)", car["key"], car["make"], car["model"])
    return car


def update_car(store: Store, car_id: str, changes: dict) -> Record:
    car = get_car(store, car_id)
    return store.update(CARS, car["key"], changes)


def delete_car(store: Store, car_id: str) -> None:
    car = get_car(store, car_id)
    store.delete(CARS, car["key"])
    logger.info("car %s deleted", car["key"])
