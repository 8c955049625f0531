from fastapi import APIRouter, Depends

from app.api.deps import get_store, require_roles
from app.schemas.car import CarIn, CarOut, CarUpdate
from app.services import catalog_service
from app.storage.base import Store

router = APIRouter(prefix="/items", tags=["cars"])


@router.get("/allItems", response_model=list[CarOut])
def list_cars(store: Store = Depends(get_store)):
    return [CarOut.from_record(c) for c in catalog_service.list_cars(store)]


@router.get("/{car_id}", response_model=CarOut)
def get_car(car_id: str, store: Store = Depends(get_store)):
    return CarOut.from_record(catalog_service.get_car(store, car_id))


@router.post("", response_model=CarOut, status_code=201, dependencies=[Depends(require_roles("admin"))])
def add_car(body: CarIn, store: Store = Depends(get_store)):
    data = body.model_dump(exclude={"id"})
    return CarOut.from_record(catalog_service.create_car(store, data, legacy_id=body.id))


@router.put("/{car_id}", response_model=CarOut, dependencies=[Depends(require_roles("admin"))])
def update_car(car_id: str, body: CarUpdate, store: Store = Depends(get_store)):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    return CarOut.from_record(catalog_service.update_car(store, car_id, changes))


@router.delete("/{car_id}", dependencies=[Depends(require_roles("admin"))])
def delete_car(car_id: str, store: Store = Depends(get_store)):
    catalog_service.delete_car(store, car_id)
    return {"message": "Car deleted successfully"}
