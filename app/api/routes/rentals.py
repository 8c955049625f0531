from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_store, require_roles
from app.core.errors import NotFound
from app.schemas.rental import (
    AvailabilityOut,
    BookingsOut,
    DateRange,
    RentalCreate,
    RentalCreated,
    RentalOut,
    RentalUpdate,
)
from app.services import booking_service, rental_views
from app.services.availability import active_bookings, is_available
from app.services.identity import CAR_ORDER, resolve
from app.storage.base import CARS, Record, Store

router = APIRouter(prefix="/rentals", tags=["rentals"])


def _car_or_404(store: Store, car_id: str) -> Record:
    car = resolve(store, CARS, car_id, CAR_ORDER)
    if car is None:
        raise NotFound("Car not found")
    return car


@router.post("/{car_id}/availability", response_model=AvailabilityOut)
def check_availability(car_id: str, body: DateRange, store: Store = Depends(get_store)):
    car = _car_or_404(store, car_id)
    return AvailabilityOut(
        available=is_available(store, car, body.startDate, body.endDate),
        car={"id": car_id},
    )


@router.get("/{car_id}/bookings", response_model=BookingsOut)
def get_bookings(car_id: str, store: Store = Depends(get_store)):
    """Active bookings of a car, for the availability calendar."""
    car = _car_or_404(store, car_id)
    return BookingsOut(bookings=[DateRange(**b) for b in active_bookings(store, car)])


@router.get("/user", response_model=list[RentalOut])
def my_rentals(store: Store = Depends(get_store), me: Record = Depends(get_current_user)):
    return [RentalOut.from_record(v.rental, car=v.car) for v in rental_views.list_for_principal(store, me)]


@router.get("/all", response_model=list[RentalOut], dependencies=[Depends(require_roles("admin"))])
def all_rentals(store: Store = Depends(get_store)):
    return [RentalOut.from_record(v.rental, car=v.car, user=v.user) for v in rental_views.list_all(store)]


@router.post("/{car_id}", response_model=RentalCreated)
def rent_car(
    car_id: str,
    body: RentalCreate,
    store: Store = Depends(get_store),
    me: Record = Depends(get_current_user),
):
    rental, car = booking_service.create_booking(
        store,
        me,
        car_id,
        body.startDate,
        body.endDate,
        pickup_location=body.pickupLocation,
        dropoff_location=body.dropoffLocation,
        special_requests=body.specialRequests,
        payment_info=body.paymentInfo,
    )
    return RentalCreated(message="Car rented successfully", rental=RentalOut.from_record(rental, car=car))


@router.delete("/{rental_id}")
def cancel_rental(rental_id: str, store: Store = Depends(get_store), me: Record = Depends(get_current_user)):
    booking_service.cancel_booking(store, me, rental_id)
    return {"message": "Rental cancelled successfully"}


@router.put("/{rental_id}", response_model=RentalOut, dependencies=[Depends(require_roles("admin"))])
def update_rental(rental_id: str, body: RentalUpdate, store: Store = Depends(get_store)):
    rental, car = booking_service.update_booking(
        store, rental_id, start_date=body.startDate, end_date=body.endDate, status=body.status,
    )
    return RentalOut.from_record(rental, car=car)
