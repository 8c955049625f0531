from app.storage.base import RENTALS
from conftest import auth, make_car, make_rental, make_user

DATES = {"startDate": "2024-06-01", "endDate": "2024-06-04"}


def test_rent_car(client, store):
    user = make_user(store)
    car = make_car(store, price_per_day=40, legacy_num=1)
    r = client.post("/rentals/1", json={**DATES, "pickupLocation": "Airport"}, headers=auth(user))
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["message"] == "Car rented successfully"
    rental = body["rental"]
    assert rental["status"] == "active"
    assert rental["totalDays"] == 3
    assert rental["totalPrice"] == 120
    assert rental["pickupLocation"] == "Airport"
    assert rental["dropoffLocation"] == "Default Location"
    assert rental["car"]["key"] == car["key"]
    assert rental["userEmail"] == user["email"]


def test_rent_requires_token(client, store):
    car = make_car(store)
    r = client.post(f"/rentals/{car['key']}", json=DATES)
    assert r.status_code == 401
    assert r.json()["detail"] == "Not authorized, no token"
    r = client.post(f"/rentals/{car['key']}", json=DATES, headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert store.scan(RENTALS) == []


def test_rent_unknown_car(client, store):
    user = make_user(store)
    r = client.post("/rentals/123", json=DATES, headers=auth(user))
    assert r.status_code == 404
    assert r.json()["detail"] == "Car not found"


def test_rent_bad_dates(client, store):
    user = make_user(store)
    car = make_car(store)
    r = client.post(f"/rentals/{car['key']}", json={"startDate": "2024-06-04", "endDate": "2024-06-01"},
                    headers=auth(user))
    assert r.status_code == 400
    r = client.post(f"/rentals/{car['key']}", json={"startDate": "2024-06-04"}, headers=auth(user))
    assert r.status_code == 400


def test_rent_conflict(client, store):
    user = make_user(store)
    car = make_car(store)
    assert client.post(f"/rentals/{car['key']}", json=DATES, headers=auth(user)).status_code == 200
    r = client.post(f"/rentals/{car['key']}", json={"startDate": "2024-06-03", "endDate": "2024-06-08"},
                    headers=auth(user))
    assert r.status_code == 409
    assert r.json()["detail"] == "Car is already rented for the selected dates"


def test_availability_and_bookings(client, store):
    user = make_user(store)
    car = make_car(store, legacy_id="corolla-1")
    make_rental(store, car_ref=("string", "corolla-1"), user_ref=("surrogate", user["key"]),
                start="2024-06-01", end="2024-06-04")
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("surrogate", user["key"]),
                start="2024-07-01", end="2024-07-02", status="cancelled")

    r = client.post("/rentals/corolla-1/availability", json={"startDate": "2024-06-04", "endDate": "2024-06-06"})
    assert r.status_code == 200
    assert r.json() == {"available": False, "car": {"id": "corolla-1"}}
    r = client.post("/rentals/corolla-1/availability", json={"startDate": "2024-07-01", "endDate": "2024-07-02"})
    assert r.json()["available"] is True

    r = client.get(f"/rentals/{car['key']}/bookings")
    assert r.status_code == 200
    assert r.json() == {"bookings": [{"startDate": "2024-06-01", "endDate": "2024-06-04"}]}


def test_availability_unknown_car(client):
    assert client.get("/rentals/nope/bookings").status_code == 404
    r = client.post("/rentals/nope/availability", json=DATES)
    assert r.status_code == 404


def test_my_rentals(client, store):
    user = make_user(store)
    other = make_user(store, email="dave@example.com")
    car = make_car(store)
    client.post(f"/rentals/{car['key']}", json=DATES, headers=auth(user))
    client.post(f"/rentals/{car['key']}", json={"startDate": "2024-08-01", "endDate": "2024-08-02"},
                headers=auth(other))
    r = client.get("/rentals/user", headers=auth(user))
    assert r.status_code == 200
    rentals = r.json()
    assert len(rentals) == 1
    assert rentals[0]["userEmail"] == user["email"]
    assert rentals[0]["car"]["key"] == car["key"]


def test_cancel_rental(client, store):
    user = make_user(store)
    other = make_user(store, email="eve@example.com")
    car = make_car(store)
    rental = client.post(f"/rentals/{car['key']}", json=DATES, headers=auth(user)).json()["rental"]

    assert client.delete(f"/rentals/{rental['id']}", headers=auth(other)).status_code == 403
    r = client.delete(f"/rentals/{rental['id']}", headers=auth(user))
    assert r.status_code == 200
    assert r.json() == {"message": "Rental cancelled successfully"}
    assert store.get(RENTALS, rental["key"])["status"] == "cancelled"
    assert client.delete("/rentals/missing", headers=auth(user)).status_code == 404


def test_all_rentals_is_admin_only(client, store):
    user = make_user(store)
    admin = make_user(store, email="admin@example.com", role="admin")
    car = make_car(store)
    client.post(f"/rentals/{car['key']}", json=DATES, headers=auth(user))
    make_rental(store, car_ref=("surrogate", car["key"]), user_ref=("numeric", "999"),
                start="2024-09-01", end="2024-09-02")

    r = client.get("/rentals/all", headers=auth(user))
    assert r.status_code == 403
    assert r.json()["detail"] == "Not authorized as admin"

    r = client.get("/rentals/all", headers=auth(admin))
    assert r.status_code == 200
    rentals = r.json()
    assert len(rentals) == 1
    assert rentals[0]["user"]["email"] == user["email"]
    assert "password_hash" not in rentals[0]["user"]


def test_admin_updates_rental(client, store):
    user = make_user(store)
    admin = make_user(store, email="admin@example.com", role="admin")
    car = make_car(store, price_per_day=30)
    rental = client.post(f"/rentals/{car['key']}", json=DATES, headers=auth(user)).json()["rental"]

    body = {"startDate": "2024-06-10", "endDate": "2024-06-15"}
    assert client.put(f"/rentals/{rental['id']}", json=body, headers=auth(user)).status_code == 403
    r = client.put(f"/rentals/{rental['id']}", json=body, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["totalPrice"] == 150

    r = client.put(f"/rentals/{rental['id']}", json={"status": "unknown"}, headers=auth(admin))
    assert r.status_code == 400
