from conftest import auth, make_car, make_user

SIGNUP = {
    "firstName": "Frank",
    "lastName": "Castle",
    "username": "frank",
    "email": "Frank@Example.com",
    "password": "longenough",
}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["database"] in ("json", "database")


def test_signup_signin_me(client):
    r = client.post("/auth/signup", json=SIGNUP)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["user"]["email"] == "frank@example.com"
    assert body["user"]["role"] == "user"
    assert "password_hash" not in body["user"]

    for login in ("frank@example.com", "frank"):
        r = client.post("/auth/signin", json={"email": login, "password": "longenough"})
        assert r.status_code == 200
        token = r.json()["token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["username"] == "frank"


def test_signup_ignores_role(client):
    r = client.post("/auth/signup", json={**SIGNUP, "role": "admin"})
    assert r.json()["user"]["role"] == "user"


def test_signup_duplicates_and_validation(client):
    assert client.post("/auth/signup", json=SIGNUP).status_code == 201
    assert client.post("/auth/signup", json=SIGNUP).status_code == 409
    assert client.post("/auth/signup", json={**SIGNUP, "email": "other@example.com"}).status_code == 409
    r = client.post("/auth/signup", json={**SIGNUP, "email": "x@example.com", "username": "x", "password": "short"})
    assert r.status_code == 400
    r = client.post("/auth/signup", json={"email": "y@example.com"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid request"


def test_signin_wrong_password(client, store):
    make_user(store)
    r = client.post("/auth/signin", json={"email": "alice@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid credentials"


def test_imported_user_without_known_hash_cannot_sign_in(client, store):
    make_user(store, email="legacy@example.com", password_hash="$2b$10$notarealbcrypthashatall")
    r = client.post("/auth/signin", json={"email": "legacy@example.com", "password": "whatever1"})
    assert r.status_code == 401


def test_me_requires_token(client):
    assert client.get("/auth/me").status_code == 401


def test_list_and_get_cars(client, store):
    car = make_car(store, legacy_num=3)
    make_car(store, make="Honda", model="Civic")
    r = client.get("/items/allItems")
    assert r.status_code == 200
    assert len(r.json()) == 2
    r = client.get("/items/3")
    assert r.status_code == 200
    assert r.json()["key"] == car["key"]
    assert r.json()["id"] == "3"
    assert client.get("/items/99").status_code == 404


def test_car_admin_crud(client, store):
    admin = make_user(store, email="admin@example.com", role="admin")
    user = make_user(store)
    payload = {"id": "tesla-3", "make": "Tesla", "model": "Model 3", "year": 2023, "price_per_day": 120}

    assert client.post("/items", json=payload).status_code == 401
    assert client.post("/items", json=payload, headers=auth(user)).status_code == 403

    r = client.post("/items", json=payload, headers=auth(admin))
    assert r.status_code == 201, r.text
    assert r.json()["id"] == "tesla-3"
    assert client.post("/items", json=payload, headers=auth(admin)).status_code == 409
    assert client.post("/items", json={**payload, "id": None}, headers=auth(admin)).status_code == 409

    r = client.put("/items/tesla-3", json={"price_per_day": 99.5}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["price_per_day"] == 99.5
    assert r.json()["make"] == "Tesla"

    r = client.delete("/items/tesla-3", headers=auth(admin))
    assert r.json() == {"message": "Car deleted successfully"}
    assert client.get("/items/tesla-3").status_code == 404


def test_car_validation(client, store):
    admin = make_user(store, email="admin@example.com", role="admin")
    r = client.post("/items", json={"make": "Ford", "model": "T", "year": 1800, "price_per_day": 10},
                    headers=auth(admin))
    assert r.status_code == 400


def test_oversized_numeric_ids_are_not_found(client, store):
    user = make_user(store)
    huge = "99999999999999999999"
    assert client.get(f"/items/{huge}").status_code == 404
    assert client.get(f"/rentals/{huge}/bookings").status_code == 404
    assert client.post(f"/rentals/{huge}", json={"startDate": "2024-06-01", "endDate": "2024-06-02"},
                       headers=auth(user)).status_code == 404
    assert client.delete(f"/rentals/{huge}", headers=auth(user)).status_code == 404
