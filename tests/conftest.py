import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("STORAGE_BACKEND", "json")
os.environ.setdefault("ADMIN_PASSWORD", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.security import hash_password
from app.db.session import Base, make_engine
from app.services.auth_service import issue_token
from app.storage.base import CARS, RENTALS, USERS
from app.storage.json_store import JsonFileStore
from app.storage.sql_store import SqlStore


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def sql_store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture(params=["json", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def client(store):
    from app.main import app
    app.state.store = store
    yield TestClient(app)
    app.state.store = None


def make_user(store, email="alice@example.com", username=None, role="user", password="secret123", **extra):
    return store.insert(USERS, {
        "email": email,
        "username": username or email.split("@")[0],
        "first_name": "Test",
        "last_name": "User",
        "role": role,
        "password_hash": hash_password(password),
        **extra,
    })


def make_car(store, price_per_day=50.0, make="Toyota", model="Corolla", year=2022, **extra):
    return store.insert(CARS, {
        "make": make,
        "model": model,
        "year": year,
        "price_per_day": price_per_day,
        "currency": "USD",
        **extra,
    })


def make_rental(store, car_ref=("surrogate", None), user_ref=("surrogate", None), start="2024-01-01",
                end="2024-01-05", status="active", user_email="", **extra):
    return store.insert(RENTALS, {
        "car_ref_kind": car_ref[0],
        "car_ref": car_ref[1],
        "user_ref_kind": user_ref[0],
        "user_ref": user_ref[1],
        "user_email": user_email,
        "username": "",
        "start_date": start,
        "end_date": end,
        "total_days": 4,
        "price_per_day": 50.0,
        "total_price": 200.0,
        "status": status,
        **extra,
    })


def auth(user) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}
