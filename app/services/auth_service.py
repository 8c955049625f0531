import logging
from typing import Optional

from app.core.errors import Conflict, Unauthorized, ValidationError
from app.core.security import create_access_token, hash_password, verify_password, verify_token
from app.storage.base import USERS, Record, Store

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = ("password_hash",)
MIN_PASSWORD_LENGTH = 8


def public_user(user: Record) -> Record:
    return {k: v for k, v in user.items() if k not in SENSITIVE_FIELDS}


def issue_token(user: Record) -> str:
    return create_access_token(user["key"], user["email"])


def signup(
    store: Store,
    first_name: str,
    last_name: str,
    username: str,
    email: str,
    password: str,
    phone_number: str = "",
    role: str = "user",
) -> Record:
    email = (email or "").strip().lower()
    username = (username or "").strip()
    if not all([first_name, last_name, username, email, password]):
        raise ValidationError("firstName, lastName, username, email and password required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password too short")
    if store.find_one(USERS, "email", email):
        raise Conflict("User with this email already exists")
    if store.find_one(USERS, "username", username):
        raise Conflict("Username already taken")

    user = store.insert(USERS, {
        "first_name": first_name.strip(),
        "last_name": last_name.strip(),
        "username": username,
        "email": email,
        "phone_number": phone_number or "",
        "role": role,
        "password_hash": hash_password(password),
    })
    logger.info("user %s signed up", email)
    return user


def signin(store: Store, login: str, password: str) -> Record:
    """``login`` is either the email or the username."""
    if not login or not password:
        raise ValidationError("Email/Username and password required")
    user = store.find_one(USERS, "email", login.strip().lower()) or store.find_one(USERS, "username", login.strip())
    if not user or not verify_password(password, user.get("password_hash") or ""):
        raise Unauthorized("Invalid credentials")
    return user


def principal_from_token(store: Store, token: Optional[str]) -> Record:
    if not token:
        raise Unauthorized("Not authorized, no token")
    email = verify_token(token)
    if not email:
        raise Unauthorized("Not authorized, token failed")
    user = store.find_one(USERS, "email", email.lower())
    if not user:
        raise Unauthorized("User not found")
    return user


def ensure_user(store: Store, email: str, password: str, role: str, username: str) -> Record:
    u = store.find_one(USERS, "email", email.lower())
    if u:
        return u
    return store.insert(USERS, {
        "email": email.lower(),
        "username": username,
        "first_name": username.capitalize(),
        "last_name": "",
        "role": role,
        "password_hash": hash_password(password),
    })
