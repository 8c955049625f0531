"""Account administration: list, view, edit and delete users.

Users address each other by any of their ids (surrogate key or legacy id).
A user may read and edit their own account; admins may do both for any
account, and only admins list, delete or change roles.
"""
import logging
from typing import Optional

from app.core.errors import Conflict, Forbidden, NotFound, ValidationError
from app.core.security import hash_password
from app.services.auth_service import MIN_PASSWORD_LENGTH, public_user
from app.services.identity import USER_ORDER, resolve
from app.storage.base import USERS, Record, Store

logger = logging.getLogger(__name__)

ROLES = ("user", "admin")
PROFILE_FIELDS = ("first_name", "last_name", "username", "email", "phone_number")
# ids a broken client sends when it lost the real one
_PLACEHOLDER_IDS = ("", "undefined", "null")


def _is_admin(principal: Record) -> bool:
    return principal.get("role") == "admin"


def find_user(store: Store, user_id: Optional[str]) -> Record:
    if user_id is None or user_id.strip() in _PLACEHOLDER_IDS:
        raise ValidationError("Invalid user ID")
    user = resolve(store, USERS, user_id, USER_ORDER)
    if user is None:
        raise NotFound("User not found")
    return user


def _check_access(principal: Record, user: Record) -> None:
    if not _is_admin(principal) and principal["key"] != user["key"]:
        raise Forbidden("Not authorized to access this user")


def list_users(store: Store) -> list[Record]:
    return [public_user(u) for u in store.scan(USERS)]


def get_user(store: Store, principal: Record, user_id: str) -> Record:
    user = find_user(store, user_id)
    _check_access(principal, user)
    return public_user(user)


def update_user(store: Store, principal: Record, user_id: str, changes: dict) -> Record:
    user = find_user(store, user_id)
    _check_access(principal, user)

    updates = {k: v for k, v in changes.items() if k in PROFILE_FIELDS and v is not None}
    if "email" in updates:
        updates["email"] = updates["email"].strip().lower()
    if "username" in updates:
        updates["username"] = updates["username"].strip()
    if any(not updates[k] for k in ("email", "username") if k in updates):
        raise ValidationError("email and username cannot be empty")

    if "email" in updates:
        other = store.find_one(USERS, "email", updates["email"])
        if other and other["key"] != user["key"]:
            raise Conflict(f'Email "{updates["email"]}" already exists. Please use a different email.')
    if "username" in updates:
        other = store.find_one(USERS, "username", updates["username"])
        if other and other["key"] != user["key"]:
            raise Conflict(f'Username "{updates["username"]}" already exists. Please use a different username.')

    password = changes.get("password")
    if password:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password too short")
        updates["password_hash"] = hash_password(password)

    role = changes.get("role")
    if role is not None and role != user.get("role"):
        if not _is_admin(principal):
            raise Forbidden("Only admins can change roles")
        if role not in ROLES:
            raise ValidationError(f"role must be one of: {', '.join(ROLES)}")
        updates["role"] = role

    if not updates:
        return public_user(user)
    updated = store.update(USERS, user["key"], updates)
    logger.info("user %s updated by %s: %s", user["key"], principal["email"], sorted(updates))
    return public_user(updated)


def delete_user(store: Store, principal: Record, user_id: str) -> None:
    user = find_user(store, user_id)
    if user["key"] == principal["key"]:
        raise Conflict("Admins cannot delete their own account")
    store.delete(USERS, user["key"])
    # rentals keep their snapshots; the admin listing skips them once unresolvable
    logger.info("user %s deleted by %s", user["key"], principal["email"])
