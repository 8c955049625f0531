from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.errors import Forbidden
from app.services.auth_service import principal_from_token
from app.storage.base import Record, Store

bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    store: Store = Depends(get_store),
) -> Record:
    return principal_from_token(store, creds.credentials if creds else None)


def require_roles(*roles: str):
    def _guard(user: Record = Depends(get_current_user)) -> Record:
        if user.get("role") not in roles:
            raise Forbidden("Not authorized as admin" if roles == ("admin",) else "Forbidden")
        return user
    return _guard
