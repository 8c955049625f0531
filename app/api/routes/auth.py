from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_store
from app.schemas.auth import AuthOut, SigninRequest, SignupRequest, UserOut
from app.services import auth_service
from app.storage.base import Record, Store

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AuthOut, status_code=201)
def signup(body: SignupRequest, store: Store = Depends(get_store)):
    user = auth_service.signup(
        store,
        first_name=body.firstName,
        last_name=body.lastName,
        username=body.username,
        email=body.email,
        password=body.password,
        phone_number=body.phoneNumber or "",
    )
    return AuthOut(user=UserOut.from_record(user), token=auth_service.issue_token(user))


@router.post("/signin", response_model=AuthOut)
def signin(body: SigninRequest, store: Store = Depends(get_store)):
    user = auth_service.signin(store, body.email, body.password)
    return AuthOut(user=UserOut.from_record(user), token=auth_service.issue_token(user))


@router.get("/me", response_model=UserOut)
def me(me: Record = Depends(get_current_user)):
    """Return current user info including role."""
    return UserOut.from_record(me)
