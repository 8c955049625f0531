from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_store, require_roles
from app.schemas.auth import UserOut
from app.schemas.user import UserUpdate
from app.services import user_service
from app.storage.base import Record, Store

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserOut], dependencies=[Depends(require_roles("admin"))])
def list_users(store: Store = Depends(get_store)):
    return [UserOut.from_record(u) for u in user_service.list_users(store)]


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, store: Store = Depends(get_store), me: Record = Depends(get_current_user)):
    return UserOut.from_record(user_service.get_user(store, me, user_id))


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UserUpdate,
    store: Store = Depends(get_store),
    me: Record = Depends(get_current_user),
):
    return UserOut.from_record(user_service.update_user(store, me, user_id, body.to_changes()))


@router.delete("/{user_id}")
def delete_user(user_id: str, store: Store = Depends(get_store), me: Record = Depends(require_roles("admin"))):
    user_service.delete_user(store, me, user_id)
    return {"message": "User deleted successfully"}
