from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.services.identity import public_id


class SignupRequest(BaseModel):
    firstName: str
    lastName: str
    username: str
    email: str  # plain str to allow .local and other dev domains
    password: str
    phoneNumber: Optional[str] = ""


class SigninRequest(BaseModel):
    email: str  # email or username
    password: str


class UserOut(BaseModel):
    id: str
    key: str
    firstName: str = ""
    lastName: str = ""
    username: str
    email: str
    phoneNumber: str = ""
    role: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_record(cls, u: dict) -> "UserOut":
        return cls(
            id=public_id(u),
            key=u["key"],
            firstName=u.get("first_name") or "",
            lastName=u.get("last_name") or "",
            username=u.get("username") or "",
            email=u["email"],
            phoneNumber=u.get("phone_number") or "",
            role=u.get("role") or "user",
            createdAt=u.get("created_at"),
        )


class AuthOut(BaseModel):
    user: UserOut
    token: str
