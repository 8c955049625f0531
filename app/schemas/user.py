from typing import Optional

from pydantic import BaseModel


class UserUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None  # admin only

    def to_changes(self) -> dict:
        data = self.model_dump(exclude_unset=True)
        names = {"firstName": "first_name", "lastName": "last_name", "phoneNumber": "phone_number"}
        return {names.get(k, k): v for k, v in data.items()}
