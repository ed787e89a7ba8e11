from typing import Literal

from pydantic import BaseModel


class UserProfileUpdate(BaseModel):
    name: str = ""
    role: Literal["user", "driver"] = "user"
    phone_number: str | None = None
    home_address: str | None = None


class UserProfileResponse(UserProfileUpdate):
    id: str
