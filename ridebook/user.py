"""User profiles and the authenticated principal acting on rides."""

from typing import Literal

from pydantic import BaseModel

Role = Literal["user", "driver"]


class UserProfile(BaseModel):
    id: str
    name: str = ""
    role: Role = "user"
    phone_number: str | None = None
    home_address: str | None = None


class Principal(BaseModel):
    user_id: str
    role: Role

    @property
    def is_driver(self) -> bool:
        return self.role == "driver"

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "Principal":
        return cls(user_id=profile.id, role=profile.role)
