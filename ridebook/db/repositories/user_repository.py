"""User profile repository."""

from sqlalchemy.orm import Session

from ridebook.user import UserProfile

from ..schema import User


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: str) -> UserProfile | None:
        row = self.session.get(User, user_id)
        if row is None:
            return None
        return UserProfile(
            id=row.id,
            name=row.name,
            role=row.role,
            phone_number=row.phone_number,
            home_address=row.home_address,
        )

    def upsert(self, profile: UserProfile) -> None:
        row = self.session.get(User, profile.id)
        if row is None:
            row = User(id=profile.id)
            self.session.add(row)
        row.name = profile.name
        row.role = profile.role
        row.phone_number = profile.phone_number
        row.home_address = profile.home_address
