"""Database persistence module."""

from .database import init_database
from .repositories import RideRepository, UserRepository
from .schema import Base, Ride, User
from .transaction import session_scope

__all__ = [
    "init_database",
    "Base",
    "Ride",
    "User",
    "RideRepository",
    "UserRepository",
    "session_scope",
]
