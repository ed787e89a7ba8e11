"""Repository layer for database CRUD operations."""

from .ride_repository import RideRepository
from .user_repository import UserRepository

__all__ = ["RideRepository", "UserRepository"]
