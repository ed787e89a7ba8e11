"""HTTP surface for fares and rides."""

from .app import create_app

__all__ = ["create_app"]
