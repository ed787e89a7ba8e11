"""Database engine initialization and connection management."""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .schema import Base

logger = logging.getLogger(__name__)


def init_database(db_path: str) -> sessionmaker[Any]:
    """Initialize database and return session factory.

    `":memory:"` gives an in-memory database shared by every session.
    """
    engine_options: dict[str, Any] = {}
    if db_path == ":memory:":
        url = "sqlite://"
        engine_options["poolclass"] = StaticPool
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        url = f"sqlite:///{db_path}"

    engine = create_engine(
        url,
        echo=False,
        connect_args={"check_same_thread": False},
        **engine_options,
    )
    Base.metadata.create_all(engine)
    logger.info(f"Ride store ready at {db_path}")

    return sessionmaker(bind=engine, expire_on_commit=False)
