"""Unit-of-work scope over a session factory."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Open a session whose writes commit together when the block exits.

    Any exception rolls back everything written in the block, so a hub
    round trip never ends up with only one of its two rides stored.
    """
    with session_factory() as session:
        try:
            yield session
        except Exception as e:
            session.rollback()
            logger.debug(f"Rolled back ride storage work after {type(e).__name__}")
            raise
        session.commit()
