import contextlib
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from database.database import SessionLocal
from database.repository import ReadinessRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def readiness_uow(session_factory: Optional[sessionmaker] = None):
    """Per-unit-of-work transaction scope.

    Yields a ReadinessRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with readiness_uow(factory) as repo:
            transition = repo.get_transition(transition_id)
            # perform operations...
        # commit happens automatically on successful exit
    """
    session = (session_factory or SessionLocal)()
    repo = ReadinessRepository(session)
    try:
        yield repo
        repo.commit()
    except Exception:
        repo.rollback()
        raise
    finally:
        session.close()
