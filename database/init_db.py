import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from tenacity import retry, stop_after_attempt, wait_fixed, before_sleep_log

from database.models import Base

logger = logging.getLogger(__name__)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_fixed(2),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True
)
def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables, waiting for the database to come up if needed."""
    if bind is None:
        from database.database import engine as bind

    logger.info("Initializing database...")
    try:
        with bind.connect() as connection:
            connection.execute(text("SELECT 1"))

        Base.metadata.create_all(bind=bind)
        logger.info("Tables created or verified.")

    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
