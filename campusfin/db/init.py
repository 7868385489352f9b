"""Initialize database tables."""
from sqlmodel import SQLModel

import campusfin.models  # noqa: F401  (registers tables)
from campusfin.db.config import engine
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.db")


def init_db():
    """Create all tables in the database."""
    logger.info("Creating all tables")
    SQLModel.metadata.create_all(engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    init_db()
