import logging
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from carlens.models import CarRecord, User

logger = logging.getLogger(__name__)

def init_db(engine: Engine) -> None:
    """
    Initialize the database by creating the users and cars tables.
    Existing tables are left untouched.
    """
    try:
        # users first, cars references it
        tables = [User.__table__, CarRecord.__table__]
        for table in tables:
            table.create(engine, checkfirst=True)
            logger.info(f"Table {table.name} ready")
    except SQLAlchemyError as e:
        logger.error(f"Error creating database tables: {e}")
        raise
