import logging
from logging import INFO

from tortoise import Tortoise, connections

from qrdine.core.config import DB_URL

# Set logging level for Tortoise ORM
logging.getLogger('tortoise').setLevel(INFO)
log = logging.getLogger("qrdine.db")

# Define all models modules for the ORM
MODELS_MODULES = [
    "qrdine.models.tenant",
    "qrdine.models.account",
    "qrdine.models.menu",
    "qrdine.models.order",
    "qrdine.models.rating",
    "qrdine.models.processed_event",
]


async def init_db(db_url: str = DB_URL, generate_schemas: bool = True):
    """Initializes the Tortoise ORM connection and generates schemas."""
    try:
        await Tortoise.init(
            db_url=db_url,
            modules={"models": MODELS_MODULES},
        )
        if generate_schemas:
            # Generate the database schema (create tables)
            await Tortoise.generate_schemas()
        log.info("Database connection established and schemas generated.")
    except Exception as e:
        log.critical(f"Could not connect to database. Error: {e}")
        # Re-raise to prevent the application from starting without a database
        raise


async def close_db():
    """Closes all database connections."""
    await connections.close_all()
    log.info("Database connections closed.")
