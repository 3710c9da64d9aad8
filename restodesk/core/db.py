from tortoise import Tortoise
from restodesk.core.config import DB_URL, GENERATE_SCHEMAS
import logging
from logging import INFO

log = logging.getLogger(__name__)

# Set logging level for Tortoise ORM
logging.getLogger('tortoise').setLevel(INFO)

# Define all models modules for the ORM
MODELS_MODULES = [
    "restodesk.models.restaurant",
    "restodesk.models.user",
    "restodesk.models.inventory",
    "restodesk.models.order",
    "restodesk.models.booking",
]

async def init_db(db_url: str = DB_URL, generate_schemas: bool = GENERATE_SCHEMAS):
    """Initializes the Tortoise ORM connection and optionally generates schemas."""
    try:
        await Tortoise.init(
            db_url=db_url,
            modules={"models": MODELS_MODULES},
        )
        if generate_schemas:
            await Tortoise.generate_schemas()
        log.info("Database connection established.")
    except Exception:
        log.exception("Could not connect to database at %s", db_url)
        # Re-raise to prevent the application from starting without a database
        raise

async def close_db():
    """Closes all database connections."""
    await Tortoise.close_connections()
    log.info("Database connections closed.")
