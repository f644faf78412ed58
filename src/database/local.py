import logging
from .nosql_adapter import NoSQLAdapter
from .mongo_adapter import MongoAdapter

logger = logging.getLogger(__name__)


def get_nosql_adapter(settings):
    """Pick the document store for the deployment mode.

    ``local-dev`` keeps documents in a SQLite file; every other mode talks to
    MongoDB using the configured host, port and database name. The adapter is
    returned unconnected so the caller owns its lifecycle.
    """
    if settings.deployment_mode == 'local-dev':
        logger.info(f"Using SQLite document store at {settings.sqlite_path}")
        return NoSQLAdapter(settings.sqlite_path)

    logger.info(f"Using MongoDB at {settings.db_host}:{settings.db_port}/{settings.db_database}")
    return MongoAdapter(
        host=settings.db_host,
        port=settings.db_port,
        database_name=settings.db_database
    )
