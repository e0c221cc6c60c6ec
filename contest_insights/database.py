# contest_insights/database.py

import logging
from typing import Optional, Tuple

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from contest_insights import config

logger = logging.getLogger(__name__)


def open_database(
    uri: Optional[str] = None,
    db_name: Optional[str] = None,
) -> Tuple[MongoClient, Database]:
    """
    Connect once at startup and verify the server answers a ping.
    Any failure is raised to the caller; the process cannot serve without it.
    """
    uri = uri or config.MONGODB_URI
    db_name = db_name or config.DB_NAME
    if not uri:
        raise RuntimeError("MONGODB_URI is not set")

    logger.info("Connecting to MongoDB...")
    client = MongoClient(uri)
    try:
        client.admin.command("ping")
    except PyMongoError:
        logger.critical("MongoDB connection error", exc_info=True)
        client.close()
        raise
    logger.info("Connected to MongoDB database %s", db_name)
    return client, client[db_name]
