import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from data_layer.mongodb.connection import (
    get_mongodb_client,
    close_mongodb_connections,
    get_database
)
from core.config import settings

logger = logging.getLogger(__name__)

# collection -> list of (keys, options)
COLLECTION_INDEXES = {
    "users": [
        ([("username", ASCENDING)], {"unique": True}),
    ],
    "tasks": [
        ([("user_id", ASCENDING), ("date", ASCENDING), ("time", ASCENDING)], {}),
        ([("user_id", ASCENDING), ("custom_list", ASCENDING)], {}),
    ],
    "journals": [
        ([("user_id", ASCENDING), ("date", DESCENDING)], {}),
        # One daily entry per user and day
        ([("user_id", ASCENDING), ("date", ASCENDING)], {
            "unique": True,
            "name": "unique_daily_entry",
            "partialFilterExpression": {"type": "daily"},
        }),
    ],
    "focus_logs": [
        ([("user_id", ASCENDING), ("date", DESCENDING)], {}),
    ],
    "focus_sounds": [
        ([("user_id", ASCENDING), ("created_at", DESCENDING)], {}),
    ],
    "habits": [
        ([("user_id", ASCENDING)], {}),
    ],
}


def init_collections():
    """Create missing collections and their indexes on startup."""
    db = get_database(settings.mongodb_database)
    if db is None:
        logger.warning("⚠️ MongoDB not available, skipping collection setup")
        return False

    try:
        existing_collections = db.list_collection_names()
        for collection, indexes in COLLECTION_INDEXES.items():
            if collection not in existing_collections:
                logger.info(f"Creating collection: {collection}")
                db.create_collection(collection)
            for keys, options in indexes:
                db[collection].create_index(keys, **options)
        logger.info("MongoDB collections initialized successfully")
        return True
    except PyMongoError as e:
        # Startup continues; requests will surface the storage error
        logger.error(f"Error initializing MongoDB collections: {str(e)}")
        return False


@asynccontextmanager
async def mongodb_lifespan(app: FastAPI):
    """Context manager for MongoDB lifecycle."""
    try:
        logger.info("Connecting to MongoDB...")
        if get_mongodb_client() is not None:
            init_collections()
            logger.info("✅ MongoDB connection initialized")
        else:
            logger.warning(
                "⚠️ MongoDB connection failed - continuing without MongoDB")
        yield
    finally:
        close_mongodb_connections()
        logger.info("MongoDB connections closed")
