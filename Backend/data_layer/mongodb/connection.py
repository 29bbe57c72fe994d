from typing import Optional, Any, Dict
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo.errors import ServerSelectionTimeoutError
import logging
from core.config import settings
import certifi

logger = logging.getLogger(__name__)

# Global client instance
_mongodb_client: Optional[MongoClient] = None


def get_client_options() -> Dict[str, Any]:
    """Get connection options for the MongoDB client."""
    options = {
        'retryWrites': True,
        'w': 'majority',
        'connectTimeoutMS': settings.mongodb_connect_timeout_ms,
        'serverSelectionTimeoutMS': settings.mongodb_server_selection_timeout_ms,
        'socketTimeoutMS': settings.mongodb_socket_timeout_ms,
        'maxPoolSize': settings.mongodb_max_pool_size,
        'minPoolSize': settings.mongodb_min_pool_size,
    }

    if settings.mongodb_tls:
        options.update({
            'tls': True,
            'tlsCAFile': certifi.where(),
            'tlsAllowInvalidCertificates': False,
            'tlsAllowInvalidHostnames': False,
        })

    return options


def get_mongodb_client() -> Optional[MongoClient]:
    """Get the global MongoDB client instance, connecting on first use."""
    global _mongodb_client

    if _mongodb_client is None:
        logger.info("Initializing MongoDB client...")
        client = MongoClient(settings.mongodb_uri, **get_client_options())

        max_retries = settings.mongodb_connect_retries
        for attempt in range(max_retries):
            try:
                client.admin.command('ping')
                logger.info(
                    f"✅ MongoDB connection successful on attempt {attempt + 1}")
                break
            except ServerSelectionTimeoutError as e:
                if attempt == max_retries - 1:
                    logger.error(
                        f"❌ MongoDB connection failed after {max_retries} attempts: {e}")
                    client.close()
                    return None
                logger.warning(
                    f"⚠️ MongoDB connection attempt {attempt + 1} failed, retrying...")

        _mongodb_client = client

    return _mongodb_client


def set_mongodb_client(client: Optional[MongoClient]) -> None:
    """Install an already-configured client (used by tooling and tests)."""
    global _mongodb_client
    _mongodb_client = client


def get_database(db_name: Optional[str] = None) -> Optional[Database]:
    """Get MongoDB database."""
    client = get_mongodb_client()
    if client is None:
        logger.error("MongoDB client is not available")
        return None
    return client[db_name or settings.mongodb_database]


def get_collection(collection_name: str, db_name: Optional[str] = None) -> Optional[Collection]:
    """Get MongoDB collection."""
    db = get_database(db_name)
    if db is None:
        logger.error("Database is not available")
        return None
    return db[collection_name]


def close_mongodb_connections():
    """Close all MongoDB connections."""
    global _mongodb_client

    if _mongodb_client is not None:
        logger.info("Closing MongoDB connections")
        _mongodb_client.close()
        _mongodb_client = None
