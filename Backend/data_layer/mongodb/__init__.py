from data_layer.mongodb.connection import (
    get_mongodb_client,
    set_mongodb_client,
    get_database,
    get_collection,
    close_mongodb_connections
)

__all__ = [
    'get_mongodb_client',
    'set_mongodb_client',
    'get_database',
    'get_collection',
    'close_mongodb_connections',
]
