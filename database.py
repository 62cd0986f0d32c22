"""
MongoDB connection and collection setup.

Collections:
- "accounts"  -> Account documents
- "products"  -> Product documents
- "carts"     -> CartEntry documents
- "orders"    -> OrderRecord documents
"""
from functools import lru_cache

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, MongoClient
from pymongo.database import Database

from config import DATABASE_NAME, MONGODB_URI, logger
from errors import InvalidIdentifier

ACCOUNTS = "accounts"
PRODUCTS = "products"
CARTS = "carts"
ORDERS = "orders"


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    logger.info("Connecting to MongoDB database %s", DATABASE_NAME)
    return MongoClient(MONGODB_URI, tz_aware=True)


def get_db() -> Database:
    """
    FastAPI dependency returning the shared database handle.
    Usage:
        @app.post("/cart")
        def view_cart(db: Database = Depends(get_db)):
            ...
    """
    return get_client()[DATABASE_NAME]


def ensure_indexes(db: Database) -> None:
    """Create indexes; safe to call on every startup."""
    db[ACCOUNTS].create_index([("email", ASCENDING)], unique=True)
    db[PRODUCTS].create_index([("sellerEmail", ASCENDING)])
    db[CARTS].create_index([("customerEmail", ASCENDING), ("productId", ASCENDING)])
    db[ORDERS].create_index([("customerEmail", ASCENDING)])
    db[ORDERS].create_index([("sellerEmail", ASCENDING)])


def to_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifier()
