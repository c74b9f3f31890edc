"""
MongoDB database connection and helpers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from bson import ObjectId

from residential_api.config import Config
from residential_api.utils.logger import get_logger

logger = get_logger(__name__)

_client: Optional[MongoClient] = None

# Fields that must never leave the service layer
PRIVATE_FIELDS = ("password_hash",)


def set_client(client: Optional[MongoClient]) -> None:
    """Install a client (tests pass a mongomock client); None resets the connection."""
    global _client
    _client = client


def get_database(config: Config) -> Database:
    """Get MongoDB database instance. Uses db name 'residential' unless MONGODB_DB_NAME is set."""
    global _client
    if _client is None:
        _client = MongoClient(
            config.mongo.uri,
            serverSelectionTimeoutMS=5000,
        )
    db_name = getattr(config.mongo, "db_name", None) or "residential"
    return _client.get_database(db_name)


def doc_with_id(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert MongoDB document for API: add 'id' from '_id' and remove '_id'.
    Password hashes are stripped and naive datetimes (MongoDB returns UTC)
    are marked as UTC. Returns None if doc is None.
    """
    if doc is None:
        return None
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d["_id"])
        del d["_id"]
    for key, value in d.items():
        if isinstance(value, datetime) and value.tzinfo is None:
            d[key] = value.replace(tzinfo=timezone.utc)
    for key in PRIVATE_FIELDS:
        d.pop(key, None)
    return d


def docs_with_id(docs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [doc_with_id(d) for d in docs]


def to_object_id(id_val: Any):
    """Convert string id to ObjectId if it's a valid 24-char hex; else return as-is."""
    if id_val is None:
        return None
    s = str(id_val)
    if len(s) == 24 and all(c in "0123456789abcdefABCDEF" for c in s):
        return ObjectId(s)
    return id_val


def ensure_indexes(db: Database) -> None:
    """Create the unique and lookup indexes the services rely on."""
    db["admins"].create_index("username", unique=True)
    db["admins"].create_index("email", unique=True)
    db["residents"].create_index("email", unique=True)
    db["residents"].create_index("apartment", unique=True)
    db["residents"].create_index([("status", ASCENDING), ("approval_status", ASCENDING)])
    db["service_providers"].create_index("email", unique=True)
    db["service_providers"].create_index("username", unique=True)
    db["employees"].create_index("email", unique=True)
    db["employees"].create_index("employee_id", unique=True)
    db["vehicles"].create_index("license_plate", unique=True)
    db["vehicles"].create_index("resident_id")
    db["complaints"].create_index([("resident_id", ASCENDING), ("created_at", DESCENDING)])
    db["service_bookings"].create_index("resident_id")
    db["service_bookings"].create_index("service_provider_id")
    db["service_reviews"].create_index("booking_id", unique=True)
    db["maintenance_bills"].create_index(
        [("resident_id", ASCENDING), ("month", ASCENDING), ("year", ASCENDING)],
        unique=True,
    )
    db["guests"].create_index("resident_id")
    db["deliveries"].create_index("resident_id")
    db["gate_entries"].create_index([("person", ASCENDING), ("entry_type", ASCENDING), ("created_at", DESCENDING)])
    db["gate_entries"].create_index("created_at")
    db["announcements"].create_index("created_at")
    logger.info(f"[Mongo] Indexes ensured on database {db.name}")


def id_query(id_val: Any) -> Dict[str, Any]:
    """Filter matching a document by its string id."""
    return {"_id": to_object_id(id_val)}
