"""
Database operations
"""
import logging
import math
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING, MongoClient
from pymongo.errors import ConfigurationError, InvalidURI, PyMongoError
from pymongo.uri_parser import parse_uri

from config import Settings
from locshare.errors import NotFound, StoreUnavailable, ValidationFailure
from locshare.models import LocationRecord

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "locshare"

DISCONNECTED = "disconnected"
CONNECTING = "connecting"
CONNECTED = "connected"
DISCONNECTING = "disconnecting"


def resolve_database_name(uri: str, configured: Optional[str] = None) -> str:
    """Pick the database name: explicit setting, then the URI path, then the default"""
    if configured:
        return configured
    try:
        name = parse_uri(uri).get("database")
    except (ConfigurationError, InvalidURI):
        name = None
    return name or DEFAULT_DATABASE


class ConnectionHandle:
    """Lazily established, process-wide store connection

    The first caller opens the connection while holding the lock; concurrent
    callers block on the same lock and then reuse the cached client. A failed
    attempt leaves the handle disconnected so a later call retries.
    """

    def __init__(
        self,
        uri: Optional[str],
        database: Optional[str] = None,
        collection: str = "locations",
        connect_timeout_ms: int = 5000,
        client_factory: Callable[..., Any] = MongoClient,
    ):
        self.uri = uri
        self.database_name = resolve_database_name(uri, database) if uri else (database or DEFAULT_DATABASE)
        self.collection_name = collection
        self.connect_timeout_ms = connect_timeout_ms
        self._client_factory = client_factory
        self._client = None
        self._state = DISCONNECTED
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConnectionHandle":
        return cls(
            settings.mongodb_uri,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
            connect_timeout_ms=settings.mongodb_connect_timeout_ms,
        )

    @property
    def state(self) -> str:
        return self._state

    def get(self):
        """Return the database, establishing the connection on first use"""
        client = self._client
        if client is not None:
            return client[self.database_name]

        with self._lock:
            if self._client is None:
                self._establish()
            return self._client[self.database_name]

    def _establish(self):
        if not self.uri:
            raise StoreUnavailable("MONGODB_URI is not configured")

        self._state = CONNECTING
        logger.info("Connecting to document store (database=%s)", self.database_name)
        client = None
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.connect_timeout_ms,
                connectTimeoutMS=self.connect_timeout_ms,
            )
            db = client[self.database_name]
            # forces server selection so an unreachable store fails here
            db.list_collection_names()
            db[self.collection_name].create_index([("createdAt", DESCENDING)])
        except Exception as e:
            self._state = DISCONNECTED
            if client is not None:
                client.close()
            logger.error("Document store connection failed: %s", e)
            raise StoreUnavailable(f"Could not connect to document store: {e}") from e

        self._client = client
        self._state = CONNECTED
        logger.info("Document store connected (database=%s)", self.database_name)

    def close(self):
        with self._lock:
            if self._client is None:
                return
            self._state = DISCONNECTING
            try:
                self._client.close()
            finally:
                self._client = None
                self._state = DISCONNECTED


class DatabaseService:
    """Service for capture record storage"""

    def __init__(self, connection: ConnectionHandle):
        self.connection = connection

    @property
    def collection_name(self) -> str:
        return self.connection.collection_name

    def _collection(self):
        return self.connection.get()[self.collection_name]

    def insert_location(self, fields: Dict[str, Any]) -> LocationRecord:
        """Insert a new capture record and return it with store-assigned fields"""
        latitude = fields.get("latitude")
        longitude = fields.get("longitude")
        for name, value in (("latitude", latitude), ("longitude", longitude)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationFailure(f"{name} is required and must be a number")
            if not math.isfinite(value):
                raise ValidationFailure(f"{name} must be a finite number")

        # the store keeps millisecond precision
        now = datetime.now(timezone.utc)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        doc = {
            "latitude": float(latitude),
            "longitude": float(longitude),
            "address": fields.get("address") or "",
            "ip": fields.get("ip") or "Unknown",
            "userAgent": fields.get("userAgent") or "",
            "timestamp": now,
            "sessionId": fields.get("sessionId") or "",
            "deviceInfo": fields.get("deviceInfo") or {},
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = self._collection().insert_one(doc)
        except PyMongoError as e:
            raise StoreUnavailable(f"Insert failed: {e}") from e

        doc["_id"] = result.inserted_id
        logger.info("Location saved: %s", result.inserted_id)
        return LocationRecord.from_document(doc)

    def list_locations(self) -> List[LocationRecord]:
        """All records, newest first"""
        try:
            cursor = self._collection().find().sort([("createdAt", DESCENDING), ("_id", DESCENDING)])
            return [LocationRecord.from_document(doc) for doc in cursor]
        except PyMongoError as e:
            raise StoreUnavailable(f"Query failed: {e}") from e

    def get_location(self, location_id: str) -> LocationRecord:
        """Get one record by its store-assigned id"""
        # malformed ids surface as InvalidId, not NotFound
        object_id = ObjectId(location_id)
        try:
            doc = self._collection().find_one({"_id": object_id})
        except PyMongoError as e:
            raise StoreUnavailable(f"Query failed: {e}") from e

        if doc is None:
            raise NotFound(f"No location with id {location_id}")
        return LocationRecord.from_document(doc)

    def health(self) -> Dict[str, Any]:
        """Connection state and collection names"""
        try:
            db = self.connection.get()
            collections = sorted(db.list_collection_names())
        except PyMongoError as e:
            raise StoreUnavailable(f"Health probe failed: {e}") from e

        return {
            "name": self.connection.database_name,
            "state": self.connection.state,
            "collections": collections,
        }
