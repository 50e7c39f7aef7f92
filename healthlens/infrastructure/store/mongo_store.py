import logging
from typing import List, Optional

from bson import ObjectId
from pymongo import MongoClient, errors as pymongo_errors

from healthlens.application.ports import DocumentStorePort
from healthlens.infrastructure.config import Settings


logger = logging.getLogger(__name__)


def _serialize(doc: dict) -> dict:
    """Return a JSON-friendly copy of a raw MongoDB document."""
    out = {}
    for key, value in doc.items():
        out[key] = str(value) if isinstance(value, ObjectId) else value
    return out


class MongoDocumentStore(DocumentStorePort):
    def __init__(self, settings: Settings | None = None, server_selection_timeout_ms: int = 5000):
        self.settings = settings or Settings()
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client: Optional[MongoClient] = None

    def connect(self) -> None:
        """Create the client and verify the server answers a ping."""
        if self._client is not None:
            return
        kwargs = {"serverSelectionTimeoutMS": self.server_selection_timeout_ms}
        if self.settings.mongodb_tls_ca_file:
            kwargs.update(tls=True, tlsCAFile=self.settings.mongodb_tls_ca_file)
        self._client = MongoClient(self.settings.mongodb_uri, **kwargs)
        try:
            self._client.admin.command("ping")
            logger.info("MongoDB connected (db=%s)", self.settings.mongodb_db)
        except pymongo_errors.PyMongoError as e:
            # Client stays around; it keeps monitoring and may reconnect later.
            logger.error("MongoDB connection error: %s", e)
            raise

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("MongoDB connection closed")

    def _db(self):
        if self._client is None:
            raise pymongo_errors.ConnectionFailure("MongoDB client is not initialized")
        return self._client[self.settings.mongodb_db]

    def is_connected(self) -> bool:
        # Reads the monitor's last known state; issues no command.
        if self._client is None:
            return False
        try:
            return self._client.topology_description.has_readable_server()
        except Exception:
            logger.exception("Could not read MongoDB topology")
            return False

    def find_one(self, collection: str, query: dict, timeout: Optional[float] = None) -> Optional[dict]:
        kwargs = {}
        if timeout:
            kwargs["max_time_ms"] = int(timeout * 1000)
        doc = self._db()[collection].find_one(query, {"_id": 0}, **kwargs)
        return _serialize(doc) if doc is not None else None

    def find_many(self, collection: str, limit: int) -> List[dict]:
        cursor = self._db()[collection].find({}).limit(limit)
        return [_serialize(doc) for doc in cursor]

    def replace_all(self, collection: str, documents: List[dict]) -> int:
        coll = self._db()[collection]
        coll.delete_many({})
        if not documents:
            return 0
        # insert_many adds _id to the dicts it is given
        result = coll.insert_many([dict(d) for d in documents])
        return len(result.inserted_ids)
