"""MongoDB connection handle shared by every request in the process."""
import logging
import threading
from typing import Callable, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from suq.config import Settings
from suq.errors import PersistenceError

logger = logging.getLogger(__name__)


class MongoHandle:
    """
    Lazily connected MongoDB client.

    Built once at startup and handed to whoever needs the database. The
    first use connects and pings the server; a failed attempt is not
    remembered, so a later call tries again. Connection pooling is left
    to pymongo.
    """

    def __init__(
        self,
        uri: Optional[str],
        db_name: str,
        server_selection_timeout_ms: int = 5000,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoHandle":
        return cls(
            settings.mongodb_uri,
            settings.mongodb_db,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> MongoClient:
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is None:
                self._client = self._connect()
        return self._client

    def _connect(self) -> MongoClient:
        if not self.uri:
            logger.warning("MONGODB_URI is not defined in environment variables")
            raise PersistenceError("Database unavailable")

        client = None
        try:
            client = self._client_factory(
                self.uri, serverSelectionTimeoutMS=self.server_selection_timeout_ms
            )
            client.admin.command("ping")
        except PyMongoError as exc:
            logger.error(f"❌ MongoDB connection failed: {exc}")
            if client is not None:
                client.close()
            raise PersistenceError("Database unavailable") from exc

        logger.info("✅ MongoDB connected successfully!")
        return client

    @property
    def database(self) -> Database:
        return self.client[self.db_name]

    def collection(self, name: str) -> Collection:
        return self.database[name]

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info("MongoDB connection closed")
