"""Document store connection for the bookstore scripts.

One client per script invocation, released unconditionally by the caller
through ``close_client``. Timeouts and cancellation are left to the
driver defaults.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

if TYPE_CHECKING:
    from pymongo import MongoClient
    from pymongo.collection import Collection

logger = logging.getLogger(__name__)

DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_DATABASE_NAME = "plp_bookstore"
DEFAULT_COLLECTION_NAME = "books"


@dataclass(frozen=True)
class StoreConfig:
    """Where the books collection lives."""

    uri: str = DEFAULT_MONGO_URI
    database: str = DEFAULT_DATABASE_NAME
    collection: str = DEFAULT_COLLECTION_NAME

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Build config from the environment (and a ``.env`` file if present)."""
        load_dotenv()

        return cls(
            uri=os.getenv("MONGO_URI", DEFAULT_MONGO_URI),
            database=os.getenv("MONGO_DB", DEFAULT_DATABASE_NAME),
            collection=os.getenv("MONGO_COLLECTION", DEFAULT_COLLECTION_NAME),
        )

    def with_overrides(
        self,
        uri: str | None = None,
        database: str | None = None,
        collection: str | None = None,
    ) -> StoreConfig:
        """Return a copy with the given non-empty fields replaced.

        Used by the command-line options, which default to None.
        """
        changes = {
            key: value
            for key, value in (
                ("uri", uri),
                ("database", database),
                ("collection", collection),
            )
            if value
        }
        return replace(self, **changes)


def get_mongo_client(config: StoreConfig) -> MongoClient[dict[str, Any]]:
    """Create the client for one script run.

    MongoClient connects lazily; call ``verify_connectivity`` to fail fast.
    """
    from pymongo import MongoClient

    logger.debug(f"Creating MongoDB client for database {config.database!r}")
    return MongoClient(config.uri)


def verify_connectivity(client: MongoClient[dict[str, Any]]) -> None:
    """Ping the server.

    Raises:
        pymongo.errors.ConnectionFailure: If the server cannot be reached.
        pymongo.errors.OperationFailure: If authentication is rejected.
    """
    client.admin.command("ping")


def get_books_collection(
    client: MongoClient[dict[str, Any]],
    config: StoreConfig,
) -> Collection[dict[str, Any]]:
    """Return the handle for the configured books collection."""
    return client[config.database][config.collection]


def close_client(client: MongoClient[dict[str, Any]] | None) -> bool:
    """Release the client.

    A failure while closing is logged and swallowed: the scripts call this
    from ``finally`` and must not mask the original error.

    Returns:
        True if the client was closed cleanly.
    """
    if client is None:
        return False

    try:
        client.close()
    except PyMongoError as e:
        logger.warning(f"Failed to close MongoDB client: {e}")
        return False

    return True


__all__ = [
    "DEFAULT_COLLECTION_NAME",
    "DEFAULT_DATABASE_NAME",
    "DEFAULT_MONGO_URI",
    "StoreConfig",
    "close_client",
    "get_books_collection",
    "get_mongo_client",
    "verify_connectivity",
]
