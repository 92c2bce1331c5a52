"""Tests for the shared MongoDB handle."""
from unittest.mock import MagicMock

import pytest
from pymongo.errors import ConfigurationError, ServerSelectionTimeoutError

from suq.config import Settings
from suq.errors import PersistenceError
from suq.mongo import MongoHandle

URI = "mongodb://db.example:27017"


def test_missing_uri_fails_every_use():
    handle = MongoHandle(None, "suq")

    with pytest.raises(PersistenceError):
        handle.collection("products")
    assert not handle.connected


def test_connects_lazily_and_once():
    client = MagicMock()
    factory = MagicMock(return_value=client)
    handle = MongoHandle(URI, "suq", server_selection_timeout_ms=1500, client_factory=factory)

    factory.assert_not_called()

    handle.collection("products")
    handle.collection("products")

    factory.assert_called_once_with(URI, serverSelectionTimeoutMS=1500)
    client.admin.command.assert_called_once_with("ping")
    assert handle.connected


def test_failed_connect_is_not_remembered():
    broken = MagicMock()
    broken.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
    healthy = MagicMock()
    factory = MagicMock(side_effect=[broken, healthy])
    handle = MongoHandle(URI, "suq", client_factory=factory)

    with pytest.raises(PersistenceError):
        handle.database
    broken.close.assert_called_once()
    assert not handle.connected

    assert handle.client is healthy
    assert factory.call_count == 2


def test_close_releases_client():
    client = MagicMock()
    handle = MongoHandle(URI, "suq", client_factory=MagicMock(return_value=client))
    handle.database

    handle.close()

    client.close.assert_called_once()
    assert not handle.connected


def test_from_settings():
    settings = Settings(
        _env_file=None,
        mongodb_uri=URI,
        mongodb_db="catalog",
        mongodb_server_selection_timeout_ms=2000,
    )

    handle = MongoHandle.from_settings(settings)

    assert handle.uri == URI
    assert handle.db_name == "catalog"
    assert handle.server_selection_timeout_ms == 2000


def test_malformed_uri_is_unavailable():
    """Errors raised while building the client are reported like a failed ping."""
    factory = MagicMock(side_effect=ConfigurationError("bad uri"))
    handle = MongoHandle("not-a-mongo-uri", "suq", client_factory=factory)

    with pytest.raises(PersistenceError, match="Database unavailable"):
        handle.collection("products")
    assert not handle.connected
