import os
import uuid

# Base settings: no development log file, no local database default.
os.environ["LOCSHARE_ENV"] = "test"
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/locshare_test")

import mongomock
import pytest
from fastapi.testclient import TestClient

from locshare.main import app, get_database
from locshare.utils import ConnectionHandle, DatabaseService


def make_connection(client_factory=mongomock.MongoClient) -> ConnectionHandle:
    """Connection handle backed by an isolated in-memory database"""
    return ConnectionHandle(
        "mongodb://localhost:27017",
        database=f"locshare_test_{uuid.uuid4().hex}",
        client_factory=client_factory,
    )


@pytest.fixture
def connection():
    handle = make_connection()
    yield handle
    handle.close()


@pytest.fixture
def database(connection):
    return DatabaseService(connection)


@pytest.fixture
def client(database):
    app.dependency_overrides[get_database] = lambda: database
    yield TestClient(app)
    app.dependency_overrides.clear()
