import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument

from app.core.config import Settings
from app.main import create_app
from app.services.booking_store import BookingStore


def _project(document, projection):
    if not projection:
        return copy.deepcopy(document)
    return {key: copy.deepcopy(value) for key, value in document.items() if key == "_id" or projection.get(key)}


class FakeCursor:
    def __init__(self, documents):
        self._documents = iter(documents)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._documents)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """In-memory stand-in for an async pymongo collection (only what BookingStore calls)."""

    def __init__(self):
        self.documents = []

    def _index(self, query):
        for i, document in enumerate(self.documents):
            if document["_id"] == query["_id"]:
                return i
        return None

    def find(self, query=None, projection=None):
        assert not query, "FakeCollection only supports unfiltered find"
        return FakeCursor([_project(document, projection) for document in self.documents])

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one_and_replace(self, query, replacement, projection=None, return_document=ReturnDocument.BEFORE):
        i = self._index(query)
        if i is None:
            return None
        before = self.documents[i]
        self.documents[i] = {"_id": before["_id"], **copy.deepcopy(replacement)}
        return _project(self.documents[i] if return_document == ReturnDocument.AFTER else before, projection)

    async def delete_one(self, query):
        i = self._index(query)
        if i is None:
            return SimpleNamespace(deleted_count=0)
        del self.documents[i]
        return SimpleNamespace(deleted_count=1)


class FakeDatabase:
    def __init__(self):
        self.bookings = FakeCollection()
        self.connected = False
        self.closed = False

    async def connect(self):
        self.connected = True

    async def close(self):
        self.closed = True


@pytest.fixture
def booking_data():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "from": "London",
        "to": "Paris",
        "travelDate": "2025-06-01",
        "time": "09:30",
        "gender": "Female",
        "numberOfPeople": 2,
    }


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def store(collection):
    return BookingStore(collection)


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, MONGO_URI="mongodb://fake-host:27017")


@pytest.fixture
def client(fake_db, test_settings):
    app = create_app(test_settings, database=fake_db)
    with TestClient(app) as test_client:
        yield test_client
