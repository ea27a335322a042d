"""In-memory stand-in for the async Firestore client plus app helpers for tests."""
import copy
import uuid
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from firebase_admin import firestore
from google.api_core.exceptions import FailedPrecondition, NotFound

from superflix.auth.security import hash_password, issue_token
from superflix.core.config import Settings
from superflix.core.firebase import get_db
from superflix.main import create_app

TEST_ORIGINS = ["http://localhost:1234", "https://superflixheroes.netlify.app"]


def _lookup(data, field_path):
    value = data
    for part in field_path.split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


class FakeSnapshot:
    def __init__(self, reference, data, update_time=None):
        self.reference = reference
        self.id = reference.id
        self.update_time = update_time
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, db, collection, doc_id):
        self.db = db
        self.collection = collection
        self.id = doc_id

    def _docs(self):
        return self.db.documents(self.collection)

    async def get(self):
        self.db.touch()
        return FakeSnapshot(self, self._docs().get(self.id), self.db.update_times.get((self.collection, self.id)))

    async def set(self, data):
        self.db.touch()
        self._docs()[self.id] = copy.deepcopy(data)
        self.db.stamp(self.collection, self.id)

    async def update(self, data, option=None):
        self.db.touch()
        document = self._docs().get(self.id)
        if document is None:
            raise NotFound(f"No document to update: {self.collection}/{self.id}")
        expected = (option or {}).get("last_update_time")
        if expected is not None and expected != self.db.update_times.get((self.collection, self.id)):
            raise FailedPrecondition(f"{self.collection}/{self.id} changed since it was read")
        for key, value in data.items():
            if isinstance(value, firestore.ArrayRemove):
                document[key] = [item for item in document.get(key, []) if item not in value.values]
            elif isinstance(value, firestore.ArrayUnion):
                current = document.get(key, [])
                document[key] = current + [item for item in value.values if item not in current]
            else:
                document[key] = copy.deepcopy(value)
        self.db.stamp(self.collection, self.id)

    async def delete(self):
        self.db.touch()
        self._docs().pop(self.id, None)


class FakeQuery:
    def __init__(self, db, collection, filters=(), limit_to=None):
        self.db = db
        self.collection = collection
        self.filters = filters
        self.limit_to = limit_to

    def where(self, filter=None):
        return FakeQuery(self.db, self.collection, self.filters + (filter,), self.limit_to)

    def limit(self, count):
        return FakeQuery(self.db, self.collection, self.filters, count)

    async def stream(self):
        self.db.touch()
        matched = 0
        for doc_id, data in list(self.db.documents(self.collection).items()):
            if not all(_lookup(data, f.field_path) == f.value for f in self.filters):
                continue
            if self.limit_to is not None and matched >= self.limit_to:
                return
            matched += 1
            reference = FakeDocumentReference(self.db, self.collection, doc_id)
            yield FakeSnapshot(reference, data, self.db.update_times.get((self.collection, doc_id)))


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self.db, self.collection, doc_id or uuid.uuid4().hex)

    async def add(self, data):
        reference = self.document()
        await reference.set(data)
        return self.db.update_times[(self.collection, reference.id)], reference


class FakeFirestore:
    """Counts every operation; set ``error`` to make each operation raise it."""

    def __init__(self):
        self.collections = {}
        self.update_times = {}
        self.operations = 0
        self.error = None

    def collection(self, name):
        return FakeCollection(self, name)

    def documents(self, name):
        return self.collections.setdefault(name, {})

    def write_option(self, **kwargs):
        return dict(kwargs)

    def touch(self):
        self.operations += 1
        if self.error is not None:
            raise self.error

    def stamp(self, collection, doc_id):
        now = datetime.now(timezone.utc)
        previous = self.update_times.get((collection, doc_id))
        # Every write gets a distinct update time
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        self.update_times[(collection, doc_id)] = now

    def insert(self, collection, data, doc_id=None):
        """Store a document directly, without counting an operation."""
        doc_id = doc_id or uuid.uuid4().hex
        self.documents(collection)[doc_id] = copy.deepcopy(data)
        self.stamp(collection, doc_id)
        return doc_id


def make_settings(**overrides):
    values = dict(
        JWT_SECRET="test-secret",
        ALLOWED_ORIGINS=TEST_ORIGINS,
        LOG_FILE=None,
    )
    values.update(overrides)
    return Settings(**values)


def make_client(db, settings=None):
    app = create_app(settings or make_settings())
    app.dependency_overrides[get_db] = lambda: db
    return TestClient(app, raise_server_exceptions=False)


def seed_user(db, username="kate1", password="secret1", **fields):
    document = {
        "Username": username,
        "Password": hash_password(password),
        "Email": f"{username}@example.com",
        "Birthday": "1990-01-01",
        "FavoriteMovies": [],
    }
    document.update(fields)
    document["_id"] = db.insert("users", {k: v for k, v in document.items() if k != "_id"})
    return document


def auth_headers(user, settings=None):
    token = issue_token(user, settings or make_settings())
    return {"Authorization": f"Bearer {token}"}
