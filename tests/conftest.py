import os
import tempfile

# Keep tests off any real database or storage directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="casino-crm-tests-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from casino_crm.api import deps
from casino_crm.db.session import get_db, init_db
from casino_crm.main import app
from casino_crm.models import Agent, Client, Document
from casino_crm.models.user import User
from casino_crm.services.storage import Storage, StorageError


class RecordingStorage(Storage):
    """In-memory object store that records every call in ``events``."""

    def __init__(self, events=None):
        self.blobs = {}
        self.events = events if events is not None else []
        self.fail_upload = False
        self.fail_remove = False

    def upload(self, key, data, *, content_type=None):
        self.events.append(("upload", key))
        if self.fail_upload:
            raise StorageError("upload refused")
        if key in self.blobs:
            raise StorageError("The resource already exists")
        self.blobs[key] = data

    def remove(self, keys):
        keys = list(keys)
        for key in keys:
            self.events.append(("remove", key))
        if self.fail_remove:
            raise StorageError("remove refused")
        for key in keys:
            self.blobs.pop(key, None)

    def exists(self, key):
        return key in self.blobs

    def open(self, key):
        raise NotImplementedError

    def create_signed_url(self, key, expires_in, *, download=None):
        self.events.append(("sign", key))
        suffix = f"&download={download}" if download else ""
        return f"https://files.test/{key}?expires={expires_in}{suffix}"

    @property
    def uploads(self):
        return [key for kind, key in self.events if kind == "upload"]

    @property
    def removals(self):
        return [key for kind, key in self.events if kind == "remove"]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def user(db):
    user = User(email="staff@example.com", full_name="Staff Member")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def anon_client(db, storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def api(anon_client, user):
    app.dependency_overrides[deps.get_current_user] = lambda: user
    return anon_client


@pytest.fixture
def make_agent(db):
    def _make(firstname="Alex", lastname="Agent", **fields):
        agent = Agent(firstname=firstname, lastname=lastname, **fields)
        db.add(agent)
        db.commit()
        db.refresh(agent)
        return agent
    return _make


@pytest.fixture
def make_client(db):
    def _make(firstname="John", lastname="Doe", **fields):
        client = Client(firstname=firstname, lastname=lastname, **fields)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client
    return _make


@pytest.fixture
def make_document(db):
    def _make(client, type="Passport", status="valid", **fields):
        document = Document(client_id=client.id, type=type, status=status, **fields)
        db.add(document)
        db.commit()
        db.refresh(document)
        return document
    return _make
