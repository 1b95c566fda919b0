# server/tests/conftest.py
"""
Shared fixtures

Each test gets its own SQLite database file and an in-memory FileStorage,
so no test touches the configured database or upload directory.
"""
import threading
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from core.database import build_engine, get_db
from dependencies import get_storage
from models import Base, Category, Ticket
from services.file_storage import FileStorage

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n" + b"\x00" * 64
TEXT_BYTES = b"just some plain text, definitely not an image"


class MemoryFileStorage(FileStorage):
    """FileStorage kept in a dict; records every save and delete."""

    def __init__(self):
        self.files = {}
        self.saved = []
        self.deleted = []
        self._lock = threading.Lock()

    def save(self, name: str, content: bytes) -> None:
        with self._lock:
            if name in self.files:
                raise FileExistsError(name)
            self.files[name] = bytes(content)
            self.saved.append(name)

    def read(self, name: str, size: int = -1) -> bytes:
        data = self.files[name]
        return data if size < 0 else data[:size]

    def delete(self, name: str) -> bool:
        with self._lock:
            self.deleted.append(name)
            return self.files.pop(name, None) is not None

    def exists(self, name: str) -> bool:
        return name in self.files


class FixedClock:
    """Callable clock whose time is set by the test."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage():
    return MemoryFileStorage()


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 15, 9, 30, 0))


@pytest.fixture
def category(db):
    category = Category(name="Electrical", code="ELEC")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def other_category(db):
    category = Category(name="Plumbing", code="PLMB")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def make_ticket(db):
    """Insert a ticket row directly, bypassing the allocator."""

    def _make(category, control_number, received_at=datetime(2024, 3, 1), **fields):
        ticket = Ticket(
            control_number=control_number,
            category_id=category.id,
            location=fields.pop("location", "Room 101"),
            description=fields.pop("description", "Flickering light"),
            reported_by=fields.pop("reported_by", "J. Cruz"),
            received_at=received_at,
            **fields,
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        return ticket

    return _make


@pytest.fixture
def app(session_factory, storage):
    from main import create_app

    app = create_app(rate_limit=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
