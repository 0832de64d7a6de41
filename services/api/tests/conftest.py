import pytest
from app.api.deps import get_audio_storage
from app.db.session import get_db
from app.main import app
from app.models import Base
from app.services.audio_reviews import AudioStorage
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


@pytest.fixture()
def engine():
    # A fresh in-memory database per test keeps the unique-index tests independent.
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path):
    return AudioStorage(root=tmp_path, upload_dir="uploads/audio_reviews")


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    # Rate limiting fails open without Redis.
    monkeypatch.setattr("app.api.rate_limit.get_redis", lambda: None)


@pytest.fixture()
def client(db_session, storage):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_audio_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
