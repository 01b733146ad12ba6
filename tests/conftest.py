import os

# przed importem bookrental - globalny engine i celery nie moga wskazywac na postgres/redis
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

from decimal import Decimal

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from bookrental.api.deps import get_lock_service
from bookrental.celery_worker import celery_app
from bookrental.data.database import build_engine, get_db, init_db
from bookrental.data.models import BookModel, UserModel
from bookrental.main import create_app
from bookrental.services.lock_service import LockService
from bookrental.utils.security import create_access_token, hash_password


@pytest.fixture(autouse=True)
def eager_celery():
    celery_app.conf.task_always_eager = True
    yield
    celery_app.conf.task_always_eager = False


@pytest.fixture
def engine(tmp_path):
    # osobna baza plikowa na kazdy test
    eng = build_engine(f"sqlite:///{tmp_path / 'rental_test.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture
def lock_service(fake_redis):
    return LockService(client=fake_redis)


@pytest.fixture
def client(session_factory, lock_service):
    app = create_app(create_tables=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    return TestClient(app)


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(name="Reader", email=None, password="secret123"):
        counter["n"] += 1
        user = UserModel(
            name=name,
            email=email or f"reader{counter['n']}@example.com",
            password_hash=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_book(db):
    def _make(title="Dune", price="100.00", quantity=1, author="Frank Herbert", category="scifi"):
        book = BookModel(
            title=title,
            author=author,
            category=category,
            rent_price=Decimal(price),
            quantity=quantity,
            available=quantity > 0,
            average_rating=0,
            rating_count=0,
        )
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    return _make


def auth_headers(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def headers():
    return auth_headers
