"""
Test configuration for the bureau backend.

Settings are read once at import time, so the environment is pointed at a
throw-away SQLite file and log directory before any ``bureau`` module loads.
"""
import os
import tempfile
from pathlib import Path

_tmp = Path(tempfile.mkdtemp(prefix="bureau-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp / 'test.db'}"
os.environ["LOG_DIR"] = str(_tmp / "logs")
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AWS_S3_BUCKET"] = ""
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bureau.database import Base, SessionLocal, engine, init_db  # noqa: E402
from bureau.main import app  # noqa: E402
from bureau.models.profile import Profile  # noqa: E402
from bureau.security import ADMIN_ROLE, create_access_token  # noqa: E402
from bureau.services.account_service import AccountService  # noqa: E402
from bureau.services.asset_store import StoredAsset, get_asset_store  # noqa: E402
from bureau.utils.rate_limiter import reset_rate_limits  # noqa: E402


class FakeAssetStore:
    """In-memory stand-in for the S3 store."""

    def __init__(self):
        self.uploads = {}
        self.deleted = []

    def upload(self, file, folder):
        key = f"{folder}/fake-{len(self.uploads) + 1}-{file.filename}"
        self.uploads[key] = file.file.read()
        return StoredAsset(url=f"https://assets.test/{key}", key=key)

    def delete(self, key_or_url):
        self.deleted.append(key_or_url)


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    init_db()
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def asset_store():
    return FakeAssetStore()


@pytest.fixture
def client(asset_store):
    app.dependency_overrides[get_asset_store] = lambda: asset_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="user", email=None, full_name=None, phone="9876543210", password="secret123"):
        counter["n"] += 1
        return AccountService.register(
            db,
            full_name=full_name or f"Member {counter['n']}",
            email=email or f"member{counter['n']}@example.com",
            password=password,
            phone=phone,
            role=role,
        )

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(role=ADMIN_ROLE, email="admin@example.com", full_name="Bureau Admin")


@pytest.fixture
def make_profile(db):
    def _make(owner, **fields):
        values = {
            "name": "Asha Verma",
            "gender": "Female",
            "age": 27,
            "location": "Jaipur",
            "profession": "Architect",
            "education": "B.Arch",
            "phone_number": "9123456780",
            "whatsapp_number": "9123456780",
            "caste": "Agarwal",
            "gotra": "Garg",
            "religion": "Hindu",
            "father_name": "Ramesh Verma",
            "income": "12 LPA",
            "rashi": "Kanya",
            "partner_age_min": 26,
            "partner_age_max": 32,
            "is_verified": True,
        }
        values.update(fields)
        profile = Profile(created_by=owner.id, **values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def auth():
    return auth_headers
