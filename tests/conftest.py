import io
import os
import random
import tempfile

# Keep the module-level app in carlens.main away from Postgres and the working directory
_SCRATCH = tempfile.mkdtemp(prefix="carlens-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_SCRATCH, 'default.db')}")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_SCRATCH, "cars"))

import pytest
from fastapi.testclient import TestClient

from carlens.core.config import Settings
from carlens.db.init_db import init_db
from carlens.db.session import build_engine, build_session_factory
from carlens.main import create_app
from carlens.services.annotation import AnnotationClient
from carlens.services.uploads import UploadStorage

TOYOTA_REPLY = '```json {"make":"Toyota","model":"Corolla","year":2020} ```'


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Stands in for a generative model; records every call."""

    def __init__(self, reply=TOYOTA_REPLY, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_content(self, contents):
        self.calls.append(contents)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.reply)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'carlens.db'}",
        UPLOAD_DIR=str(tmp_path / "cars"),
        JWT_SECRET_KEY="test-secret",
        FRONTEND_ORIGIN="http://localhost:5173",
        AUTO_CREATE_TABLES=False,
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(settings):
    return UploadStorage(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def app(settings, engine, fake_model):
    return create_app(
        settings=settings,
        engine=engine,
        annotator=AnnotationClient(fake_model),
        rng=random.Random(1234),
    )


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


def signup_and_login(client, email="a@b.com", password="pw123"):
    client.post("/signup", json={"email": email, "password": password})
    response = client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def upload(client, headers, name="car.jpg", data=b"\xff\xd8\xff fake jpeg", content_type="image/jpeg"):
    return client.post(
        "/upload",
        headers=headers,
        files={"image": (name, io.BytesIO(data), content_type)},
    )


@pytest.fixture
def auth_headers(client):
    return signup_and_login(client)
