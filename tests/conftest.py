"""
Shared fixtures.

The Mongo connection is registered against mongomock and the SMTP mailer
is swapped for an in-memory one, so no service needs to run.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient
from mongoengine.connection import get_db

from bootcamp_directory.connections.mongo import close_mongo, init_mongo
from bootcamp_directory.services.auth_flow import AuthFlow
from bootcamp_directory.services.mail import get_mailer
from bootcamp_directory.utils.config import Settings
from main import app
from tests.fakes import FailingMailer, RecordingMailer


@pytest.fixture(autouse=True)
def db():
    init_mongo(
        host="mongodb://localhost/bootcamp_directory_test",
        mongo_client_class=mongomock.MongoClient,
    )
    database = get_db()
    yield database
    database.client.drop_database(database.name)
    close_mongo()


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret_key="unit-test-secret", _env_file=None)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def flow(settings, mailer) -> AuthFlow:
    return AuthFlow(settings=settings, mailer=mailer)


@pytest.fixture
def client(mailer):
    app.dependency_overrides[get_mailer] = lambda: mailer
    # No context manager: the lifespan would replace the mock connections
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_mailer] = lambda: FailingMailer()
    yield TestClient(app)
    app.dependency_overrides.clear()
