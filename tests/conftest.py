import pytest

from api import create_app
from models import storage
from models.user import User
from services.session import get_session_service
from utils.security import hash_password

TEST_EMAIL = "a@b.com"
TEST_PASSWORD = "correct horse battery"


@pytest.fixture
def app():
    """App over a fresh in-memory SQLite database."""
    app = create_app("testing")
    yield app
    storage.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session_service(app):
    with app.app_context():
        return get_session_service()


@pytest.fixture
def secret(app):
    return app.config["JWT_SECRET"]


@pytest.fixture
def user(app):
    """A stored user with a known password."""
    u = User(email=TEST_EMAIL, password_hash=hash_password(TEST_PASSWORD))
    storage.new(u)
    storage.save()
    return u
