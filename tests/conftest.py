import pytest

from config import Config
from grasscard import create_app, db
from grasscard.ledger import base_names, ensure_users


class GrassCardTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "grasscard-test-jwt-secret-key-0123456789"
    SECRET_KEY = "grasscard-test-secret-key-0123456789"
    USER1_NAME = "Alex"
    USER2_NAME = "Sam"
    TIMEZONE = "Asia/Tokyo"
    GRID_WEEKS = 24


@pytest.fixture
def app():
    app = create_app(GrassCardTestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def users(app):
    ensure_users(base_names("Alex", "Sam"))
    return ("user1", "user2")
