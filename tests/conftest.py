import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from feedback_app import create_app
from feedback_app.extensions import db


@pytest.fixture()
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "FEEDBACK_DATA_DIR": str(tmp_path / "data"),
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def offline_app(tmp_path):
    # A sqlite file inside a directory that does not exist cannot be opened,
    # so every database call fails and the file store takes over.
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path}/no-such-dir/feedback.db",
        "FEEDBACK_DATA_DIR": str(tmp_path / "data"),
    })
    yield app
    with app.app_context():
        db.session.remove()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture()
def offline_client(offline_app):
    return offline_app.test_client()

