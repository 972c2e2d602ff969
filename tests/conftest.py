"""Pytest fixtures for DeadlineDash"""
import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_USER"] = "false"

import pytest

from deadlinedash import app as flask_app, db
from deadlinedash.config import TestingConfig
from deadlinedash.store import store as project_store


@pytest.fixture()
def app():
    flask_app.config.from_object(TestingConfig)
    with flask_app.app_context():
        db.drop_all()
        db.create_all()
        try:
            yield flask_app
        finally:
            db.session.remove()
            db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return project_store


@pytest.fixture()
def user(store):
    return store.create_user("student", "hunter2")
