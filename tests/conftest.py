from datetime import date

import pytest

from app import app as flask_app, init_db
from models import db

TODAY = date(2026, 10, 19)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def client(monkeypatch):
    monkeypatch.delenv("PERPLEXITY_API_KEY", raising=False)
    with flask_app.app_context():
        db.session.remove()
        db.drop_all()
        init_db()
    return flask_app.test_client()
