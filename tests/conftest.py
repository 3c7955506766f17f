from pathlib import Path

import pytest
import requests
from flask.testing import FlaskClient

from app import create_app


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session: replays queued responses and records calls."""

    def __init__(self):
        self.responses = []
        self.calls = []
        # runs while the request is "in flight", before the reply is returned
        self.before_reply = None

    def queue(self, payload=None, status_code=200, text=None):
        self.responses.append(FakeResponse(payload, status_code, text))

    def fail(self, exc: Exception):
        self.responses.append(exc)

    def get(self, url, params=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if self.before_reply is not None:
            self.before_reply()
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture()
def sgs_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def prefs_path(tmp_path: Path) -> Path:
    return tmp_path / "preferences.json"


@pytest.fixture()
def app(sgs_session, prefs_path):
    app = create_app(
        {
            "TESTING": True,
            "PREFERENCES_PATH": str(prefs_path),
            "BCB_SGS_BASE": "https://sgs.test/dados/serie",
        },
        http_session=sgs_session,
    )
    return app


@pytest.fixture()
def client(app) -> FlaskClient:
    return app.test_client()


def sgs_row(day: str, value: str) -> dict:
    return {"data": day, "valor": value}


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
