from unittest import mock

import pytest
import requests

from inventory_dashboard import create_app
from inventory_dashboard.config import Config

BASE_URL = "http://backend.test/api/v1"


class DashboardTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    BACKEND_BASE_URL = BASE_URL
    SANCTION_RESOLVE_PATH = ""
    APP_TIMEZONE = "UTC"
    SCHEDULER_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    MAIL_DEFAULT_SENDER = "noreply@test.local"
    SERVICE_NIM = ""
    SERVICE_PASSWORD = ""


class FakeResponse:
    def __init__(self, status_code, body):
        self.status_code = status_code
        self._body = body

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeBackend:
    """Stands in for requests.Session.request; routes by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.pages = {}
        self.calls = []

    def add(self, method, path, data=None, status=200, body=None):
        if body is None:
            body = {"success": 200 <= status < 300, "data": data}
        self.routes[(method, path)] = (status, body)

    def add_pages(self, method, path, pages):
        """Serve one list per `page` param; pages past the end are empty."""
        self.pages[(method, path)] = pages

    def calls_to(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]

    def __call__(self, method, url, **kwargs):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append({"method": method, "path": path, **kwargs})
        if (method, path) in self.pages:
            pages = self.pages[(method, path)]
            page = (kwargs.get("params") or {}).get("page", 1)
            data = pages[page - 1] if page <= len(pages) else []
            return FakeResponse(200, {"success": True, "data": data})
        if (method, path) not in self.routes:
            return FakeResponse(404, {"success": False, "message": f"No route {method} {path}"})
        status, body = self.routes[(method, path)]
        if isinstance(body, requests.exceptions.RequestException):
            raise body
        return FakeResponse(status, body)


@pytest.fixture
def app():
    app = create_app(DashboardTestConfig)
    with app.app_context():
        yield app


@pytest.fixture
def backend():
    fake = FakeBackend()
    with mock.patch.object(requests.Session, "request", side_effect=fake):
        yield fake


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    with client.session_transaction() as s:
        s["access_token"] = "token-123"
        s["nim"] = "admin01"
    return client
