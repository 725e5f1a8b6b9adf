from datetime import date

import httpx
import pytest

from app import create_app
from client import ApiClient
from dashboard import Dashboard
from local_store import LocalStore
from models import db

TODAY = date(2024, 2, 15)
API_BASE = "http://testserver/api"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
        'TESTING': True,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def flask_transport(test_client) -> httpx.MockTransport:
    """Route httpx requests into the Flask test client."""
    def handler(request: httpx.Request) -> httpx.Response:
        resp = test_client.open(
            request.url.path,
            method=request.method,
            query_string=request.url.query.decode(),
            data=request.content,
            content_type=request.headers.get('content-type'),
        )
        return httpx.Response(
            resp.status_code,
            content=resp.get_data(),
            headers={'content-type': resp.content_type},
        )
    return httpx.MockTransport(handler)


def offline_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def local_store(tmp_path):
    return LocalStore(tmp_path / "state.json")


@pytest.fixture
def api(client):
    return ApiClient(API_BASE, http=httpx.Client(transport=flask_transport(client)))


@pytest.fixture
def offline_api():
    return ApiClient(API_BASE, http=httpx.Client(transport=offline_transport()))


@pytest.fixture
def dashboard(api, local_store):
    return Dashboard(api, local_store, today=lambda: TODAY)


@pytest.fixture
def offline_dashboard(offline_api, local_store):
    return Dashboard(offline_api, local_store, today=lambda: TODAY)
