import os
import sys

import httpx
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from quotecatalog.app.config import TestConfig
from quotecatalog.app.factory import create_app


class FakeCafe24:
    """Stands in for the upstream API behind an httpx.MockTransport.

    Tests set ``routes[path] = (status, json_body)`` or an exception to
    raise; every request is kept in ``requests``.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # base URL path is /api/v2/admin, routes are keyed by the tail
        path = request.url.path.split("/api/v2/admin", 1)[-1]
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"error": {"code": 404, "message": "Not found"}})
        if isinstance(route, Exception):
            raise route
        status, body = route
        return httpx.Response(status, json=body)

    @property
    def last_params(self):
        return dict(self.requests[-1].url.params)


class RecordingIntake:
    def __init__(self):
        self.snapshots = []

    def submit(self, snapshot):
        self.snapshots.append(snapshot)
        return f"received {len(snapshot['items'])} items for {snapshot['customer']['email']}"


SAMPLE_CATEGORIES = {
    "categories": [
        {"category_no": 24, "category_name": "Office", "category_depth": 1, "parent_category_no": 1},
        {"category_no": 25, "category_name": "Paper", "category_depth": 2, "parent_category_no": 24},
        {"category_no": 27, "category_name": "Packaging", "category_depth": 1, "parent_category_no": 1},
    ]
}

SAMPLE_PRODUCTS = {
    "products": [
        {
            "product_no": 11,
            "product_name": "<b>A4 Copy Paper</b>",
            "price": "1000.00",
            "display": "T",
            "selling": "T",
            "detail_image": "https://img.example.com/a4.jpg",
            "product_code": "P00000AL",
            "created_date": "2024-01-02T10:00:00+09:00",
        },
        {
            "product_no": 12,
            "product_name": "Stapler",
            "price": "2500.00",
            "display": "T",
            "selling": "T",
            "detail_image": "",
            "product_code": "P00000AM",
            "created_date": "2024-01-03T10:00:00+09:00",
        },
    ]
}


@pytest.fixture()
def upstream():
    fake = FakeCafe24()
    fake.routes["/categories"] = (200, SAMPLE_CATEGORIES)
    fake.routes["/products"] = (200, SAMPLE_PRODUCTS)
    return fake


@pytest.fixture()
def intake():
    return RecordingIntake()


@pytest.fixture()
def app(upstream, intake):
    app = create_app(TestConfig, upstream_transport=httpx.MockTransport(upstream), quote_intake=intake)
    yield app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client
