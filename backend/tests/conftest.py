import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="medconsult-logs-"))

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import create_app

DOCTORS = [
    {
        "_id": "66a1f0c2e4b0a1b2c3d4e5f6",
        "name": "Dr. Meera Kulkarni",
        "specialty": "Cardiology",
        "gender": "female",
        "city": "Pune",
        "experience": 14,
        "rating": 4.7,
        "image": "https://example.com/meera.jpg",
        "hospital": "Ruby Hall Clinic",
        "fee": 900,
        "reviewCount": 212,
    },
    {
        "_id": "66a1f0c2e4b0a1b2c3d4e5f7",
        "name": "Dr. Arjun Shah",
        "specialty": "General Physician",
        "gender": "male",
        "city": "Mumbai",
        "experience": 6,
        "rating": 4.2,
        "image": "https://example.com/arjun.jpg",
        "fee": 500,
    },
]

VALID_FORM = {
    "name": "Dr. Asha Rao",
    "specialty": "Cardiology",
    "gender": "female",
    "city": "Pune",
    "experience": "12",
    "rating": "4.6",
    "image": "https://example.com/asha.jpg",
    "hospital": "Jehangir Hospital",
    "fee": "800",
    "reviewCount": "42",
}

VALID_DOCTOR = {
    "name": "Dr. Asha Rao",
    "specialty": "Cardiology",
    "gender": "female",
    "city": "Pune",
    "experience": 12,
    "rating": 4.6,
    "image": "https://example.com/asha.jpg",
    "hospital": "Jehangir Hospital",
    "fee": 800,
    "reviewCount": 42,
}


class FakeBackend:
    """Stands in for the external doctors backend behind httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.doctors = list(DOCTORS)
        self.down = False
        self.add_status = 200
        self.list_status = 200
        self.raw_list_body = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.path == "/api/add-doctor":
            body = json.loads(request.content)
            if self.add_status >= 400:
                return httpx.Response(self.add_status, json={"error": "Doctor could not be saved"})
            return httpx.Response(self.add_status, json={"success": True, "doctor": {"_id": "new-id", **body}})

        if request.url.path == "/api/list-doctor-with-filter":
            if self.raw_list_body is not None:
                return httpx.Response(self.list_status, text=self.raw_list_body)
            return httpx.Response(self.list_status, json=self.doctors)

        return httpx.Response(404, json={"error": "Not found"})

    def calls(self, path):
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def web_app(backend):
    return create_app(backend_transport=httpx.MockTransport(backend.handler), log_to_files=False)


@pytest.fixture
def client(web_app):
    with TestClient(web_app) as c:
        yield c
