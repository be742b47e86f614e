# tests/conftest.py
import json
import math
from urllib.parse import parse_qs

import httpx
import pytest

from api import SessionContext, build_gateways
from config import Settings
from controllers.dashboard import Dashboard
from utils.retry import RetryPolicy

BASE_URL = "http://api.test"

SEARCH_FIELDS = {
    "teams": ["name"],
    "projects": ["name", "description"],
    "tasks": ["title", "description"],
    "users": ["name", "email"],
}


class FakeApi:
    """In-memory stand-in for the REST API, served through httpx.MockTransport."""

    def __init__(self):
        self.store = {kind: {} for kind in SEARCH_FIELDS}
        self.requests = []
        self.fail = {}  # (method, path) -> status code
        self._next = 0

    # ---- seeding ----
    def add(self, kind, **fields):
        if "id" not in fields:
            self._next += 1
            fields["id"] = f"{kind[:-1]}-{self._next}"
        self.store[kind][fields["id"]] = fields
        return fields

    def calls(self, method=None, path=None):
        return [
            (m, p, q) for m, p, q in self.requests
            if (method is None or m == method) and (path is None or p == path)
        ]

    # ---- transport ----
    def transport(self):
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        query = {k: v[0] for k, v in parse_qs(request.url.query.decode()).items()}
        self.requests.append((method, path, query))

        if (method, path) in self.fail:
            code = self.fail[(method, path)]
            return httpx.Response(code, json={"message": f"boom {code}"})

        parts = [p for p in path.split("/") if p]
        kind = parts[0]
        if kind == "task-manager":
            body = json.loads(request.content)
            return httpx.Response(200, json={
                "answer": f"echo: {body['query']}",
                "sources": [{"entityType": "task", "entityId": "task-1", "score": 0.9}],
                "confidence": 0.8,
                "sessionId": body.get("sessionId") or "chat-1",
                "metadata": {"processingTime": 12, "fromCache": True},
            })
        table = self.store[kind]

        if len(parts) == 1 and method == "GET":
            return httpx.Response(200, json=self._list(kind, query))
        if len(parts) == 1 and method == "POST":
            body = json.loads(request.content)
            return httpx.Response(201, json=self.add(kind, **body))
        if parts[1] == "count":
            return httpx.Response(200, json={"count": len(table)})

        record = table.get(parts[1])
        if record is None:
            return httpx.Response(404, json={"message": f"{kind[:-1]} not found"})
        if method == "GET":
            return httpx.Response(200, json=record)
        if method == "PATCH":
            record.update(json.loads(request.content))
            return httpx.Response(200, json=record)
        if method == "DELETE":
            del table[parts[1]]
            return httpx.Response(204)
        return httpx.Response(405)

    def _list(self, kind, query):
        rows = list(self.store[kind].values())
        term = query.get("search", "").lower()
        if term:
            rows = [r for r in rows
                    if any(term in (r.get(f) or "").lower() for f in SEARCH_FIELDS[kind])]
        page = int(query.get("page", 1))
        limit = int(query.get("limit", 10))
        start = (page - 1) * limit
        return {
            "data": rows[start:start + limit],
            "total": len(rows),
            "page": page,
            "limit": limit,
            "totalPages": max(1, math.ceil(len(rows) / limit)),
        }


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def session(fake_api):
    return SessionContext(BASE_URL, "secret-token", user={"id": "user-me", "name": "Op"},
                          transport=fake_api.transport())


@pytest.fixture
def gateways(session):
    return build_gateways(session, RetryPolicy(max_retries=0))


@pytest.fixture
def settings():
    return Settings(api_url=BASE_URL, api_token="secret-token", page_size=10, picker_page_size=5,
                    relation_fetch_limit=1000, http_retries=0)


@pytest.fixture
def dashboard(session, settings, gateways):
    return Dashboard(session, settings, gateways=gateways)
