import json
from urllib.parse import unquote

import httpx

ENVELOPES = {
    "/api/assets": "assets",
    "/api/events": "events",
    "/api/text-items": "items",
    "/api/text-groups": "groups",
    "/api/text-sections": "sections",
    "/api/activity": "activity",
}


class FakeCollectionApi:
    """In-memory stand-in for the collection API behind ``httpx.MockTransport``."""

    def __init__(self, token="test-token", role=None):
        self.token = token
        self.role = role or {"role": "creator", "locked": False}
        self.collections = {path: [] for path in ENVELOPES}
        self.failing: set[tuple[str, str]] = set()
        self.requests: list[httpx.Request] = []

    def fail(self, method: str, path: str) -> None:
        self.failing.add((method, path))

    def posted(self, path: str) -> list[dict]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == "POST" and request.url.path == path
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.headers.get("authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"error": "Unauthorized"})

        base, _, record_id = path.rpartition("/")
        if (request.method, path) in self.failing or (request.method, base) in self.failing:
            return httpx.Response(500, json={"error": "boom"})

        if path == "/api/role":
            return httpx.Response(200, json=self.role)
        if path in ENVELOPES:
            envelope = ENVELOPES[path]
            if request.method == "GET":
                return httpx.Response(200, json={envelope: self.collections[path]})
            if request.method == "POST":
                records = json.loads(request.content)[envelope]
                existing = {row["id"]: row for row in self.collections[path]}
                existing.update({row["id"]: row for row in records})
                self.collections[path] = list(existing.values())
                return httpx.Response(200, json={"success": True})
        if base in ENVELOPES and request.method == "DELETE":
            record_id = unquote(record_id)
            self.collections[base] = [
                row for row in self.collections[base] if row["id"] != record_id
            ]
            return httpx.Response(200, json={"success": True})
        return httpx.Response(404, json={"error": "Not found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="http://signoff.test", transport=httpx.MockTransport(self.handler)
        )
