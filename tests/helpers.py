"""Test helpers shared across modules."""

import hashlib
import hmac
import time
import uuid

import httpx


class ProviderStub:
    """httpx.MockTransport handler with per-path canned responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, tuple[int, dict]] = {}

    def respond(self, path: str, status: int, body: dict) -> None:
        self.responses[path] = (status, body)

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.responses.get(request.url.path, (404, {"message": "no stub"}))
        return httpx.Response(status, json=body)


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def sign(body: bytes, secret: str, timestamp: str | None = None) -> str:
    """Build a ``tilled-signature`` header value for ``body``."""
    t = timestamp or str(int(time.time() * 1000))
    digest = hmac.new(secret.encode(), t.encode() + b"." + body, hashlib.sha256).hexdigest()
    return f"t={t},v1={digest}"


def unique(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"
