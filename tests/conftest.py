"""Shared test fixtures for releasenotary.

No test touches the network: HTTP goes through ``FakeSession``, which
returns real ``requests.Response`` objects built from canned bytes.
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest
import requests

from releasenotary.bridge.http import HttpClient

LEDGER_API = "https://ledger.example.com/api/v1"
LEDGER_ID = "ledger-42"
RELEASE_URL = "https://api.github.com/repos/acme/widget/releases/1001"
ZIPBALL_URL = "https://api.github.com/repos/acme/widget/zipball/v1.2.0"
TARBALL_URL = "https://api.github.com/repos/acme/widget/tarball/v1.2.0"


def build_response(
    status_code: int = 200,
    body: bytes | str | dict[str, Any] | list[Any] = b"",
    *,
    reason: str = "",
) -> requests.Response:
    """Build a ``requests.Response`` whose body can be read or streamed."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    if isinstance(body, str):
        body = body.encode("utf-8")
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.encoding = "utf-8"
    response._content = body
    response.raw = io.BytesIO(body)
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    headers: dict[str, str]
    data: bytes | None
    timeout: float | None
    stream: bool

    def json(self) -> Any:
        return json.loads(self.data) if self.data else None


@dataclass
class FakeSession:
    """Stand-in for ``requests.Session`` serving canned responses by route."""

    routes: dict[tuple[str, str], list[Any]] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    def add(self, method: str, url: str, *responses: Any) -> None:
        """Queue responses (or exceptions to raise) for ``method url``."""
        self.routes.setdefault((method, url), []).extend(responses)

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        data: bytes | None = None,
        timeout: float | None = None,
        stream: bool = False,
        **kwargs: Any,
    ) -> requests.Response:
        self.calls.append(
            RecordedCall(method, url, dict(headers or {}), data, timeout, stream)
        )
        queue = self.routes.get((method, url))
        if not queue:
            raise requests.ConnectionError(f"no route for {method} {url}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def calls_to(self, method: str, url: str) -> list[RecordedCall]:
        return [c for c in self.calls if c.method == method and c.url == url]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_session() -> FakeSession:
    """Provide an empty FakeSession; tests register their own routes."""
    return FakeSession()


@pytest.fixture
def http(fake_session: FakeSession) -> HttpClient:
    """Provide an HttpClient backed by the fake session."""
    return HttpClient(30.0, session=fake_session)


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory fixture: build a canned ``requests.Response``."""
    return build_response


@pytest.fixture
def make_release_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build a GitHub release JSON payload."""

    def _factory(
        author: str = "alice",
        uploads: list[tuple[str, str]] | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        """*uploads* is a list of ``(file_name, uploader_login)`` pairs."""
        uploads = uploads if uploads is not None else [("widget-linux-amd64", author)]
        payload: dict[str, Any] = {
            "tag_name": "v1.2.0",
            "tarball_url": TARBALL_URL,
            "zipball_url": ZIPBALL_URL,
            "author": {"login": author, "id": 1},
            "assets": [
                {
                    "url": f"https://api.github.com/repos/acme/widget/releases/assets/{i}",
                    "name": name,
                    "uploader": {"login": login},
                    "size": 10,
                }
                for i, (name, login) in enumerate(uploads, start=1)
            ],
        }
        payload.update(overrides)
        return payload

    return _factory
