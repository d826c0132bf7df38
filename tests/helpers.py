"""Test doubles and record factories shared by the test modules."""
import email
from typing import Callable

import httpx

from chartdeck.models.submission import ChartFile, EditTarget, PendingSubmission

API_URL = "http://charts.test"


class FakeSession:
    """Session gate whose readiness, validity and token are set by the test."""

    def __init__(self, ready: bool = True, valid: bool = True, token: str | None = "session-token"):
        self.ready = ready
        self.valid = valid
        self._token = token
        self.invalidations = 0

    def is_ready(self) -> bool:
        return self.ready

    def is_valid(self) -> bool:
        return self.valid

    def token(self) -> str | None:
        return self._token

    def invalidate(self) -> None:
        self.invalidations += 1
        self.valid = False
        self._token = None


class StubServer:
    """Callable for :class:`httpx.MockTransport` that records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, method: str, path: str, status: int = 200, json=None, text: str = "") -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json)
            return httpx.Response(status, text=text)

        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text="no such route")
        return handler(request)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]


def multipart_fields(request: httpx.Request) -> dict[str, bytes]:
    """Decode a multi-part request body into ``{field name: payload}``."""
    head = b"Content-Type: " + request.headers["content-type"].encode() + b"\r\n\r\n"
    message = email.message_from_bytes(head + request.content)
    fields = {}
    for part in message.get_payload():
        name = part.get_param("name", header="content-disposition")
        fields[name] = part.get_payload(decode=True)
    return fields


def make_raw_chart(**overrides) -> dict:
    raw = {
        "id": "c1",
        "title": "Night Drive",
        "artists": "Neon Arcade",
        "author_full": "Kiro#4821",
        "author": "u42",
        "chart_design": "Kiro",
        "rating": 12,
        "description": "Late night boss chart",
        "tags": ["boss", "fun"],
        "jacket_file_hash": "jh",
        "music_file_hash": "mh",
        "background_file_hash": "bh",
        "background_v3_file_hash": "bv3",
        "chart_file_hash": "ch",
        "preview_file_hash": "ph",
        "like_count": 3,
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-02T10:00:00Z",
        "status": "PUBLIC",
        "total_count": 7,
    }
    raw.update(overrides)
    return raw


def chart_file(name: str) -> ChartFile:
    return ChartFile(filename=name, content=f"<{name}>".encode(), content_type="application/octet-stream")


def complete_upload(**overrides) -> PendingSubmission:
    fields = dict(
        mode="create",
        title="Night Drive",
        artists="Neon Arcade",
        author="Kiro",
        rating="12",
        tags="boss,fun",
        chart=chart_file("level.json"),
        bgm=chart_file("song.mp3"),
        jacket=chart_file("cover.png"),
    )
    fields.update(overrides)
    return PendingSubmission(**fields)


def edit_of(chart_id: str = "c1", **overrides) -> PendingSubmission:
    return PendingSubmission(mode="update", target=EditTarget(id=chart_id), **overrides)


