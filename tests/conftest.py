import json

import httpx
import pytest

from optachat_client.client import OptaChatClient


class FakeBackend:
    """In-memory chat backend served through httpx.MockTransport."""

    def __init__(self):
        self.history = []
        self.reply = {"type": "text", "text": "Hello **there**"}
        self.status_code = 200
        self.requests = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom", "message": "backend failed"})

        if request.url.path == "/chat/history":
            if request.method == "GET":
                return httpx.Response(200, json=self.history)
            if request.method == "DELETE":
                self.history = []
                return httpx.Response(200, json={"status": "cleared"})

        if request.url.path == "/chat" and request.method == "POST":
            body = json.loads(request.content)
            self.history.append({"role": "user", "text": body["message"]})
            self.history.append({"role": "ai", **self.reply})
            return httpx.Response(200, json=self.reply)

        return httpx.Response(404, json={"error": "not_found", "message": "no route"})


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def make_client(backend, tmp_path):
    def factory():
        return OptaChatClient(
            server_url="http://chat.test",
            config_dir=tmp_path / "config",
            transport=httpx.MockTransport(backend.handle),
        )
    return factory
