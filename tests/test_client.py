import json

import httpx
import pytest

from optachat_client.client import OptaChatClient
from optachat_client.exceptions import (
    APIError,
    ConnectionFailedError,
    NotFoundError,
    ResponseFormatError,
    ServerError,
    ValidationError,
)


def test_send_message_text_reply(make_client, backend):
    with make_client() as client:
        reply = client.send_message("hi")

    assert reply.role == "assistant"
    assert reply.kind == "text"
    assert reply.text == "Hello **there**"
    request = backend.requests[-1]
    assert request.method == "POST"
    assert request.url.path == "/chat"
    assert json.loads(request.content) == {"message": "hi"}


def test_send_message_image_reply(make_client, backend):
    backend.reply = {"type": "image", "image": "https://img.test/cat.png"}
    with make_client() as client:
        reply = client.send_message("show me a cat")

    assert reply.kind == "image"
    assert reply.image_ref == "https://img.test/cat.png"
    assert reply.text is None


def test_fetch_history_maps_roles(make_client, backend):
    backend.history = [
        {"role": "user", "text": "draw"},
        {"role": "ai", "text": "", "image": "data:image/png;base64,AAA", "type": "image"},
        {"role": "ai", "text": "done"},
    ]
    with make_client() as client:
        messages = client.fetch_history()

    assert [m.role for m in messages] == ["user", "assistant", "assistant"]
    assert messages[1].kind == "image"
    assert messages[1].image_ref.startswith("data:image/png")
    assert messages[2].text == "done"


def test_clear_history(make_client, backend):
    backend.history = [{"role": "user", "text": "x"}]
    with make_client() as client:
        client.clear_history()
        assert client.fetch_history() == []
    assert backend.requests[0].method == "DELETE"


def test_malformed_history(make_client, backend):
    backend.history = {"unexpected": True}
    with make_client() as client:
        with pytest.raises(ResponseFormatError):
            client.fetch_history()


def test_malformed_image_reply(make_client, backend):
    backend.reply = {"type": "image"}
    with make_client() as client:
        with pytest.raises(ResponseFormatError):
            client.send_message("picture of nothing")


@pytest.mark.parametrize("status, exc", [
    (404, NotFoundError),
    (422, ValidationError),
    (500, ServerError),
    (503, ServerError),
    (403, APIError),
])
def test_error_statuses(make_client, backend, status, exc):
    backend.status_code = status
    with make_client() as client:
        with pytest.raises(exc) as info:
            client.send_message("hi")
    assert info.value.status_code == status
    assert info.value.message == "backend failed"


def test_non_json_error_body(tmp_path):
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad gateway"))
    client = OptaChatClient(server_url="http://chat.test", config_dir=tmp_path, transport=transport)
    with pytest.raises(ServerError) as info:
        client.fetch_history()
    assert info.value.message == "Bad gateway"
    client.close()


def test_connection_error(tmp_path):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = OptaChatClient(
        server_url="http://chat.test",
        config_dir=tmp_path,
        transport=httpx.MockTransport(refuse),
    )
    with pytest.raises(ConnectionFailedError) as info:
        client.send_message("hi")
    assert info.value.details["path"] == "/chat"
    client.close()


def test_server_url_from_config(tmp_path):
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "config.json").write_text('{"server_url": "http://stored:9000", "timeout": 5}', encoding="utf-8")

    client = OptaChatClient(config_dir=config_dir)
    assert client.server_url == "http://stored:9000"
    client.close()


def test_non_json_history_body(tmp_path):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    client = OptaChatClient(server_url="http://chat.test", config_dir=tmp_path, transport=transport)
    with pytest.raises(ResponseFormatError):
        client.fetch_history()
    client.close()
