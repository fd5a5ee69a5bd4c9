import json
from unittest.mock import patch

import pytest
import requests

import http_client
from config_paths import ConfigError
from http_client import HttpError, TransportError
from storage_client import StorageClient


def _response(status, body, content_type="text/plain"):
    resp = requests.Response()
    resp.status_code = status
    resp._content = body.encode("utf-8") if isinstance(body, str) else json.dumps(body).encode("utf-8")
    resp.headers["Content-Type"] = content_type
    resp.encoding = "utf-8"
    return resp


def _client():
    return StorageClient("http://proxy/api/files", "http://proxy/api/files/update", timeout_s=5)


def test_read_text_sends_locator_as_query_param():
    with patch("http_client.requests.request", return_value=_response(200, "a,b\n1,2", "text/csv")) as req:
        text = _client().read_text("https://x/storage/v1/object/public/b/o/f.csv")

    assert text == "a,b\n1,2"
    method, url = req.call_args.args
    assert (method, url) == ("GET", "http://proxy/api/files")
    assert req.call_args.kwargs["params"] == {"url": "https://x/storage/v1/object/public/b/o/f.csv"}
    assert req.call_args.kwargs["timeout"] == 5.0


def test_read_text_error_keeps_status_and_body():
    with patch("http_client.requests.request", return_value=_response(400, "Missing url param")):
        with pytest.raises(HttpError) as info:
            _client().read_text("")

    assert info.value.status_code == 400
    assert info.value.response_text == "Missing url param"


def test_write_text_posts_multipart_fields():
    reply = _response(200, {"message": "CSV file updated successfully", "path": "o/f.csv"}, "application/json")
    with patch("http_client.requests.request", return_value=reply) as req:
        payload = _client().write_text("o", "f.csv", "a\n1")

    assert payload == {"message": "CSV file updated successfully", "path": "o/f.csv"}
    kwargs = req.call_args.kwargs
    assert req.call_args.args == ("POST", "http://proxy/api/files/update")
    assert kwargs["data"] == {"user_root_id": "o", "file_name": "f.csv"}
    assert kwargs["files"] == {"file": ("f.csv", b"a\n1", "text/csv")}


def test_write_text_error_message_is_endpoint_error():
    reply = _response(500, {"error": "disk full"}, "application/json")
    with patch("http_client.requests.request", return_value=reply):
        with pytest.raises(HttpError) as info:
            _client().write_text("o", "f.csv", "a")

    assert info.value.message == "disk full"
    assert info.value.status_code == 500


def test_connection_failure_is_transport_error():
    with patch("http_client.requests.request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(TransportError) as info:
            _client().read_text("o/f.csv")

    assert str(info.value).startswith("network error")


def test_post_json_retries_transport_errors_only():
    ok = _response(200, {"root_id": "r"}, "application/json")
    with patch("http_client.time.sleep") as sleep, patch(
        "http_client.requests.request",
        side_effect=[requests.Timeout("slow"), ok],
    ) as req:
        payload = http_client.post_json("http://api/root", {"user_id": "u"}, attempts=3)

    assert payload == {"root_id": "r"}
    assert req.call_count == 2
    sleep.assert_called_once()


def test_post_json_does_not_retry_http_errors():
    with patch(
        "http_client.requests.request",
        return_value=_response(503, {"message": "busy"}, "application/json"),
    ) as req:
        with pytest.raises(HttpError, match="busy"):
            http_client.post_json("http://api/root", {}, attempts=3)

    assert req.call_count == 1


def test_post_json_gives_up_after_attempts():
    with patch("http_client.time.sleep"), patch(
        "http_client.requests.request", side_effect=requests.ConnectionError("down")
    ) as req:
        with pytest.raises(TransportError):
            http_client.post_json("http://api/root", {}, attempts=2)

    assert req.call_count == 2


def test_invalid_json_reply_is_http_error():
    with patch("http_client.requests.request", return_value=_response(200, "<html>")):
        with pytest.raises(HttpError, match="Invalid JSON"):
            http_client.post_json("http://api/root", {})


def test_upload_posts_new_file_only():
    client = StorageClient(
        "http://proxy/api/files", "http://proxy/api/files/update", timeout_s=5, upload_url="http://proxy/api/upload"
    )
    reply = _response(200, {"path": "uploads/1_f.csv", "url": "https://x/uploads/1_f.csv"}, "application/json")
    with patch("http_client.requests.request", return_value=reply) as req:
        payload = client.upload("f.csv", "a\n1")

    assert payload == {"path": "uploads/1_f.csv", "url": "https://x/uploads/1_f.csv"}
    assert req.call_args.args == ("POST", "http://proxy/api/upload")
    assert req.call_args.kwargs["data"] == {}
    assert req.call_args.kwargs["files"] == {"file": ("f.csv", b"a\n1", "text/csv")}


def test_upload_error_is_endpoint_error():
    client = StorageClient("p", "u", upload_url="http://proxy/api/upload")
    reply = _response(400, {"error": "No file provided"}, "application/json")
    with patch("http_client.requests.request", return_value=reply):
        with pytest.raises(HttpError) as info:
            client.upload("f.csv", b"")

    assert info.value.message == "No file provided"


def test_upload_without_url_fails_fast():
    with patch("http_client.requests.request") as req:
        with pytest.raises(ConfigError):
            _client().upload("f.csv", b"a")

    req.assert_not_called()
