import base64
import json
import threading
import urllib.error
from datetime import datetime, timedelta, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import patch

import pytest

from ashirt.client import (
    AshirtClient,
    RequestError,
    TestResult,
    check_for_new_release,
    generate_hash,
    get_github_releases,
    http_date,
    interpret_connection_test,
    is_valid_response,
    sign_request,
)
from ashirt.dtos import ServerTag
from ashirt.models import Evidence, Tag
from ashirt.request import Request, Response


class _Handler(BaseHTTPRequestHandler):
    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length)
        self.server.received.append((self.command, self.path, self.headers, body))
        status, payload = self.server.routes.get(self.path, (404, b""))
        self.send_response(status)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _handle
    do_POST = _handle

    def log_message(self, *args):
        pass


@pytest.fixture
def server():
    httpd = ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.routes = {}
    httpd.received = []
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()


@pytest.fixture
def client(server):
    host = f"http://127.0.0.1:{server.server_address[1]}"
    return AshirtClient(host, api_key="placeholder", secret_key="secret", timeout=5)


class _FakeReply:
    status = 200

    def __init__(self, body):
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_http_date_format():
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert http_date(moment) == "Mon, 01 Jan 2024 00:00:00 GMT"


def test_http_date_converts_to_utc_and_treats_naive_as_utc():
    aware = datetime(2024, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    naive = datetime(2024, 1, 1, 0, 0)
    assert http_date(aware) == http_date(naive)
    assert http_date().endswith(" GMT")


def test_generate_hash_is_sha256_sized_and_deterministic():
    first = generate_hash("GET", "/api", "date", b"", "secret")
    assert first == generate_hash("GET", "/api", "date", b"", "secret")
    assert len(base64.b64decode(first)) == 32


def test_sign_request_adds_date_and_authorization():
    moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    request = sign_request(Request.get("http://example.com", "/api/x"), "placeholder", "secret", moment)
    headers = dict(request.headers)
    assert headers["Date"] == http_date(moment)
    expected = generate_hash("GET", "/api/x", headers["Date"], b"", "secret")
    assert headers["Authorization"] == f"placeholder:{expected}"


@pytest.mark.parametrize(
    "response, valid",
    [
        (Response(status=200), True),
        (Response(status=201), True),
        (Response(status=204), False),
        (Response(status=200, error="boom"), False),
        (Response(status=None, error="down"), False),
    ],
)
def test_is_valid_response(response, valid):
    assert is_valid_response(response) is valid


@pytest.mark.parametrize(
    "response, expected",
    [
        (Response(status=None, error="x"), (TestResult.FAILURE, "Server not Found, Check the Url")),
        (Response(status=200, body=b'{"ok": true}'), (TestResult.SUCCESS, "Successfully Connected")),
        (Response(status=200, body=b'{"ok": false}'), (TestResult.FAILURE, "Server Error Report to Admin")),
        (Response(status=200, body=b"not json"), (TestResult.FAILURE, "Server Error Report to Admin")),
        (Response(status=401, error="x"), (TestResult.FAILURE, "Authorization Failure, Check Api Keys")),
        (Response(status=500, error="x"), (TestResult.FAILURE, "Code 500")),
    ],
)
def test_interpret_connection_test(response, expected):
    assert interpret_connection_test(response) == expected


def test_connection_success_and_signature(server, client):
    server.routes["/api/checkconnection"] = (200, b'{"ok": true}')
    assert client.test_connection() == (TestResult.SUCCESS, "Successfully Connected")
    method, path, headers, _ = server.received[0]
    assert (method, path) == ("GET", "/api/checkconnection")
    expected = generate_hash("GET", path, headers.get("Date"), b"", "secret")
    assert headers.get("Authorization") == f"placeholder:{expected}"


def test_connection_unauthorized(server, client):
    server.routes["/api/checkconnection"] = (401, b"")
    assert client.test_connection() == (TestResult.FAILURE, "Authorization Failure, Check Api Keys")


def test_connection_unreachable():
    unreachable = AshirtClient("", api_key="placeholder", secret_key="secret")
    assert unreachable.test_connection() == (TestResult.FAILURE, "Server not Found, Check the Url")


def test_get_operations_sorted_by_name(server, client):
    ops = [{"slug": "b", "name": "Zulu"}, {"slug": "a", "name": "Alpha"}]
    server.routes["/api/operations"] = (200, json.dumps(ops).encode())
    result = client.get_operations()
    assert [op.name for op in result] == ["Alpha", "Zulu"]
    assert [op.slug for op in result] == ["a", "b"]


def test_get_operations_failure_raises(server, client):
    server.routes["/api/operations"] = (500, b'{"error": "broken"}')
    with pytest.raises(RequestError) as info:
        client.get_operations()
    assert info.value.response.status == 500
    assert "broken" in str(info.value)


def test_get_operation_tags(server, client):
    tags = [{"id": 7, "name": "web", "colorName": "red"}]
    server.routes["/api/operations/op1/tags"] = (200, json.dumps(tags).encode())
    assert client.get_operation_tags("op1") == [ServerTag(name="web", color_name="red", id=7)]


def test_create_tag_posts_json(server, client):
    server.routes["/api/operations/op1/tags"] = (201, b'{"id": 9, "name": "web", "colorName": "blue"}')
    created = client.create_tag(ServerTag(name="web", color_name="blue"), "op1")
    assert created.id == 9
    method, _, headers, body = server.received[0]
    assert method == "POST"
    assert headers.get("Content-Type") == "application/json"
    assert json.loads(body) == {"name": "web", "colorName": "blue"}


def test_create_operation(server, client):
    server.routes["/api/operations"] = (201, b'{"slug": "s", "name": "N"}')
    created = client.create_operation("N", "s")
    assert (created.name, created.slug) == ("N", "s")
    assert json.loads(server.received[0][3]) == {"name": "N", "slug": "s"}


def test_upload_evidence(server, client, tmp_path):
    path = tmp_path / "shot.png"
    path.write_bytes(b"IMAGEDATA")
    server.routes["/api/operations/op1/evidence"] = (201, b"{}")
    evidence = Evidence(
        path=str(path),
        operation_slug="op1",
        description="notes here",
        content_type="image",
        tags=[Tag(server_tag_id=3), Tag(server_tag_id=4)],
    )
    response = client.upload_evidence(evidence)
    assert response.status == 201
    _, _, headers, body = server.received[0]
    assert headers.get("Content-Type").startswith("multipart/form-data; boundary=")
    assert b'name="tagIds"\r\n\r\n[3,4]' in body
    assert b'name="notes"\r\n\r\nnotes here' in body
    assert b'filename="shot.png"' in body
    assert b"IMAGEDATA" in body


def test_get_github_releases_parses_feed():
    feed = json.dumps([{"id": 5, "tag_name": "v2.0.0"}]).encode()
    with patch("urllib.request.urlopen", return_value=_FakeReply(feed)) as opener:
        releases = get_github_releases("owner", "repo")
    assert [(r.id, r.tag_name) for r in releases] == [(5, "v2.0.0")]
    assert opener.call_args[0][0].full_url == "https://api.github.com/repos/owner/repo/releases"


def test_get_github_releases_failure_raises():
    with patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
        with pytest.raises(RequestError):
            get_github_releases("owner", "repo")


def test_check_for_new_release_finds_upgrade():
    feed = json.dumps([{"id": 5, "tag_name": "v2.0.0"}, {"id": 6, "tag_name": "v1.0.0"}]).encode()
    with patch("urllib.request.urlopen", return_value=_FakeReply(feed)):
        digest = check_for_new_release("v1.2.0", "owner", "repo")
    assert digest.has_upgrade()
    assert digest.major_release.id == 5
    assert not digest.patch_release.is_legitimate()


def test_check_for_new_release_skips_without_owner():
    with patch("urllib.request.urlopen") as opener:
        digest = check_for_new_release("v1.2.0", "", "repo")
    assert not digest.has_upgrade()
    assert opener.call_count == 0