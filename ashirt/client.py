"""Client for the ASHIRT API server and the release feed."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from enum import Enum

from .dtos import AShirtError, CheckConnection, Operation, ServerTag, create_operation_json
from .http_status import HttpStatus
from .models import Evidence
from .multipart import MultipartBody
from .releases import GithubRelease, ReleaseDigest
from .request import Request, RequestMethod, Response

log = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"


class TestResult(Enum):
    """The state of a connection test."""

    __test__ = False

    INPROGRESS = 0
    SUCCESS = 1
    FAILURE = 2


class RequestError(Exception):
    """Raised when a request fails or the server rejects it."""

    def __init__(self, response: Response) -> None:
        self.response = response
        detail = AShirtError.parse(response.body).error if response.body else ""
        if response.status is None:
            message = f"request failed: {response.error}"
        else:
            message = f"request failed with status {response.status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def http_date(moment: datetime | None = None) -> str:
    """Format ``moment`` (default: now) as an HTTP date in GMT; naive times are taken as UTC."""
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


def _decode_key(secret_key: str) -> bytes:
    try:
        return base64.b64decode(secret_key + "=" * (-len(secret_key) % 4))
    except binascii.Error as exc:
        raise ValueError(f"secret key is not valid base64: {exc}") from exc


def generate_hash(
    method: RequestMethod | str,
    path: str,
    date: str,
    body: bytes = b"",
    secret_key: str = "",
) -> str:
    """Return the base64 HMAC-SHA256 signature the server expects for a request."""
    if isinstance(method, RequestMethod):
        method = method.value
    message = f"{method}\n{path}\n{date}\n".encode("latin-1", errors="replace")
    code = hmac.new(_decode_key(secret_key), digestmod=hashlib.sha256)
    code.update(message)
    code.update(hashlib.sha256(body).digest())
    return base64.b64encode(code.digest()).decode("ascii")


def sign_request(
    request: Request, api_key: str, secret_key: str, now: datetime | None = None
) -> Request:
    """Add the Date and Authorization headers that authenticate ``request``."""
    date = http_date(now)
    request.add_header("Date", date)
    code = generate_hash(request.method, request.endpoint, date, request.body, secret_key)
    return request.add_header("Authorization", f"{api_key}:{code}")


def is_valid_response(response: Response) -> bool:
    """Return whether the response had no error and a 200 or 201 status."""
    return response.error is None and response.status in (HttpStatus.OK, HttpStatus.CREATED)


def interpret_connection_test(response: Response) -> tuple[TestResult, str]:
    """Turn a connection-check response into a result and a user-facing message."""
    if response.status is None:
        return TestResult.FAILURE, "Server not Found, Check the Url"
    if response.status == HttpStatus.OK:
        check = CheckConnection.parse(response.body)
        if check.parsed_correctly and check.ok:
            return TestResult.SUCCESS, "Successfully Connected"
        return TestResult.FAILURE, "Server Error Report to Admin"
    if response.status == HttpStatus.UNAUTHORIZED:
        return TestResult.FAILURE, "Authorization Failure, Check Api Keys"
    return TestResult.FAILURE, f"Code {response.status}"


class AshirtClient:
    """Authenticated access to an ASHIRT API server."""

    def __init__(self, host: str, api_key: str, secret_key: str, timeout: float = 30.0) -> None:
        self.host = host
        self.api_key = api_key
        self.secret_key = secret_key
        self.timeout = timeout

    def _send(self, request: Request) -> Response:
        sign_request(request, self.api_key, self.secret_key)
        return request.execute(self.timeout)

    def _call(self, request: Request) -> Response:
        response = self._send(request)
        if not is_valid_response(response):
            raise RequestError(response)
        return response

    def test_connection(self) -> tuple[TestResult, str]:
        """Check that the host and keys are accepted by the server."""
        return interpret_connection_test(self._send(Request.get(self.host, "/api/checkconnection")))

    def get_operations(self) -> list[Operation]:
        """Return the operations visible to the user, sorted by name."""
        response = self._call(Request.get(self.host, "/api/operations"))
        return sorted(Operation.parse_list(response.body), key=lambda op: op.name)

    def get_operation_tags(self, operation_slug: str) -> list[ServerTag]:
        """Return the tags defined for an operation."""
        endpoint = f"/api/operations/{operation_slug}/tags"
        return ServerTag.parse_list(self._call(Request.get(self.host, endpoint)).body)

    def create_tag(self, tag: ServerTag, operation_slug: str) -> ServerTag:
        """Create a tag in an operation and return the server's copy."""
        endpoint = f"/api/operations/{operation_slug}/tags"
        response = self._call(Request.json_post(self.host, endpoint, tag.to_json()))
        return ServerTag.parse(response.body)

    def create_operation(self, name: str, slug: str) -> Operation:
        """Create an operation and return the server's copy."""
        body = create_operation_json(name, slug)
        response = self._call(Request.json_post(self.host, "/api/operations", body))
        return Operation.parse(response.body)

    def upload_evidence(self, evidence: Evidence) -> Response:
        """Upload an evidence file with its notes, content type and tags."""
        form = MultipartBody()
        form.add_parameter("notes", evidence.description)
        form.add_parameter("contentType", evidence.content_type)
        tag_ids = ",".join(str(tag.server_tag_id) for tag in evidence.tags)
        form.add_parameter("tagIds", f"[{tag_ids}]")
        form.add_file("file", evidence.path)
        endpoint = f"/api/operations/{evidence.operation_slug}/evidence"
        return self._call(Request.form_post(self.host, endpoint, form.generate(), form.boundary))


def get_github_releases(owner: str, repo: str, timeout: float = 30.0) -> list[GithubRelease]:
    """Return the recent releases published for ``owner``/``repo``."""
    response = Request.get(GITHUB_API, f"/repos/{owner}/{repo}/releases").execute(timeout)
    if not is_valid_response(response):
        raise RequestError(response)
    return GithubRelease.parse_list(response.body)


def check_for_new_release(
    current_version: str, owner: str, repo: str, timeout: float = 30.0
) -> ReleaseDigest:
    """Return the upgrades available over ``current_version``."""
    if not owner or not repo:
        log.info("Skipping release check: no owner or repo set.")
        return ReleaseDigest()
    return ReleaseDigest.from_releases(current_version, get_github_releases(owner, repo, timeout))