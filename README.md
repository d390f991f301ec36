# ashirt

A small Python library, using only the standard library, for talking to an
ASHIRT evidence server and handling the data a capture client works with.

## What is in it

| Module | Contents |
| --- | --- |
| `ashirt.models` | `Tag` (with `pack()` / `Tag.unpack()` for a compact binary form) and `Evidence` |
| `ashirt.dtos` | `Operation`, `OperationStatus`, `ServerTag`, `AShirtError`, `CheckConnection`, `create_operation_json` |
| `ashirt.request` | `Request`, `RequestMethod`, `Response` |
| `ashirt.client` | `AshirtClient`, `TestResult`, `RequestError`, `generate_hash`, `sign_request`, `http_date`, `is_valid_response`, `interpret_connection_test`, `get_github_releases`, `check_for_new_release` |
| `ashirt.multipart` | `MultipartBody` for `multipart/form-data` bodies |
| `ashirt.releases` | `SemVer`, `GithubRelease`, `ReleaseDigest` and the `is_*_upgrade` checks |
| `ashirt.keysequence` | `KeySequence`, `Key`, `Modifier` for hotkey strings |
| `ashirt.jsonhelpers` | `parse_json_item`, `parse_json_list`: lenient JSON decoding |
| `ashirt.http_status` | `HttpStatus` enum |
| `ashirt.strings` | `random_string` |

## Talking to a server

```python
from ashirt.client import AshirtClient, RequestError, TestResult

client = AshirtClient(
    "https://ashirt.example.com",
    api_key="placeholder",
    secret_key="secret",
    timeout=10,
)

result, message = client.test_connection()
print(message)   # e.g. "Successfully Connected" or "Authorization Failure, Check Api Keys"

if result is TestResult.SUCCESS:
    try:
        for operation in client.get_operations():   # sorted by name
            print(operation.slug, operation.name)
    except RequestError as exc:
        print(exc)
```

`test_connection` never raises for a failed request; it returns a
`(TestResult, message)` pair. The other client methods
(`get_operations`, `get_operation_tags`, `create_tag`, `create_operation`,
`upload_evidence`) raise `RequestError` unless the server answers 200 or 201;
the error's message includes the server's `error` field when there is one.

Every request sent by the client carries a `Date` header and an
`Authorization: <api key>:<signature>` header. The signature is a base64
HMAC-SHA256 over `"<method>\n<path>\n<date>\n"` followed by the SHA-256 of the
body, keyed with the base64-decoded secret key. A secret key that is not valid
base64 raises `ValueError`.

## Building requests yourself

```python
from ashirt.client import sign_request
from ashirt.request import Request

request = Request.get("https://ashirt.example.com/", "/api/operations")
print(request.url())   # https://ashirt.example.com/api/operations
sign_request(request, api_key="placeholder", secret_key="secret")
response = request.execute(timeout=10)
print(response.status, response.error)
```

`Request.execute` does not raise on network or HTTP errors: the returned
`Response` has `status=None` when no HTTP answer arrived, and `error` set to a
description whenever something went wrong.

## Uploading evidence

```python
from ashirt.models import Evidence, Tag

evidence = Evidence(
    path="/tmp/shot.png",
    operation_slug="op",
    description="login page",
    content_type="image",
    tags=[Tag(server_tag_id=3)],
)
client.upload_evidence(evidence)
```

The upload is a multipart form with `notes`, `contentType`, `tagIds` (for
example `[3]`) and the file. `MultipartBody` can be used on its own; files
ending in `jpg`/`jpeg` are sent as `image/jpeg`, `txt`/`log` as `text/plain`,
anything else as `application/octet-stream`, and unreadable files are sent
empty.

## Checking for a newer release

```python
from ashirt.client import check_for_new_release
from ashirt.releases import SemVer, is_upgrade

assert is_upgrade(SemVer.parse("v1.2.0"), SemVer.parse("v1.3.0"))
assert str(SemVer.parse("V2.0.1-rc1")) == "v2.0.1-rc1"

digest = check_for_new_release("v1.2.0", "some-owner", "ashirt")
if digest.has_upgrade():
    print(digest.major_release.tag_name, digest.minor_release.tag_name)
```

`ReleaseDigest.from_releases(current_version, releases)` picks the newest
major, minor and patch upgrade from a list of `GithubRelease` objects;
versions containing `v0.0.0` are treated as development builds and never
report an upgrade.

## Hotkey strings

```python
from ashirt.keysequence import KeySequence

seq = KeySequence("shift+ctrl+F5")
print(str(seq))            # Shift+Ctrl+F5
print(seq.simple_keys())   # the F5 key code
```

Modifiers are printed first, in the order they were added. Duplicate keys are
ignored and unrecognised key names are logged and skipped.

## What this package does not do

It is a library, not an application. It has no command-line entry point and no
tray or window interface. It does not take screenshots, read the clipboard,
or register hotkeys with the operating system: `KeySequence` only parses and
formats the combinations. It keeps no local database or settings of its own,
does not write evidence files to disk, and offers no export or import of
collected evidence.

## Requirements

Python 3.10 or newer. No third-party packages are needed; the tests use pytest
(`pip install ashirt[test]`).