"""Release version parsing and upgrade detection."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from .jsonhelpers import parse_json_item, parse_json_list

log = logging.getLogger(__name__)

_SEMVER = re.compile(r"^[vV]?(\d+)\.(\d+)\.(\d+)(.*)")


@dataclass(frozen=True)
class SemVer:
    """A semantic version; anything after the patch number is kept in ``extra``."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    extra: str = ""

    @classmethod
    def parse(cls, tag: str) -> SemVer:
        """Parse a version tag; unrecognised tags yield 0.0.0."""
        match = _SEMVER.match(tag)
        if not match:
            return cls()
        major, minor, patch, extra = match.groups()
        return cls(int(major), int(minor), int(patch), extra)

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}{self.extra}"


def is_major_upgrade(current: SemVer, candidate: SemVer) -> bool:
    return candidate.major > current.major


def is_minor_upgrade(current: SemVer, candidate: SemVer) -> bool:
    return candidate.major == current.major and candidate.minor > current.minor


def is_patch_upgrade(current: SemVer, candidate: SemVer) -> bool:
    return (
        candidate.major == current.major
        and candidate.minor == current.minor
        and candidate.patch > current.patch
    )


def is_upgrade(current: SemVer, candidate: SemVer) -> bool:
    """Return whether ``candidate`` is newer than ``current`` (ignoring ``extra``)."""
    return (
        is_major_upgrade(current, candidate)
        or is_minor_upgrade(current, candidate)
        or is_patch_upgrade(current, candidate)
    )


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _to_int64(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


@dataclass
class GithubRelease:
    """A published release of the application."""

    url: str = ""
    html_url: str = ""
    assets_url: str = ""
    upload_url: str = ""
    tarball_url: str = ""
    zipball_url: str = ""
    tag_name: str = ""
    release_name: str = ""
    body: str = ""
    prerelease: bool = False
    draft: bool = False
    published_at: str = ""
    id: int = 0

    @classmethod
    def _from_json(cls, obj: dict[str, Any]) -> GithubRelease:
        return cls(
            url=_str(obj.get("url")),
            html_url=_str(obj.get("html_url")),
            assets_url=_str(obj.get("assets_url")),
            upload_url=_str(obj.get("upload_url")),
            tarball_url=_str(obj.get("tarball_url")),
            zipball_url=_str(obj.get("zipball_url")),
            tag_name=_str(obj.get("tag_name")),
            release_name=_str(obj.get("name")),
            body=_str(obj.get("body")),
            prerelease=obj.get("prerelease") is True,
            draft=obj.get("draft") is True,
            published_at=_str(obj.get("published_at")),
            id=_to_int64(obj.get("id")),
        )

    @classmethod
    def parse(cls, data: bytes | str) -> GithubRelease:
        """Parse a single release; malformed data yields an empty release."""
        return parse_json_item(data, cls._from_json, cls())

    @classmethod
    def parse_list(cls, data: bytes | str) -> list[GithubRelease]:
        """Parse a list of releases; malformed data yields an empty list."""
        return parse_json_list(data, cls._from_json)

    def is_legitimate(self) -> bool:
        """Return whether this release came from real data (has a non-zero id)."""
        return self.id != 0


@dataclass
class ReleaseDigest:
    """The newest major, minor and patch upgrades available."""

    major_release: GithubRelease = field(default_factory=GithubRelease)
    minor_release: GithubRelease = field(default_factory=GithubRelease)
    patch_release: GithubRelease = field(default_factory=GithubRelease)

    @classmethod
    def from_releases(cls, current_version: str, releases: Iterable[GithubRelease]) -> ReleaseDigest:
        """Find the best upgrade of each kind among ``releases``."""
        digest = cls()
        if "v0.0.0" in current_version:
            log.info("skipping unversioned/development release check")
            return digest

        current = SemVer.parse(current_version)
        best_major = best_minor = best_patch = current

        for release in releases:
            version = SemVer.parse(release.tag_name)
            if not is_upgrade(current, version):
                continue
            if is_major_upgrade(current, version) and is_upgrade(best_major, version):
                best_major = version
                digest.major_release = release
            elif is_minor_upgrade(current, version) and is_upgrade(best_minor, version):
                best_minor = version
                digest.minor_release = release
            elif is_patch_upgrade(current, version) and is_upgrade(best_patch, version):
                best_patch = version
                digest.patch_release = release
        return digest

    def has_upgrade(self) -> bool:
        """Return whether any upgrade was found."""
        return (
            self.major_release.is_legitimate()
            or self.minor_release.is_legitimate()
            or self.patch_release.is_legitimate()
        )