"""Release asset formats, semantic versions and outdated-version checks."""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field
from enum import IntEnum

_UINT64_MAX = 2**64 - 1
_VERSION_RE = re.compile(
    r"v?([0-9]+)(\.[0-9]+)?(\.[0-9]+)?"
    r"(-([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?"
    r"(\+([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?"
)

_RESET = "\x1b[0m"
_BRIGHT_RED = "\x1b[91m"
_BRIGHT_GREEN = "\x1b[92m"
_BLUE = "\x1b[34m"


class AssetFormat(IntEnum):
    """Archive formats of release assets."""

    ZIP = 0
    TAR = 1
    UNKNOWN = 2

    def file_extension(self) -> str:
        """Return the file extension of this format, or an empty string."""
        if self is AssetFormat.ZIP:
            return ".zip"
        if self is AssetFormat.TAR:
            return ".tar.gz"
        return ""


def identify_asset_format(asset_name: str) -> AssetFormat:
    """Guess the archive format from an asset's file name."""
    if asset_name.endswith(AssetFormat.ZIP.file_extension()):
        return AssetFormat.ZIP
    if asset_name.endswith(AssetFormat.TAR.file_extension()):
        return AssetFormat.TAR
    return AssetFormat.UNKNOWN


@dataclass
class Tool:
    """A tool as described by the update-check service."""

    name: str = ""
    repo: str = ""
    version: str = ""
    assets: dict[str, str] = field(default_factory=dict)


def _compare_pre_part(s: str, o: str) -> int:
    if s == o:
        return 0
    if s == "":
        return -1
    if o == "":
        return 1
    s_numeric = s.isascii() and s.isdigit() and int(s) <= _UINT64_MAX
    o_numeric = o.isascii() and o.isdigit() and int(o) <= _UINT64_MAX
    if not s_numeric and not o_numeric:
        return 1 if s > o else -1
    if not s_numeric:
        return 1
    if not o_numeric:
        return -1
    return 1 if int(s) > int(o) else -1


def _compare_prerelease(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return 1
    if not b:
        return -1
    parts_a, parts_b = a.split("."), b.split(".")
    for index in range(max(len(parts_a), len(parts_b))):
        left = parts_a[index] if index < len(parts_a) else ""
        right = parts_b[index] if index < len(parts_b) else ""
        result = _compare_pre_part(left, right)
        if result:
            return result
    return 0


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version; comparison ignores build metadata."""

    major: int
    minor: int = 0
    patch: int = 0
    prerelease: str = ""
    metadata: str = ""
    original: str = ""

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.metadata:
            text += f"+{self.metadata}"
        return text

    def _compare(self, other: Version) -> int:
        for left, right in (
            (self.major, other.major),
            (self.minor, other.minor),
            (self.patch, other.patch),
        ):
            if left != right:
                return 1 if left > right else -1
        return _compare_prerelease(self.prerelease, other.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def _bumped(self, major: int, minor: int, patch: int) -> Version:
        text = f"{major}.{minor}.{patch}"
        return Version(major, minor, patch, original=text)

    def inc_major(self) -> Version:
        """Return the next major version, dropping prerelease and metadata."""
        return self._bumped(self.major + 1, 0, 0)

    def inc_minor(self) -> Version:
        """Return the next minor version, dropping prerelease and metadata."""
        return self._bumped(self.major, self.minor + 1, 0)

    def inc_patch(self) -> Version:
        """Return the next patch version.

        A prerelease or build-tagged version becomes its release version
        without incrementing the patch number.
        """
        if self.prerelease or self.metadata:
            return self._bumped(self.major, self.minor, self.patch)
        return self._bumped(self.major, self.minor, self.patch + 1)


def _segment(text: str | None) -> int:
    if not text:
        return 0
    number = int(text.lstrip("."))
    if number > _UINT64_MAX:
        raise ValueError(f"version segment {text.lstrip('.')} out of range")
    return number


def parse_version(text: str) -> Version:
    """Parse a (loose) semantic version such as ``v1.2`` or ``1.0.0-rc.1``; raises ValueError."""
    match = _VERSION_RE.fullmatch(text)
    if not match:
        raise ValueError(f"invalid semantic version: {text!r}")
    prerelease = match.group(5) or ""
    for part in filter(None, prerelease.split(".")):
        if part.isdigit() and len(part) > 1 and part.startswith("0"):
            raise ValueError(f"invalid prerelease in version: {text!r}")
    return Version(
        major=_segment(match.group(1)),
        minor=_segment(match.group(2)),
        patch=_segment(match.group(3)),
        prerelease=prerelease,
        metadata=match.group(8) or "",
        original=text,
    )


def _try_parse(text: str) -> Version | None:
    try:
        return parse_version(text)
    except ValueError:
        return None


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{_RESET}" if color else text


def get_version_description(current: str, latest: str, color: bool = True) -> str:
    """Return ``(latest)``, ``(outdated)`` or ``(development)`` for the current version."""
    if current.endswith("-dev"):
        if is_dev_release_outdated(current, latest):
            return f"({_paint('outdated', _BRIGHT_RED, color)})"
        return f"({_paint('development', _BLUE, color)})"
    if is_outdated(current, latest):
        return f"({_paint('outdated', _BRIGHT_RED, color)})"
    return f"({_paint('latest', _BRIGHT_GREEN, color)})"


def is_outdated(current: str, latest: str) -> bool:
    """Tell whether ``current`` is older than ``latest``.

    Versions that cannot be parsed are compared as plain strings.
    """
    if current.endswith("-dev"):
        return is_dev_release_outdated(current, latest)
    current_version, latest_version = _try_parse(current), _try_parse(latest)
    if current_version is None or latest_version is None:
        return current != latest
    return latest_version > current_version


def is_dev_release_outdated(current: str, latest: str) -> bool:
    """Tell whether a ``-dev`` build is outdated: its release, or a newer one, exists."""
    current = current.removesuffix("-dev")
    current_version, latest_version = _try_parse(current), _try_parse(latest)
    if current_version is None or latest_version is None:
        return current == latest
    return latest_version >= current_version