"""Data types for the releases library.

Defines the version value used for ordering releases and the
``(tag, artifact URL)`` pair produced by every release source.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from portal_data.core.exceptions import InvalidVersionError

_STRICT_RE = re.compile(r"(\d+)\.(\d+)\.(\d+)", re.ASCII)
_LENIENT_RE = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?", re.ASCII)


@dataclass(frozen=True, order=True)
class VersionCode:
    """A ``major.minor.patch`` dataset version.

    Ordering is lexicographic on ``(major, minor, patch)``.

    Attributes:
        major: Major version component.
        minor: Minor version component.
        patch: Patch version component.
    """

    major: int
    minor: int
    patch: int

    def __post_init__(self) -> None:
        for name in ("major", "minor", "patch"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                msg = f"{name} must be a non-negative integer, got {value!r}"
                raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> VersionCode:
        """Parse a strict ``M.m.p`` string, as written in the marker file.

        Raises:
            InvalidVersionError: If the string is not exactly three numeric components.
        """
        match = _STRICT_RE.fullmatch(text.strip())
        if match is None:
            raise InvalidVersionError(text)
        return cls(*(int(part) for part in match.groups()))

    @classmethod
    def parse_lenient(cls, text: str) -> VersionCode:
        """Parse a release tag, accepting ``M.m`` as shorthand for ``M.m.0``.

        Raises:
            InvalidVersionError: If the string is not two or three numeric components.
        """
        match = _LENIENT_RE.fullmatch(text.strip())
        if match is None:
            raise InvalidVersionError(text)
        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch or 0))


def _version_or_none(tag: str) -> VersionCode | None:
    try:
        return VersionCode.parse_lenient(tag)
    except InvalidVersionError:
        return None


@dataclass(frozen=True)
class ReleaseEntry:
    """A single published release of the dataset.

    Attributes:
        tag: Release tag as published by the backend.
        zipball_url: Download URL of the release's zip artifact.
        version: The tag parsed leniently, or None if the tag is not version-shaped.
    """

    tag: str
    zipball_url: str
    version: VersionCode | None = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if not self.tag:
            msg = "tag must not be empty"
            raise ValueError(msg)
        if not self.zipball_url:
            msg = "zipball_url must not be empty"
            raise ValueError(msg)
        object.__setattr__(self, "version", _version_or_none(self.tag))
