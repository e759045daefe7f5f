# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Core semantic version comparison for ManUp.

This module is format-agnostic: it does NOT fetch anything. It only parses
and compares version strings following Semantic Versioning 2.0.0 precedence.

Unlike a forgiving "version-like" parser, this one is strict: anything that
is not MAJOR.MINOR.PATCH with optional pre-release and build metadata raises
InvalidVersionFormat. A gate that silently misreads "2.0" as "2.0.0" (or
"banana" as "0") would let the wrong users through.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import re

from manup.exceptions import InvalidVersionFormat

# ----------------------------
# Shared DTO
# ----------------------------


class Ordering(IntEnum):
    """Result of comparing two versions (a relative to b)."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


@dataclass(frozen=True)
class ParsedVersion:
    """A parsed semantic version.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated pre-release identifiers (empty for releases).
        build: Dot-separated build metadata identifiers (ignored in ordering).

    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            s += "-" + ".".join(self.prerelease)
        if self.build:
            s += "+" + ".".join(self.build)
        return s


# ----------------------------
# Parsing
# ----------------------------

_NUM = r"0|[1-9]\d*"
_PRE_ID = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_ID = r"[0-9A-Za-z-]+"

_SEMVER = re.compile(
    rf"^[v=]?\s*({_NUM})\.({_NUM})\.({_NUM})"
    rf"(?:-({_PRE_ID}(?:\.{_PRE_ID})*))?"
    rf"(?:\+({_BUILD_ID}(?:\.{_BUILD_ID})*))?$",
    re.ASCII,
)


def parse_version(s: str) -> ParsedVersion:
    """Parse a semantic version string.

    Leading/trailing whitespace and a single leading "v" or "=" are accepted
    ("v1.2.3" == "1.2.3"). Everything else must be strict SemVer 2.0.0.

    Args:
        s: Version string such as "1.2.3", "2.0.0-rc.1" or "1.0.0+build.7".

    Returns:
        The parsed version.

    Raises:
        InvalidVersionFormat: If s is not a string or not a valid version.

    """
    if not isinstance(s, str):
        raise InvalidVersionFormat(s)
    m = _SEMVER.match(s.strip())
    if not m:
        raise InvalidVersionFormat(s)
    major, minor, patch, pre, build = m.groups()
    return ParsedVersion(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(pre.split(".")) if pre else (),
        build=tuple(build.split(".")) if build else (),
    )


def _prerelease_key(prerelease: tuple[str, ...]) -> tuple:
    """Encode pre-release identifiers for ordering.

    Releases use (1,) so they sort after every pre-release of the same core.
    Identifiers are encoded as:
      (0, int) for numeric identifiers (sort before text)
      (1, str) for alphanumeric identifiers (ASCII order)
    A shorter identifier list sorts first when all shared ones are equal,
    which plain tuple comparison already gives us.
    """
    if not prerelease:
        return (1,)
    tokens = tuple((0, int(t)) if t.isdigit() else (1, t) for t in prerelease)
    return (0, tokens)


def version_key(s: str) -> tuple:
    """Compute a sortable key for a semantic version string.

    Build metadata is dropped, so "1.0.0+a" and "1.0.0+b" share a key.

    Raises:
        InvalidVersionFormat: If s is not a valid version.
    """
    v = parse_version(s)
    return (v.major, v.minor, v.patch, _prerelease_key(v.prerelease))


# ----------------------------
# Comparison
# ----------------------------


def compare(a: str, b: str) -> Ordering:
    """Compare two semantic versions.

    Returns:
        Ordering.LESS if a < b, Ordering.EQUAL if equal, Ordering.GREATER
        if a > b.

    Raises:
        InvalidVersionFormat: If either side is malformed. Not caught here.

    Example:
        >>> compare("1.9.9", "2.0.0")
        <Ordering.LESS: -1>
        >>> compare("1.0.0", "1.0.0-rc.1")
        <Ordering.GREATER: 1>
    """
    ka = version_key(a)
    kb = version_key(b)
    return Ordering((ka > kb) - (ka < kb))


def is_older(running: str, threshold: str) -> bool:
    """True iff running is strictly below threshold (equality satisfies it)."""
    return compare(running, threshold) is Ordering.LESS
