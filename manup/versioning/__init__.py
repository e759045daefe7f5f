"""
Semantic version comparison for ManUp.

This package parses and orders the version strings that appear in a policy
document (minimum and latest) and the running application's own version.

Modules
-------
keys : module
    Strict SemVer 2.0.0 parsing and precedence.

Public API
----------
Ordering : IntEnum
    LESS, EQUAL or GREATER.
ParsedVersion : dataclass
    major/minor/patch plus pre-release and build identifiers.
parse_version : function
    Parse a version string, raising InvalidVersionFormat if malformed.
compare : function
    Compare two version strings.
is_older : function
    True iff the first version is strictly below the second.
version_key : function
    Sortable key for a version string.

Precedence rules
----------------
- MAJOR, MINOR and PATCH compare numerically: 1.10.0 > 1.9.0
- A pre-release sorts before its release: 1.0.0-rc.1 < 1.0.0
- Pre-release identifiers compare left to right; numeric identifiers
  compare numerically and sort before alphanumeric ones:
  1.0.0-alpha < 1.0.0-alpha.1 < 1.0.0-alpha.beta < 1.0.0-beta
  < 1.0.0-beta.2 < 1.0.0-beta.11 < 1.0.0-rc.1 < 1.0.0
- Build metadata is ignored: 1.0.0+001 == 1.0.0+002

Examples
--------
    >>> from manup.versioning import compare, is_older
    >>> compare("1.2.0", "1.1.9")
    <Ordering.GREATER: 1>
    >>> is_older("2.0.0", "2.0.0")
    False
"""

from .keys import (
    Ordering,
    ParsedVersion,
    compare,
    is_older,
    parse_version,
    version_key,
)

__all__ = [
    "Ordering",
    "ParsedVersion",
    "compare",
    "is_older",
    "parse_version",
    "version_key",
]
