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

"""Exception hierarchy for ManUp.

This module defines a custom exception hierarchy that lets callers tell
apart the different ways a version gate check can go wrong:

- ConfigError: Configuration problems (YAML parse, missing url, bad versions)
- NetworkError: Remote metadata retrieval failures
- MetadataError: The policy document is absent, malformed, or has no
  branch for the running platform
- CacheError: The cache collaborator is missing or holds nothing

All exceptions inherit from ManUpError. Note that ManUpService.validate()
never raises any of these: the gate fails open and lets the application
proceed. They are visible when the lower-level components are used
directly.

Example:
    Catching metadata errors from the selector:
        ```python
        from manup.exceptions import UnsupportedPlatform
        from manup.platforms import select

        try:
            policy = select(metadata, "android")
        except UnsupportedPlatform as e:
            print(f"No android policy: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "ManUpError",
    "ConfigError",
    "InvalidVersionFormat",
    "NetworkError",
    "MetadataError",
    "MalformedMetadata",
    "MetadataMissing",
    "UnsupportedPlatform",
    "CacheError",
    "CacheUnavailable",
    "NoCachedData",
]


class ManUpError(Exception):
    """Base exception for all ManUp errors.

    All ManUp-specific exceptions inherit from this class, allowing users
    to catch all ManUp errors with a single except clause if needed.
    """

    pass


class ConfigError(ManUpError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, empty files)
    - Missing or invalid configuration fields (url, timeout, ...)
    - Version strings that are not valid semantic versions
    """

    pass


class InvalidVersionFormat(ConfigError, ValueError):
    """Raised when a version string is not a valid semantic version.

    This is a build or configuration mistake (a typo in the policy document
    or in the app's own version number), so the comparator never guesses.
    """

    def __init__(self, version: object):
        super().__init__(f"invalid semantic version: {version!r}")
        self.version = version


class NetworkError(ManUpError):
    """Raised when the remote policy document cannot be retrieved.

    This covers connection errors, timeouts, HTTP error statuses, and
    response bodies that are not JSON.
    """

    pass


class MetadataError(ManUpError):
    """Base class for problems with the policy document itself."""

    pass


class MalformedMetadata(MetadataError):
    """Raised when a document does not match the PolicyMetadata shape."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class MetadataMissing(MetadataError):
    """Raised when no policy document is available at all."""

    pass


class UnsupportedPlatform(MetadataError):
    """Raised when the running platform is unknown or has no policy entry."""

    def __init__(self, platform: str, message: str | None = None):
        super().__init__(message or f"no policy for platform {platform!r}")
        self.platform = platform


class CacheError(ManUpError):
    """Base class for cache collaborator errors."""

    pass


class CacheUnavailable(CacheError):
    """Raised when the store was built without a cache collaborator."""

    pass


class NoCachedData(CacheError):
    """Raised when the cache has never been written (or holds garbage)."""

    pass
