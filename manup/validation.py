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

"""Policy document validation.

This module checks a decoded policy document without making network calls.
It is used when a fetched (or cached) document is turned into a
PolicyMetadata, and can be run on its own to lint a document before
publishing it.

Validation Checks:

- The document is a JSON object
- Each platform entry is either null or an object
- Each entry has minimum, latest and url strings and an enabled boolean

Warnings (tolerated by the engine):

- Platform keys other than the recognized ones
- minimum/latest that are not semantic versions
- minimum above latest (the OPTIONAL outcome becomes unreachable)

Example:
    Lint a document before publishing it:
        ```python
        import json
        from manup.validation import validate_metadata

        result = validate_metadata(json.load(open("manup.json")))
        for error in result.errors:
            print(f"Error: {error}")
        for warning in result.warnings:
            print(f"Warning: {warning}")
        ```

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from manup.exceptions import InvalidVersionFormat
from manup.platforms import KNOWN_PLATFORMS
from manup.results import ValidationResult
from manup.versioning import Ordering, compare, parse_version

__all__ = ["validate_metadata", "platform_errors"]

_STRING_FIELDS = ("minimum", "latest", "url")


def platform_errors(platform: str, entry: Any) -> list[str]:
    """Return shape errors for one platform entry (empty if usable)."""
    if not isinstance(entry, Mapping):
        return [f"{platform}: must be an object or null"]

    errors = []
    for name in _STRING_FIELDS:
        if name not in entry:
            errors.append(f"{platform}: missing required field {name!r}")
        elif not isinstance(entry[name], str):
            errors.append(f"{platform}.{name} must be a string")
        elif not entry[name].strip():
            errors.append(f"{platform}.{name} cannot be empty")

    if "enabled" not in entry:
        errors.append(f"{platform}: missing required field 'enabled'")
    elif not isinstance(entry["enabled"], bool):
        errors.append(f"{platform}.enabled must be a boolean")

    return errors


def _version_warnings(platform: str, entry: Mapping[str, Any]) -> list[str]:
    warnings = []
    valid = True
    for name in ("minimum", "latest"):
        try:
            parse_version(entry[name])
        except InvalidVersionFormat:
            valid = False
            warnings.append(
                f"{platform}.{name} {entry[name]!r} is not a semantic version"
            )
    if valid and compare(entry["minimum"], entry["latest"]) is Ordering.GREATER:
        warnings.append(
            f"{platform}: minimum {entry['minimum']} is above latest "
            f"{entry['latest']}; optional updates will never be offered"
        )
    return warnings


def validate_metadata(document: Any) -> ValidationResult:
    """Validate a decoded policy document.

    Args:
        document: The decoded JSON (normally a dict).

    Returns:
        A ValidationResult. status is "invalid" when errors is non-empty.

    """
    errors: list[str] = []
    warnings: list[str] = []
    platform_count = 0

    if not isinstance(document, Mapping):
        errors.append(
            f"policy document must be a JSON object, got {type(document).__name__}"
        )
        return ValidationResult(status="invalid", errors=errors)

    for platform, entry in document.items():
        if not isinstance(platform, str):
            errors.append(f"platform key {platform!r} must be a string")
            continue
        if platform not in KNOWN_PLATFORMS:
            warnings.append(f"unrecognized platform {platform!r}")
        if entry is None:
            continue

        entry_errors = platform_errors(platform, entry)
        if entry_errors:
            errors.extend(entry_errors)
            continue

        platform_count += 1
        warnings.extend(_version_warnings(platform, entry))

    return ValidationResult(
        status="invalid" if errors else "valid",
        errors=errors,
        warnings=warnings,
        platform_count=platform_count,
    )
