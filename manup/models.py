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

"""Domain types for ManUp.

The policy document fetched from the remote source looks like this on the
wire (every platform key is optional, and unknown keys are kept):

    {
      "ios":     {"minimum": "2.0.0", "latest": "2.3.1",
                  "url": "https://apps.apple.com/app/id000", "enabled": true},
      "android": {"minimum": "2.0.0", "latest": "2.3.0",
                  "url": "https://play.google.com/store/apps/details?id=x",
                  "enabled": true}
    }

All types here are frozen. A PolicyMetadata is replaced wholesale on each
successful fetch and never mutated in place.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from manup.exceptions import MalformedMetadata


class Classification(str, Enum):
    """Outcome of a version check."""

    PROCEED = "proceed"
    OPTIONAL = "optional"
    MANDATORY = "mandatory"
    DISABLED = "disabled"


@dataclass(frozen=True)
class PlatformPolicy:
    """Version policy for one platform.

    Attributes:
        minimum_version: Inclusive lower bound; anything below must update.
        latest_version: Currently recommended version.
        update_url: Store link opened when the user chooses to update.
        enabled: False puts the app into maintenance mode on this platform.

    """

    minimum_version: str
    latest_version: str
    update_url: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], platform: str = "?") -> PlatformPolicy:
        """Build a policy from its wire form (minimum/latest/url/enabled).

        Raises:
            MalformedMetadata: If a field is missing or has the wrong type.
        """
        from manup.validation import platform_errors

        errors = platform_errors(platform, data)
        if errors:
            raise MalformedMetadata(
                f"invalid policy for platform {platform!r}", errors=errors
            )
        return cls(
            minimum_version=data["minimum"],
            latest_version=data["latest"],
            update_url=data["url"],
            enabled=data["enabled"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minimum": self.minimum_version,
            "latest": self.latest_version,
            "url": self.update_url,
            "enabled": self.enabled,
        }


@dataclass(frozen=True)
class PolicyMetadata:
    """The whole policy document: platform id -> PlatformPolicy (or None).

    A platform maps to None (or is absent) when the app is not shipped there.
    """

    platforms: Mapping[str, PlatformPolicy | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the mapping so nothing downstream can edit a fetched document
        object.__setattr__(self, "platforms", MappingProxyType(dict(self.platforms)))

    @classmethod
    def from_dict(cls, document: Any) -> PolicyMetadata:
        """Build metadata from a decoded JSON document.

        Raises:
            MalformedMetadata: If the document does not have the expected shape.
                The `errors` attribute lists every problem found.
        """
        from manup.validation import validate_metadata

        result = validate_metadata(document)
        if result.errors:
            raise MalformedMetadata(
                "policy document is malformed: " + "; ".join(result.errors),
                errors=result.errors,
            )
        platforms: dict[str, PlatformPolicy | None] = {}
        for name, entry in document.items():
            platforms[name] = (
                None if entry is None else PlatformPolicy.from_dict(entry, name)
            )
        return cls(platforms=platforms)

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form (used for caching)."""
        return {
            name: None if policy is None else policy.to_dict()
            for name, policy in self.platforms.items()
        }

    def get(self, platform: str) -> PlatformPolicy | None:
        return self.platforms.get(platform)

    def __contains__(self, platform: object) -> bool:
        return self.platforms.get(platform) is not None  # type: ignore[call-overload]

    def __iter__(self) -> Iterator[str]:
        return iter(self.platforms)

    @property
    def ios(self) -> PlatformPolicy | None:
        return self.get("ios")

    @property
    def android(self) -> PlatformPolicy | None:
        return self.get("android")

    @property
    def windows(self) -> PlatformPolicy | None:
        return self.get("windows")
