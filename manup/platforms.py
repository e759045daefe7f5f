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

"""Platform branch selection.

Picks the PlatformPolicy for the platform the app is running on. There is
no fallback between platforms: an android build never reads the ios entry.
"""

from __future__ import annotations

from collections.abc import Collection

from manup.exceptions import MetadataMissing, UnsupportedPlatform
from manup.logging import Logger, get_global_logger
from manup.models import PlatformPolicy, PolicyMetadata

KNOWN_PLATFORMS: tuple[str, ...] = ("ios", "android", "windows")


def select(
    metadata: PolicyMetadata | None,
    platform: str,
    *,
    known_platforms: Collection[str] = KNOWN_PLATFORMS,
    logger: Logger | None = None,
) -> PlatformPolicy:
    """Return the policy branch for platform.

    Args:
        metadata: The fetched document, or None if nothing could be obtained.
        platform: Running platform identifier (e.g., "android").
        known_platforms: Identifiers this host recognizes. Pass a wider set
            to support platforms beyond ios/android/windows.
        logger: Optional logger (defaults to the global logger).

    Returns:
        The platform's policy.

    Raises:
        MetadataMissing: If metadata is None.
        UnsupportedPlatform: If platform is not recognized, or the document
            has no entry (or a null entry) for it.

    """
    log = logger or get_global_logger()

    if metadata is None:
        raise MetadataMissing("policy metadata does not exist")

    if platform not in known_platforms:
        raise UnsupportedPlatform(platform, f"unknown platform {platform!r}")

    policy = metadata.get(platform)
    if policy is None:
        raise UnsupportedPlatform(platform)

    log.debug(
        "PLATFORM",
        f"{platform}: minimum={policy.minimum_version} "
        f"latest={policy.latest_version} enabled={policy.enabled}",
    )
    return policy
