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

"""Update decision policy for ManUp.

Determines what the running app must do given its platform's policy.

Example:
    Classify a running version:

        from manup.models import PlatformPolicy
        from manup.policy.decision import classify

        decision = classify(
            PlatformPolicy(
                minimum_version="2.0.0",
                latest_version="3.0.0",
                update_url="https://example.com/store",
                enabled=True,
            ),
            running_version="2.4.1",
        )
        # Classification.OPTIONAL

"""

from __future__ import annotations

from manup.logging import Logger, get_global_logger
from manup.models import Classification, PlatformPolicy
from manup.versioning import is_older


def classify(
    policy: PlatformPolicy,
    running_version: str,
    *,
    logger: Logger | None = None,
) -> Classification:
    """Classify the running version against a platform policy.

    Rules, first match wins:

    1. policy.enabled is False -> DISABLED (versions are not even parsed)
    2. running < minimum -> MANDATORY
    3. running < latest -> OPTIONAL
    4. otherwise -> PROCEED

    Being equal to a threshold satisfies it.

    Args:
        policy: Policy for the running platform.
        running_version: The app's own semantic version.
        logger: Optional logger (defaults to the global logger).

    Returns:
        The classification.

    Raises:
        InvalidVersionFormat: If running_version or a policy threshold is not
            a semantic version. Deliberately not caught here.

    """
    log = logger or get_global_logger()

    if not policy.enabled:
        log.verbose("DECISION", "Platform disabled, entering maintenance mode")
        return Classification.DISABLED

    if is_older(running_version, policy.minimum_version):
        result = Classification.MANDATORY
    elif is_older(running_version, policy.latest_version):
        result = Classification.OPTIONAL
    else:
        result = Classification.PROCEED

    log.verbose(
        "DECISION",
        f"running={running_version} minimum={policy.minimum_version} "
        f"latest={policy.latest_version} -> {result.value}",
    )
    return result
