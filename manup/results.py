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

"""Public API return types for ManUp.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from manup.results import GateResult

        result: GateResult = await service.validate()
        print(result.classification, result.reason)
        ```

Note:
    Only public API return types belong in this module. Domain types
    (PlatformPolicy, PolicyMetadata, Classification) live in manup.models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from manup.models import Classification, PlatformPolicy

Reason = Literal["up_to_date", "dismissed", "no_metadata", "error"]


@dataclass(frozen=True)
class GateResult:
    """Value a settled ManUpService.validate() returns.

    A GateResult only ever exists for outcomes where the app may continue.
    Mandatory and maintenance checks never settle, so they never produce one.

    Attributes:
        classification: PROCEED, or OPTIONAL when the user chose "Not Now".
            Fail-open outcomes report PROCEED.
        policy: The platform policy that was evaluated, if one was found.
        reason: "up_to_date", "dismissed", "no_metadata" or "error".
    """

    classification: Classification
    policy: PlatformPolicy | None
    reason: Reason

    @property
    def allowed(self) -> bool:
        """Always True; kept so callers can read intent at the call site."""
        return True


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a policy document.

    Attributes:
        status: "valid" or "invalid".
        errors: Shape problems that make the document unusable.
        warnings: Problems the engine tolerates (unknown platforms,
            minimum above latest, version strings that are not SemVer).
        platform_count: Number of platform entries that hold a policy.
    """

    status: str
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    platform_count: int = 0
