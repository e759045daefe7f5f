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

"""Update alert presentation.

AlertPresenter turns a non-proceed classification into an Alert, hands it
to the host's Dialog, and returns an awaitable that settles only when the
app may continue:

    DISABLED   no buttons                           never settles
    MANDATORY  [Update]                             never settles
    OPTIONAL   [Not Now] [Update]                   settles on "Not Now"

"Update" opens the policy's update_url through the Launcher and keeps the
dialog open, so it can be pressed again if the store did not open. The app
is expected to be updated and restarted from outside.

Awaiting a blocking presentation suspends the caller forever. There is no
timeout and no way to cancel it from inside the gate; that is how the app
is kept from running.

Example:
    Present an optional update:
        ```python
        presenter = AlertPresenter(dialog, BrowserLauncher(), identity)
        result = await presenter.present(Classification.OPTIONAL, policy)
        # only reached once the user taps "Not Now"
        ```
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from manup.host import AppIdentity, Dialog, Launcher, Translator
from manup.i18n import NAMESPACE, builtin_text
from manup.logging import Logger, get_global_logger
from manup.models import Classification, PlatformPolicy
from manup.results import GateResult

ButtonRole = Literal["update", "later"]


@dataclass(frozen=True)
class AlertButton:
    """A dialog button.

    Attributes:
        text: Label shown to the user.
        role: "update" or "later".
        handler: Called on press. Returning False keeps the dialog open.
    """

    text: str
    role: ButtonRole
    handler: Callable[[], bool | None]


@dataclass(frozen=True)
class Alert:
    """Everything a Dialog needs to render an update alert."""

    classification: Classification
    title: str
    message: str
    buttons: tuple[AlertButton, ...] = field(default_factory=tuple)
    backdrop_dismiss: bool = False


class AlertPresenter:
    """Builds and shows update alerts.

    Args:
        dialog: Host dialog that renders alerts.
        launcher: Opens the update URL.
        identity: Supplies the app name shown in the alert text.
        translator: Optional localization layer. Without one the builtin
            English strings are used.
        logger: Optional logger (defaults to the global logger).
    """

    def __init__(
        self,
        dialog: Dialog,
        launcher: Launcher,
        identity: AppIdentity,
        translator: Translator | None = None,
        logger: Logger | None = None,
    ):
        self.dialog = dialog
        self.launcher = launcher
        self.identity = identity
        self.translator = translator
        self._logger = logger

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def text(self, key: str, app: str) -> str:
        """Resolve a string such as "optional.title" for app."""
        if self.translator is not None:
            return self.translator.instant(f"{NAMESPACE}.{key}", {"app": app})
        return builtin_text(key, app=app)

    async def build_alert(
        self,
        classification: Classification,
        policy: PlatformPolicy,
        on_later: Callable[[], None] | None = None,
    ) -> Alert:
        """Build the Alert for a classification.

        Raises:
            ValueError: If classification is PROCEED (nothing to present).
        """
        name = await self.identity.get_app_name()

        def update() -> bool:
            self.logger.verbose("ALERT", f"Opening {policy.update_url}")
            self.launcher.open(policy.update_url)
            return False

        def later() -> None:
            self.logger.verbose("ALERT", "Optional update dismissed")
            if on_later is not None:
                on_later()

        update_button = AlertButton(
            self.text("buttons.update", name), "update", update
        )

        if classification is Classification.DISABLED:
            return Alert(
                classification,
                self.text("maintenance.title", name),
                self.text("maintenance.text", name),
            )
        if classification is Classification.MANDATORY:
            return Alert(
                classification,
                self.text("mandatory.title", name),
                self.text("mandatory.text", name),
                (update_button,),
            )
        if classification is Classification.OPTIONAL:
            return Alert(
                classification,
                self.text("optional.title", name),
                self.text("optional.text", name),
                (
                    AlertButton(self.text("buttons.later", name), "later", later),
                    update_button,
                ),
            )
        raise ValueError(f"nothing to present for {classification.value!r}")

    async def present(
        self, classification: Classification, policy: PlatformPolicy
    ) -> GateResult:
        """Show the alert and wait until the app may continue.

        Returns:
            A dismissed OPTIONAL result. Never returns for MANDATORY and
            DISABLED.
        """
        done: asyncio.Future[GateResult] = asyncio.get_running_loop().create_future()

        def dismissed() -> None:
            if not done.done():
                done.set_result(GateResult(Classification.OPTIONAL, policy, "dismissed"))

        alert = await self.build_alert(classification, policy, on_later=dismissed)
        self.logger.verbose("ALERT", f"Presenting {classification.value} alert")
        self.dialog.present(alert)
        return await done
