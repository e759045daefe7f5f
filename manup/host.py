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

"""Host application collaborators.

The gate talks to its host through the small protocols below. They are
Protocol classes (structural subtyping), so a host adapts its own UI
toolkit, settings and browser integration without inheriting from anything
here.

Protocols:

- HostPlatform: platform id of the running build plus a one-shot ready wait
- AppIdentity: running version and human-readable app name
- Launcher: opens the update URL outside the application
- Translator: optional localization layer
- Dialog: shows an Alert and calls its button handlers

The concrete classes cover the common non-UI cases: a fixed platform with
an optional readiness event, identity from constants or from an installed
distribution, and the system web browser.
"""

from __future__ import annotations

import asyncio
from importlib.metadata import version as distribution_version
from typing import TYPE_CHECKING, Any, Protocol
import webbrowser

if TYPE_CHECKING:
    from manup.presentation import Alert


class HostPlatform(Protocol):
    """The running platform and its readiness signal."""

    platform: str

    async def ready(self) -> None:
        """Return once the host can show UI."""
        ...


class AppIdentity(Protocol):
    async def get_version_number(self) -> str: ...

    async def get_app_name(self) -> str: ...


class Launcher(Protocol):
    def open(self, url: str) -> None:
        """Open url outside the app. Fire-and-forget."""
        ...


class Translator(Protocol):
    def instant(self, key: str, params: dict[str, Any] | None = None) -> str:
        """Return the translated string for key with params interpolated."""
        ...

    def set_translation(
        self, lang: str, translations: dict[str, Any], merge: bool = False
    ) -> None:
        """Register translations for a language."""
        ...


class Dialog(Protocol):
    def present(self, alert: Alert) -> None:
        """Show alert. Button presses call AlertButton.handler."""
        ...


class StaticHost:
    """A host whose platform is fixed at construction.

    Args:
        platform: Platform identifier of this build ("ios", "android", ...).
        ready_event: Optional event set by the host when UI is available.
            Without one the host is ready immediately.
    """

    def __init__(self, platform: str, ready_event: asyncio.Event | None = None):
        self.platform = platform
        self._ready_event = ready_event

    async def ready(self) -> None:
        if self._ready_event is not None:
            await self._ready_event.wait()


class StaticAppIdentity:
    """App identity from constants."""

    def __init__(self, version: str, name: str):
        self._version = version
        self._name = name

    async def get_version_number(self) -> str:
        return self._version

    async def get_app_name(self) -> str:
        return self._name


class DistributionAppIdentity:
    """App identity read from an installed Python distribution's metadata."""

    def __init__(self, distribution: str, name: str | None = None):
        self.distribution = distribution
        self._name = name or distribution

    async def get_version_number(self) -> str:
        return distribution_version(self.distribution)

    async def get_app_name(self) -> str:
        return self._name


class BrowserLauncher:
    """Opens URLs in the system web browser."""

    def open(self, url: str) -> None:
        webbrowser.open(url, new=2)
