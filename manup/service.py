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

"""Version gate orchestration for ManUp.

ManUpService runs the whole check and shares its outcome between callers:

1. Wait for the host to be ready to show UI
2. Fetch the policy document (remote, else cache, else nothing)
3. Select this platform's policy and classify the running version
4. Present an alert for optional/mandatory/disabled outcomes

Single-flight
-------------
The first validate() starts the pipeline in a task owned by a CheckSession.
Every later call, concurrent or not, awaits that same task. By default the
session is never discarded, so the pipeline runs once per service (one
service per process). Set `recheck_after_resolve` to run a fresh check on
the first call after the previous one settled.

Fail-open
---------
Any error while waiting, fetching, selecting or classifying is logged and
turned into a PROCEED result. A broken gate must never lock users out.

Never-resolving outcomes
------------------------
For MANDATORY and DISABLED the awaitable returned by validate() never
settles. Callers that await it block for good, which is how the app is kept
from running. Cancelling a waiting caller does not cancel the shared check.

Example:
    Gate the app at startup:
        ```python
        from manup import ManUpService, ManUpConfig, StaticHost, StaticAppIdentity
        from manup.storage import JsonFileStorage

        service = ManUpService(
            ManUpConfig(url="https://example.com/manup.json"),
            host=StaticHost("android"),
            identity=StaticAppIdentity("2.1.0", "My App"),
            dialog=my_dialog,
            storage=JsonFileStorage(Path("cache/manup.json")),
        )
        result = await service.validate()  # returns only if the app may run
        ```
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any

import requests

from manup.config import ManUpConfig, load_config
from manup.exceptions import InvalidVersionFormat, MetadataError
from manup.host import (
    AppIdentity,
    BrowserLauncher,
    Dialog,
    HostPlatform,
    Launcher,
    Translator,
)
from manup.i18n import TRANSLATIONS
from manup.logging import Logger, get_global_logger
from manup.metadata import MetadataStore
from manup.models import Classification, PlatformPolicy
from manup.platforms import KNOWN_PLATFORMS, select
from manup.policy import classify
from manup.presentation import AlertPresenter
from manup.results import GateResult
from manup.storage import Storage


class CheckState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    RESOLVED = "resolved"


class CheckSession:
    """The one in-flight (or finished) check and its shared outcome.

    Attributes:
        active: True once a check has started. Never goes back to False.
        task: The pipeline task every caller awaits.
    """

    def __init__(self) -> None:
        self.active = False
        self.task: asyncio.Task[GateResult] | None = None

    @property
    def state(self) -> CheckState:
        if not self.active or self.task is None:
            return CheckState.IDLE
        return CheckState.RESOLVED if self.task.done() else CheckState.CHECKING

    def start(self, task: asyncio.Task[GateResult]) -> None:
        self.active = True
        self.task = task


class ManUpService:
    """Mandatory/optional update gate.

    Args:
        config: Gate configuration.
        host: Running platform and readiness signal.
        identity: Running version and app name.
        dialog: Renders update alerts.
        launcher: Opens update URLs (system browser by default).
        translator: Optional localization layer.
        storage: Optional cache for the last good policy document.
        session: Optional requests session for the remote fetch.
        known_platforms: Platform identifiers the selector accepts.
        logger: Optional logger (defaults to the global logger).
    """

    def __init__(
        self,
        config: ManUpConfig,
        *,
        host: HostPlatform,
        identity: AppIdentity,
        dialog: Dialog,
        launcher: Launcher | None = None,
        translator: Translator | None = None,
        storage: Storage | None = None,
        session: requests.Session | None = None,
        known_platforms: tuple[str, ...] = KNOWN_PLATFORMS,
        logger: Logger | None = None,
    ):
        self.config = config
        self.host = host
        self.identity = identity
        self.known_platforms = known_platforms
        self._logger = logger
        self.store = MetadataStore(
            config.url,
            storage,
            namespace=config.storage_namespace,
            timeout=config.timeout,
            headers=config.headers,
            metadata_path=config.metadata_path,
            session=session,
            logger=logger,
        )
        self.presenter = AlertPresenter(
            dialog,
            launcher or BrowserLauncher(),
            identity,
            translator=translator,
            logger=logger,
        )
        self._session = CheckSession()

        # Register builtin strings unless the host ships its own
        if translator is not None and not config.external_translations:
            for lang, translations in TRANSLATIONS.items():
                translator.set_translation(lang, translations, True)

    @classmethod
    def from_config_file(
        cls, path: Path, overrides: dict[str, Any] | None = None, **collaborators: Any
    ) -> ManUpService:
        """Build a service from a YAML config file (see manup.config)."""
        return cls(load_config(path, overrides), **collaborators)

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    @property
    def state(self) -> CheckState:
        """Current state of the check: idle, checking or resolved."""
        return self._session.state

    async def validate(self) -> GateResult:
        """Run the version check, or join the one already running.

        Returns:
            A GateResult once the app may continue. Does not return at all
            when the app must be updated or is in maintenance mode.

        """
        if (
            self.config.recheck_after_resolve
            and self._session.state is CheckState.RESOLVED
        ):
            self._session = CheckSession()

        if not self._session.active:
            self.logger.verbose("GATE", "Starting version check")
            self._session.start(asyncio.create_task(self._run()))
        else:
            self.logger.debug("GATE", f"Joining {self._session.state.value} check")

        return await asyncio.shield(self._session.task)

    async def evaluate(self, policy: PlatformPolicy) -> Classification:
        """Classify the running app version against a platform policy."""
        version = await self.identity.get_version_number()
        return classify(policy, version, logger=self.logger)

    async def _run(self) -> GateResult:
        log = self.logger
        try:
            log.step(1, 4, "Waiting for host to be ready...")
            await self.host.ready()

            log.step(2, 4, "Fetching policy metadata...")
            metadata = await self.store.fetch()
            if metadata is None:
                log.verbose("GATE", "No policy metadata available, proceeding")
                return GateResult(Classification.PROCEED, None, "no_metadata")

            log.step(3, 4, "Evaluating running version...")
            policy = select(
                metadata,
                self.host.platform,
                known_platforms=self.known_platforms,
                logger=log,
            )
            classification = await self.evaluate(policy)
            if classification is Classification.PROCEED:
                return GateResult(Classification.PROCEED, policy, "up_to_date")

            log.step(4, 4, f"Presenting {classification.value} alert...")
            return await self.presenter.present(classification, policy)
        except InvalidVersionFormat as err:
            log.warning("GATE", f"Version check misconfigured: {err}; proceeding")
        except MetadataError as err:
            log.verbose("GATE", f"Version check skipped: {err}; proceeding")
        except Exception as err:
            log.warning("GATE", f"Version check failed: {err}; proceeding")
        return GateResult(Classification.PROCEED, None, "error")
