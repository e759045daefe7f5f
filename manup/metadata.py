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

"""Policy metadata acquisition with cached fallback.

MetadataStore fetches the policy document from the remote source and keeps
the last good copy in the cache collaborator:

    fetch()
      remote OK    -> schedule save() in the background, return the document
      remote fails -> load_cached()
                        cached OK   -> return the cached document
                        cache fails -> return None ("no metadata")

Remote failure means anything: connection errors, HTTP error statuses,
bodies that are not JSON, and JSON that does not match the PolicyMetadata
shape. Persistence is best-effort; a failed save is logged and never fails
the fetch.

Example:
    Basic usage:
        ```python
        from manup.metadata import MetadataStore
        from manup.storage import MemoryStorage

        store = MetadataStore("https://example.com/manup.json", MemoryStorage())
        metadata = await store.fetch()
        await store.flush()  # wait for the background save, e.g. on shutdown
        ```

"""

from __future__ import annotations

import asyncio
import json

import requests

from manup.exceptions import (
    CacheError,
    CacheUnavailable,
    MetadataError,
    NetworkError,
    NoCachedData,
)
from manup.io.http import get_json
from manup.logging import Logger, get_global_logger
from manup.models import PolicyMetadata
from manup.storage import Storage

DEFAULT_NAMESPACE = "com.manup.gate"


def cache_key(namespace: str = DEFAULT_NAMESPACE) -> str:
    """Return the cache key for a namespace ("<namespace>.manup")."""
    return f"{namespace}.manup"


class MetadataStore:
    """Fetch-with-fallback cache for the policy document.

    Attributes:
        url: Remote document URL.
        storage: Cache collaborator, or None when running without a cache.
        key: Cache key the document is stored under.

    """

    def __init__(
        self,
        url: str,
        storage: Storage | None = None,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        timeout: int = 30,
        headers: dict[str, str] | None = None,
        metadata_path: str | None = None,
        session: requests.Session | None = None,
        logger: Logger | None = None,
    ):
        self.url = url
        self.storage = storage
        self.key = cache_key(namespace)
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.metadata_path = metadata_path
        self._session = session
        self._logger = logger
        self._pending: set[asyncio.Task] = set()

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    async def fetch_remote(self) -> PolicyMetadata:
        """Retrieve and parse the remote document (no cache involved).

        Raises:
            NetworkError: If the document cannot be retrieved.
            MalformedMetadata: If it does not match the PolicyMetadata shape.
        """
        document = await asyncio.to_thread(
            get_json,
            self.url,
            timeout=self.timeout,
            headers=self.headers,
            metadata_path=self.metadata_path,
            session=self._session,
            logger=self.logger,
        )
        return PolicyMetadata.from_dict(document)

    async def fetch(self) -> PolicyMetadata | None:
        """Return the freshest policy document available.

        Returns:
            The remote document, else the cached one, else None.

        """
        try:
            metadata = await self.fetch_remote()
        except (NetworkError, MetadataError) as err:
            self.logger.verbose(
                "METADATA", f"Remote fetch failed ({err}), trying cache"
            )
            return await self._fallback()
        except Exception as err:
            # Misconfiguration (e.g. a bad metadata_path) or an unexpected error
            self.logger.warning(
                "METADATA", f"Remote fetch failed unexpectedly ({err}), trying cache"
            )
            return await self._fallback()

        self.logger.verbose("METADATA", f"Fetched policy document from {self.url}")
        if self.storage is not None:
            self._schedule_save(metadata)
        return metadata

    async def _fallback(self) -> PolicyMetadata | None:
        try:
            metadata = await self.load_cached()
        except CacheError as err:
            self.logger.verbose("METADATA", f"No fallback available: {err}")
            return None
        self.logger.verbose("METADATA", "Using cached policy document")
        return metadata

    async def load_cached(self) -> PolicyMetadata:
        """Return the last persisted document.

        Raises:
            CacheUnavailable: If no cache collaborator is configured, or
                reading from it fails.
            NoCachedData: If nothing usable has ever been persisted.
        """
        if self.storage is None:
            raise CacheUnavailable("storage not configured")

        try:
            raw = await self.storage.get(self.key)
        except Exception as err:
            raise CacheUnavailable(f"storage read failed: {err}") from err
        if raw is None:
            raise NoCachedData(f"nothing cached under {self.key!r}")
        try:
            return PolicyMetadata.from_dict(json.loads(raw))
        except (json.JSONDecodeError, TypeError, MetadataError) as err:
            raise NoCachedData(f"cached policy document is unusable: {err}") from err

    async def save(self, metadata: PolicyMetadata) -> None:
        """Persist a document to the cache.

        Raises:
            CacheUnavailable: If no cache collaborator is configured.
        """
        if self.storage is None:
            raise CacheUnavailable("storage not configured")
        await self.storage.set(self.key, json.dumps(metadata.to_dict()))
        self.logger.debug("CACHE", f"Saved policy document under {self.key}")

    def _schedule_save(self, metadata: PolicyMetadata) -> None:
        task = asyncio.create_task(self._save_quietly(metadata))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save_quietly(self, metadata: PolicyMetadata) -> None:
        try:
            await self.save(metadata)
        except Exception as err:
            self.logger.warning("CACHE", f"Failed to persist policy document: {err}")

    async def flush(self) -> None:
        """Wait for background saves scheduled by fetch() to finish."""
        if self._pending:
            await asyncio.gather(*self._pending)
