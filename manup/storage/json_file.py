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

"""JSON file storage for ManUp.

Persists key-value entries in a single JSON file so the last good policy
document survives restarts. The file layout is:

    {
      "metadata": {
        "manup_version": "0.1.0",
        "schema_version": "1",
        "last_updated": "2025-01-01T00:00:00+00:00"
      },
      "entries": {
        "com.manup.gate.manup": "{\"ios\": {...}}"
      }
    }

Key Features:

- Auto-creation of the file and parent directories on first write
- Corrupted files are backed up to <name>.json.backup and replaced
- Blocking file I/O runs in a worker thread so the event loop never stalls

Example:
    Use as the metadata cache:
        ```python
        from pathlib import Path
        from manup.storage import JsonFileStorage

        storage = JsonFileStorage(Path("~/.myapp/manup.json").expanduser())
        await storage.set("key", "value")
        print(await storage.get("key"))
        ```

"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Any

from manup import __version__
from manup.logging import Logger, get_global_logger


class JsonFileStorage:
    """Storage backed by one JSON file.

    Attributes:
        store_file: Path to the JSON file.

    """

    def __init__(self, store_file: Path, logger: Logger | None = None):
        """Initialize file storage.

        Args:
            store_file: Path to the JSON file. Created on first write.
            logger: Optional logger (defaults to the global logger).

        """
        self.store_file = store_file
        self._logger = logger
        self._lock = asyncio.Lock()

    @property
    def logger(self) -> Logger:
        return self._logger or get_global_logger()

    def _read(self) -> dict[str, Any]:
        try:
            store = load_store(self.store_file)
        except FileNotFoundError:
            return create_default_store()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return self._discard_corrupted()

        if not isinstance(store, dict) or not all(
            isinstance(store.get(section, {}), dict)
            for section in ("entries", "metadata")
        ):
            return self._discard_corrupted()
        return store

    def _discard_corrupted(self) -> dict[str, Any]:
        backup = self.store_file.with_suffix(".json.backup")
        self.store_file.replace(backup)
        self.logger.warning("CACHE", f"Corrupted store file backed up to {backup}")
        return create_default_store()

    def _write(self, key: str, value: str) -> None:
        store = self._read()
        store.setdefault("entries", {})[key] = value
        store.setdefault("metadata", {})
        store["metadata"]["last_updated"] = datetime.now(UTC).isoformat()
        save_store(store, self.store_file)

    async def get(self, key: str) -> str | None:
        async with self._lock:
            store = await asyncio.to_thread(self._read)
        value = store.get("entries", {}).get(key)
        self.logger.debug(
            "CACHE", f"get {key}: {'hit' if value is not None else 'miss'}"
        )
        return value

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._write, key, value)
        self.logger.debug("CACHE", f"set {key} in {self.store_file}")


def create_default_store() -> dict[str, Any]:
    """Create a default empty store structure."""
    return {
        "metadata": {
            "manup_version": __version__,
            "schema_version": "1",
            "last_updated": datetime.now(UTC).isoformat(),
        },
        "entries": {},
    }


def load_store(store_file: Path) -> dict[str, Any]:
    """Load the store from a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        json.JSONDecodeError: If the file contains invalid JSON.
        UnicodeDecodeError: If the file is not UTF-8 text.

    """
    with open(store_file, encoding="utf-8") as f:
        return json.load(f)


def save_store(store: dict[str, Any], store_file: Path) -> None:
    """Save the store to a JSON file with pretty-printing.

    Writes to a temporary file first and renames it over the target, so a
    crash mid-write never leaves a truncated store behind.
    """
    store_file.parent.mkdir(parents=True, exist_ok=True)

    tmp = store_file.with_suffix(store_file.suffix + ".part")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(store, f, indent=2, sort_keys=True)
            f.write("\n")
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    tmp.replace(store_file)
