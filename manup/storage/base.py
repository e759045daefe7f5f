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

"""Cache collaborator protocol.

The metadata store only needs a tiny async key-value interface. Anything
with these two coroutines works: a Redis client wrapper, an app's settings
store, or the implementations shipped here.

Example:
    Implementing a custom storage:
        ```python
        class SettingsStorage:
            def __init__(self, settings):
                self._settings = settings

            async def get(self, key: str) -> str | None:
                return self._settings.value(key)

            async def set(self, key: str, value: str) -> None:
                self._settings.set_value(key, value)
        ```
"""

from __future__ import annotations

from typing import Protocol


class Storage(Protocol):
    """Async key-value store holding serialized strings."""

    async def get(self, key: str) -> str | None:
        """Return the stored string, or None if the key was never set."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...


class MemoryStorage:
    """In-process storage. Contents live as long as the object does."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def __len__(self) -> int:
        return len(self._data)
