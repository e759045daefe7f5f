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

"""Cache storage for the last good policy document.

A cache is optional: a ManUpService built without one simply has no
offline fallback.

Public API:

- Storage: Protocol for async key-value stores
- MemoryStorage: In-process dict-backed storage
- JsonFileStorage: Single JSON file storage that survives restarts

"""

from .base import MemoryStorage, Storage
from .json_file import JsonFileStorage

__all__ = ["Storage", "MemoryStorage", "JsonFileStorage"]
