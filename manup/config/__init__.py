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

"""Configuration loading for ManUp.

Layers builtin defaults, a YAML file and caller overrides into one frozen
ManUpConfig.

Public API:

- ManUpConfig: Effective gate configuration
- load_config: Load and merge configuration from a YAML file

Example:
    Basic usage:

        from pathlib import Path
        from manup.config import load_config

        config = load_config(Path("manup.yaml"))
        print(config.url)

"""

from .loader import DEFAULTS, ManUpConfig, load_config

__all__ = ["DEFAULTS", "ManUpConfig", "load_config"]
