"""
Configuration loading for ManUp.

The gate is configured by a small YAML file (or a dict) layered over
builtin defaults:

1. **Builtin defaults** (DEFAULTS below)
2. **YAML file** (`manup:` mapping in the given file)
3. **Overrides** (dict passed by the caller, e.g. from CLI flags or env)

Merge Behavior
--------------
The loader performs deep merging with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Example file
------------
    manup:
      url: "https://example.com/manup.json"
      timeout: 10
      storage_namespace: "com.example.myapp"
      headers:
        Authorization: "${MANUP_TOKEN}"

Error Handling
--------------
- FileNotFoundError: Config file doesn't exist
- ConfigError: YAML parse errors, empty files, missing or invalid fields
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from manup.config import load_config
    >>> cfg = load_config(Path("manup.yaml"), overrides={"timeout": 5})
    >>> cfg.url
    'https://example.com/manup.json'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
import yaml

from manup.exceptions import ConfigError
from manup.metadata import DEFAULT_NAMESPACE

DEFAULTS: dict[str, Any] = {
    "url": None,
    "timeout": 30,
    "metadata_path": None,
    "storage_namespace": DEFAULT_NAMESPACE,
    "external_translations": False,
    "recheck_after_resolve": False,
    "headers": {},
}


# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class ManUpConfig:
    """Effective gate configuration.

    Attributes:
        url: Policy document URL.
        timeout: Request timeout in seconds.
        metadata_path: Optional JSONPath locating the document in the response.
        storage_namespace: Cache key prefix; the key is "<namespace>.manup".
        external_translations: If True, builtin strings are not registered
            with the translator (the host ships its own).
        recheck_after_resolve: If True, a settled check is discarded and the
            next validate() runs again. Default is one check per process.
        headers: Extra request headers ("${VAR}" values come from the env).
    """

    url: str
    timeout: int = 30
    metadata_path: str | None = None
    storage_namespace: str = DEFAULT_NAMESPACE
    external_translations: bool = False
    recheck_after_resolve: bool = False
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManUpConfig:
        """Validate a merged mapping and build a config.

        Raises:
            ConfigError: If a field is missing or has the wrong type.
        """
        merged = _deep_merge_dicts(DEFAULTS, data)
        errors = _config_errors(merged)
        if errors:
            raise ConfigError("invalid manup config: " + "; ".join(errors))
        unknown = set(merged) - set(DEFAULTS)
        if unknown:
            raise ConfigError(f"unknown manup config keys: {sorted(unknown)}")
        merged["headers"] = dict(merged["headers"])
        return cls(**merged)


# -------------------------------
# Validation
# -------------------------------


def _config_errors(cfg: dict[str, Any]) -> list[str]:
    errors = []

    url = cfg.get("url")
    if not url:
        errors.append("missing required field: url")
    elif not isinstance(url, str):
        errors.append("url must be a string")
    elif not url.startswith(("http://", "https://")):
        errors.append(f"url must be http(s): {url!r}")

    timeout = cfg.get("timeout")
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        errors.append("timeout must be a positive integer")

    path = cfg.get("metadata_path")
    if path is not None:
        if not isinstance(path, str):
            errors.append("metadata_path must be a string")
        else:
            try:
                jsonpath_parse(path)
            except Exception as err:
                errors.append(f"invalid metadata_path JSONPath: {err}")

    if not isinstance(cfg.get("storage_namespace"), str) or not cfg["storage_namespace"]:
        errors.append("storage_namespace must be a non-empty string")

    for flag in ("external_translations", "recheck_after_resolve"):
        if not isinstance(cfg.get(flag), bool):
            errors.append(f"{flag} must be a boolean")

    headers = cfg.get("headers")
    if not isinstance(headers, dict):
        errors.append("headers must be a dictionary")
    elif not all(isinstance(v, str) for v in headers.values()):
        errors.append("header values must be strings")

    return errors


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      FileNotFoundError      - when file does not exist
      ConfigError            - for invalid YAML (parse error) or empty files
    """
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


# -------------------------------
# Public API
# -------------------------------


def load_config(path: Path, overrides: dict[str, Any] | None = None) -> ManUpConfig:
    """Load the gate configuration from a YAML file.

    Args:
        path: YAML file with a top-level `manup:` mapping.
        overrides: Values applied on top of the file.

    Returns:
        The effective configuration.

    Raises:
        FileNotFoundError: If path does not exist.
        ConfigError: If the file is not valid YAML, has no `manup:` mapping,
            or the merged values are invalid.

    """
    data = _load_yaml_file(path)
    if not isinstance(data, dict) or not isinstance(data.get("manup"), dict):
        raise ConfigError(f"{path}: expected a top-level 'manup' mapping")
    return ManUpConfig.from_dict(_deep_merge_dicts(data["manup"], overrides or {}))
