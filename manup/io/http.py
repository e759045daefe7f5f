"""
HTTP(S) retrieval of the policy document for ManUp.

The remote source is a plain JSON document at a configured URL. This module
owns the requests session and turns every failure mode into NetworkError so
the metadata store has a single thing to catch before falling back to its
cache.

Key Features:

- **Retry Logic with Exponential Backoff** - Retries transient failures
  (429, 500, 502, 503, 504) via urllib3.util.Retry.
- **Environment expansion in headers** - "${API_TOKEN}" style values are
  read from the environment; unset variables are dropped.
- **JSONPath extraction** - An optional jsonpath-ng expression picks the
  policy document out of a larger JSON response.

Example:
    Fetch a document:

    >>> from manup.io import get_json
    >>> document = get_json("https://example.com/manup.json", timeout=10)
    >>> document["ios"]["latest"]
    '2.3.1'

Notes:
- The call is blocking; the metadata store runs it in a worker thread.
- Timeouts are per-request.
- All errors are chained with 'from err' for better debugging.
"""

from __future__ import annotations

import os
from typing import Any

from jsonpath_ng import parse as jsonpath_parse
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from manup import __version__
from manup.exceptions import ConfigError, NetworkError
from manup.logging import Logger, get_global_logger


def make_session() -> requests.Session:
    """
    Create a requests.Session with sane retry/backoff defaults.

    - Retries on common transient status codes.
    - Applies exponential backoff.
    - Sets a User-Agent and asks for JSON.
    """
    s = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    s.headers.update(
        {
            "User-Agent": f"manup/{__version__}",
            "Accept": "application/json",
        }
    )
    s.mount("http://", HTTPAdapter(max_retries=retries))
    s.mount("https://", HTTPAdapter(max_retries=retries))
    return s


def expand_headers(
    headers: dict[str, str], logger: Logger | None = None
) -> dict[str, str]:
    """Expand "${VAR}" header values from the environment."""
    log = logger or get_global_logger()
    expanded = {}
    for key, value in headers.items():
        if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
            env_var = value[2:-1]
            env_value = os.environ.get(env_var)
            if not env_value:
                log.verbose("HTTP", f"Environment variable {env_var} not set")
            else:
                expanded[key] = env_value
        else:
            expanded[key] = value
    return expanded


def extract_path(document: Any, path: str) -> Any:
    """Return the first value matching a JSONPath expression.

    Raises:
        ConfigError: If the expression itself is invalid.
        NetworkError: If the response has nothing at that path.
    """
    try:
        expr = jsonpath_parse(path)
    except Exception as err:
        raise ConfigError(f"invalid metadata_path {path!r}: {err}") from err

    matches = expr.find(document)
    if not matches:
        raise NetworkError(f"metadata_path {path!r} did not match the response")
    return matches[0].value


def get_json(
    url: str,
    *,
    timeout: int = 30,
    headers: dict[str, str] | None = None,
    metadata_path: str | None = None,
    session: requests.Session | None = None,
    logger: Logger | None = None,
) -> Any:
    """GET a URL and decode its JSON body.

    Args:
        url: Document URL.
        timeout: Per-request timeout (seconds).
        headers: Extra request headers; "${VAR}" values are expanded.
        metadata_path: Optional JSONPath selecting the document inside the
            response body.
        session: Session to use (a retrying one is created if omitted).
        logger: Optional logger (defaults to the global logger).

    Returns:
        The decoded JSON value.

    Raises:
        NetworkError: On connection failures, HTTP error statuses, or a body
            that is not JSON.

    """
    log = logger or get_global_logger()
    sess = session or make_session()

    log.debug("HTTP", f"GET {url}")
    try:
        response = sess.get(
            url, headers=expand_headers(headers or {}, log), timeout=timeout
        )
        response.raise_for_status()
    except requests.exceptions.HTTPError as err:
        raise NetworkError(
            f"metadata request failed: {response.status_code} {response.reason}"
        ) from err
    except requests.exceptions.RequestException as err:
        raise NetworkError(f"failed to fetch metadata: {err}") from err
    finally:
        if session is None:
            sess.close()

    log.debug("HTTP", f"Response: {response.status_code} OK")

    try:
        document = response.json()
    except ValueError as err:
        raise NetworkError(
            f"invalid JSON response. Response: {response.text[:200]}"
        ) from err

    if metadata_path:
        document = extract_path(document, metadata_path)
    return document
