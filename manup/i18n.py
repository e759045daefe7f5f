"""
Builtin strings for the update alerts.

Keys are registered with a translator under the "manup" namespace
(e.g. "manup.mandatory.title"). "{app}" is replaced with the app name.
"""

from __future__ import annotations

from typing import Any

NAMESPACE = "manup"

EN: dict[str, Any] = {
    "maintenance": {
        "title": "{app} Unavailable",
        "text": "{app} is currently unavailable. Please check back later",
    },
    "mandatory": {
        "title": "Update Required",
        "text": "An update to {app} is required to continue.",
    },
    "optional": {
        "title": "Update Available",
        "text": "An update to {app} is available. Would you like to update?",
    },
    "buttons": {
        "update": "Update",
        "later": "Not Now",
    },
}

TRANSLATIONS: dict[str, dict[str, Any]] = {
    "en": {NAMESPACE: EN},
}


def builtin_text(key: str, **params: Any) -> str:
    """Return the English string for a dotted key like "mandatory.title".

    Raises:
        KeyError: If the key is not a builtin string.
    """
    node: Any = EN
    for part in key.split("."):
        node = node[part]
    return node.format(**params)
