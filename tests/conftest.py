"""
Pytest configuration and shared fixtures for ManUp tests.

This module provides reusable fixtures and fake host collaborators used
across the test suite.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest
import yaml

from manup.host import StaticAppIdentity, StaticHost
from manup.models import PlatformPolicy, PolicyMetadata
from manup.presentation import Alert
from manup.storage import MemoryStorage

METADATA_URL = "https://example.com/manup.json"


class FakeDialog:
    """Records presented alerts and lets tests press their buttons."""

    def __init__(self, auto_press: str | None = None) -> None:
        self.alerts: list[Alert] = []
        self.auto_press = auto_press

    def present(self, alert: Alert) -> None:
        self.alerts.append(alert)
        if self.auto_press:
            asyncio.get_running_loop().call_soon(self.press, self.auto_press)

    def press(self, role: str, index: int = -1) -> bool | None:
        alert = self.alerts[index]
        for button in alert.buttons:
            if button.role == role:
                return button.handler()
        raise LookupError(f"no {role!r} button on {alert.title!r}")


class FakeLauncher:
    def __init__(self) -> None:
        self.opened: list[str] = []

    def open(self, url: str) -> None:
        self.opened.append(url)


class FakeTranslator:
    """Translator that returns "<key>|<app>" and records registrations."""

    def __init__(self) -> None:
        self.registered: list[tuple[str, dict[str, Any], bool]] = []

    def instant(self, key: str, params: dict[str, Any] | None = None) -> str:
        return f"{key}|{(params or {}).get('app', '')}"

    def set_translation(
        self, lang: str, translations: dict[str, Any], merge: bool = False
    ) -> None:
        self.registered.append((lang, translations, merge))


class FailingStorage:
    """Storage whose every call fails."""

    async def get(self, key: str) -> str | None:
        raise OSError("storage is broken")

    async def set(self, key: str, value: str) -> None:
        raise OSError("storage is broken")


class RecordingLogger:
    """Logger that keeps (level, prefix, message) tuples."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.records.append(("step", f"{step}/{total}", message))

    def verbose(self, prefix: str, message: str) -> None:
        self.records.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.records.append(("debug", prefix, message))

    def warning(self, prefix: str, message: str) -> None:
        self.records.append(("warning", prefix, message))

    def messages(self, level: str) -> list[str]:
        return [message for lvl, _, message in self.records if lvl == level]


@pytest.fixture
def metadata_url() -> str:
    return METADATA_URL


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """Provide a complete policy document in wire form."""
    return {
        "ios": {
            "minimum": "2.0.0",
            "latest": "3.0.0",
            "url": "https://apps.example.com/ios",
            "enabled": True,
        },
        "android": {
            "minimum": "2.0.0",
            "latest": "3.0.0",
            "url": "https://apps.example.com/android",
            "enabled": True,
        },
        "windows": None,
    }


@pytest.fixture
def sample_metadata(sample_document: dict[str, Any]) -> PolicyMetadata:
    return PolicyMetadata.from_dict(sample_document)


@pytest.fixture
def make_policy():
    """
    Factory fixture for PlatformPolicy objects.

    Usage:
        policy = make_policy(enabled=False)
    """

    def _make(
        minimum: str = "2.0.0",
        latest: str = "3.0.0",
        url: str = "https://apps.example.com/ios",
        enabled: bool = True,
    ) -> PlatformPolicy:
        return PlatformPolicy(
            minimum_version=minimum,
            latest_version=latest,
            update_url=url,
            enabled=enabled,
        )

    return _make


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def dialog() -> FakeDialog:
    return FakeDialog()


@pytest.fixture
def dismissing_dialog() -> FakeDialog:
    """Dialog that presses "Not Now" as soon as an alert is shown."""
    return FakeDialog(auto_press="later")


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def host() -> StaticHost:
    return StaticHost("ios")


@pytest.fixture
def identity() -> StaticAppIdentity:
    return StaticAppIdentity("2.5.0", "Test App")


@pytest.fixture
def create_yaml_file(tmp_path: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("manup.yaml", {"manup": {...}})
    """

    def _create(filename: str, data: dict[str, Any]) -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create
