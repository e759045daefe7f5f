"""
Tests for manup.service module.

Tests the version gate end to end including:
- Proceed, optional, mandatory and maintenance outcomes
- Single-flight checks shared by every caller
- Fail-open behavior for every kind of failure
- Cache fallback when the remote source is unreachable
- Translation registration
"""

from __future__ import annotations

import asyncio
import json

import pytest
import requests_mock

from manup.config import ManUpConfig
from manup.host import StaticAppIdentity, StaticHost
from manup.i18n import TRANSLATIONS
from manup.metadata import cache_key
from manup.models import Classification
from manup.service import CheckState, ManUpService
from manup.storage import MemoryStorage

pytestmark = pytest.mark.asyncio


@pytest.fixture
def make_service(metadata_url, host, identity, dialog, launcher):
    """
    Factory fixture for ManUpService with fake collaborators.

    Usage:
        service = make_service(config={"recheck_after_resolve": True})
    """

    def _make(config: dict | None = None, **collaborators) -> ManUpService:
        values = {"url": metadata_url, **(config or {})}
        kwargs = {
            "host": host,
            "identity": identity,
            "dialog": dialog,
            "launcher": launcher,
            **collaborators,
        }
        return ManUpService(ManUpConfig.from_dict(values), **kwargs)

    return _make


async def _stop(service: ManUpService) -> None:
    task = service._session.task
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    await service.store.flush()


class TestOutcomes:
    """Tests for each classification outcome."""

    async def test_up_to_date_proceeds(
        self, make_service, metadata_url, sample_document, dialog
    ):
        service = make_service(identity=StaticAppIdentity("3.0.0", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            result = await service.validate()

        assert result.classification is Classification.PROCEED
        assert result.reason == "up_to_date"
        assert result.policy.latest_version == "3.0.0"
        assert result.allowed
        assert dialog.alerts == []
        assert service.state is CheckState.RESOLVED

    async def test_optional_resolves_after_not_now(
        self, make_service, metadata_url, sample_document, dismissing_dialog
    ):
        service = make_service(dialog=dismissing_dialog)

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            result = await asyncio.wait_for(service.validate(), 5)

        assert result.classification is Classification.OPTIONAL
        assert result.reason == "dismissed"
        assert dismissing_dialog.alerts[0].title == "Update Available"

    async def test_mandatory_never_resolves(
        self, make_service, metadata_url, sample_document, dialog, launcher
    ):
        service = make_service(identity=StaticAppIdentity("1.9.9", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(service.validate(), 0.5)

        assert service.state is CheckState.CHECKING
        assert dialog.alerts[0].classification is Classification.MANDATORY

        dialog.press("update")
        assert launcher.opened == ["https://apps.example.com/ios"]
        assert service.state is CheckState.CHECKING
        await _stop(service)

    async def test_disabled_never_resolves(
        self, make_service, metadata_url, sample_document, dialog
    ):
        sample_document["ios"]["enabled"] = False
        service = make_service(identity=StaticAppIdentity("99.0.0", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(service.validate(), 0.5)

        assert dialog.alerts[0].classification is Classification.DISABLED
        assert dialog.alerts[0].buttons == ()
        assert dialog.alerts[0].title == "Test App Unavailable"
        await _stop(service)


class TestSingleFlight:
    """Tests for check sharing between callers."""

    async def test_concurrent_callers_share_one_check(
        self, make_service, metadata_url, sample_document
    ):
        service = make_service(identity=StaticAppIdentity("3.0.0", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            first, second = await asyncio.gather(service.validate(), service.validate())

        assert first is second
        assert m.call_count == 1

    async def test_later_callers_get_settled_result(
        self, make_service, metadata_url, sample_document
    ):
        service = make_service(identity=StaticAppIdentity("3.0.0", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            first = await service.validate()
            second = await service.validate()

        assert first is second
        assert m.call_count == 1

    async def test_dismissed_optional_not_shown_again(
        self, make_service, metadata_url, sample_document, dismissing_dialog
    ):
        service = make_service(dialog=dismissing_dialog)

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            await service.validate()
            await service.validate()

        assert len(dismissing_dialog.alerts) == 1

    async def test_recheck_after_resolve(
        self, make_service, metadata_url, sample_document
    ):
        service = make_service(
            config={"recheck_after_resolve": True},
            identity=StaticAppIdentity("3.0.0", "Test App"),
        )

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            first = await service.validate()
            second = await service.validate()

        assert first is not second
        assert first == second
        assert m.call_count == 2

    async def test_blocked_callers_all_wait(
        self, make_service, metadata_url, sample_document, dialog
    ):
        service = make_service(identity=StaticAppIdentity("1.0.0", "Test App"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(service.validate(), 0.5)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(service.validate(), 0.05)

        assert m.call_count == 1
        assert len(dialog.alerts) == 1
        await _stop(service)

    async def test_waits_for_host_ready(
        self, make_service, metadata_url, sample_document
    ):
        ready = asyncio.Event()
        service = make_service(
            host=StaticHost("ios", ready_event=ready),
            identity=StaticAppIdentity("3.0.0", "Test App"),
        )
        assert service.state is CheckState.IDLE

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            pending = asyncio.create_task(service.validate())
            await asyncio.sleep(0.01)

            assert service.state is CheckState.CHECKING
            assert m.call_count == 0

            ready.set()
            result = await asyncio.wait_for(pending, 5)

        assert result.reason == "up_to_date"
        assert m.call_count == 1


class TestFailOpen:
    """Tests that every failure lets the app proceed."""

    async def test_no_metadata(self, make_service, metadata_url, dialog):
        service = make_service()

        with requests_mock.Mocker() as m:
            m.get(metadata_url, status_code=500)
            result = await service.validate()

        assert result.classification is Classification.PROCEED
        assert result.reason == "no_metadata"
        assert result.policy is None
        assert dialog.alerts == []

    async def test_cache_fallback_drives_decision(
        self, make_service, metadata_url, sample_document, dialog
    ):
        storage = MemoryStorage({cache_key(): json.dumps(sample_document)})
        service = make_service(
            storage=storage, identity=StaticAppIdentity("1.0.0", "Test App")
        )

        with requests_mock.Mocker() as m:
            m.get(metadata_url, status_code=503)
            with pytest.raises(asyncio.TimeoutError):
                await asyncio.wait_for(service.validate(), 0.5)

        assert dialog.alerts[0].classification is Classification.MANDATORY
        await _stop(service)

    async def test_platform_without_policy(
        self, make_service, metadata_url, sample_document, dialog
    ):
        service = make_service(host=StaticHost("windows"))

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            result = await service.validate()

        assert result.classification is Classification.PROCEED
        assert result.reason == "error"
        assert dialog.alerts == []

    async def test_invalid_running_version(
        self, make_service, metadata_url, sample_document, recording_logger
    ):
        service = make_service(
            identity=StaticAppIdentity("2.5", "Test App"), logger=recording_logger
        )

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            result = await service.validate()

        assert result.reason == "error"
        warnings = recording_logger.messages("warning")
        assert any("misconfigured" in w for w in warnings)

    async def test_host_failure(self, make_service, recording_logger):
        class BrokenHost:
            platform = "ios"

            async def ready(self) -> None:
                raise RuntimeError("no UI")

        service = make_service(host=BrokenHost(), logger=recording_logger)

        result = await service.validate()

        assert result.reason == "error"
        assert any("no UI" in w for w in recording_logger.messages("warning"))

    async def test_dialog_failure(self, make_service, metadata_url, sample_document):
        class BrokenDialog:
            def present(self, alert) -> None:
                raise RuntimeError("cannot render")

        service = make_service(dialog=BrokenDialog())

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            result = await service.validate()

        assert result.classification is Classification.PROCEED
        assert result.reason == "error"


class TestTranslations:
    async def test_builtin_strings_registered(self, make_service, translator):
        make_service(translator=translator)

        assert translator.registered == [("en", TRANSLATIONS["en"], True)]

    async def test_external_translations_skip_registration(
        self, make_service, translator
    ):
        make_service(config={"external_translations": True}, translator=translator)

        assert translator.registered == []

    async def test_translated_alert_text(
        self, make_service, metadata_url, sample_document, translator, dismissing_dialog
    ):
        service = make_service(dialog=dismissing_dialog, translator=translator)

        with requests_mock.Mocker() as m:
            m.get(metadata_url, json=sample_document)
            await service.validate()

        assert dismissing_dialog.alerts[0].title == "manup.optional.title|Test App"


class TestEvaluate:
    async def test_evaluate(self, make_service, make_policy):
        service = make_service()

        assert await service.evaluate(make_policy()) is Classification.OPTIONAL
        assert (
            await service.evaluate(make_policy(enabled=False))
            is Classification.DISABLED
        )


async def test_from_config_file(
    create_yaml_file, metadata_url, host, identity, dialog, launcher
):
    path = create_yaml_file(
        "manup.yaml",
        {"manup": {"url": metadata_url, "storage_namespace": "org.example"}},
    )

    service = ManUpService.from_config_file(
        path, host=host, identity=identity, dialog=dialog, launcher=launcher
    )

    assert service.config.url == metadata_url
    assert service.store.key == "org.example.manup"
