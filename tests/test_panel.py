"""Tests for the panel session: key gating, sending, and logging."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import errors

from src.agent.credentials import CredentialValidator
from src.agent.messaging import MessageClient
from src.agent.outcomes import (
    EmptyResultError,
    PreconditionError,
    RemoteServiceError,
    SendResult,
    TransportError,
    ValidationResult,
)
from src.interface.panel import KeyStatus, PanelSession, format_send_error
from src.memory.preferences import API_KEY_PREF, InMemoryPreferenceStore
from tests.conftest import make_client, make_response


@pytest.fixture
def session(client_factory):
    factory, _ = client_factory
    return PanelSession(
        preferences=InMemoryPreferenceStore(),
        validator=CredentialValidator(factory),
        client=MessageClient(factory, model="test-model"),
    )


class TestKeyValidation:

    def test_empty_key_sets_unknown_without_saving(self, session):
        status = asyncio.run(session.validate_and_save("  "))
        assert status is KeyStatus.UNKNOWN
        assert session.validation_message == "API Key cannot be empty."
        assert session.stored_key == ""

    def test_valid_key_is_saved(self, session):
        status = asyncio.run(session.validate_and_save("good-key"))
        assert status is KeyStatus.VALID
        assert session.preferences.get(API_KEY_PREF) == "good-key"
        assert session.can_send

    def test_failed_key_is_not_saved_and_keeps_detail(self, session, client_factory):
        factory, _ = client_factory
        factory.client = make_client(list_error=errors.ClientError(
            400, {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}},
        ))
        status = asyncio.run(session.validate_and_save("bad-key"))
        assert status is KeyStatus.INVALID
        assert session.stored_key == ""
        assert "API key not valid" in session.validation_message
        assert session.message_level == "error"
        assert not session.can_send

    def test_validation_in_flight_is_not_restarted(self, session):
        session.key_status = KeyStatus.VALIDATING
        session.validator = MagicMock()
        session.validator.validate = AsyncMock()
        asyncio.run(session.validate_and_save("key"))
        session.validator.validate.assert_not_called()

    def test_validator_exception_does_not_leave_validating(self, session):
        session.validator = MagicMock()
        session.validator.validate = AsyncMock(side_effect=RuntimeError("boom"))

        status = asyncio.run(session.validate_and_save("key"))

        assert status is KeyStatus.INVALID
        assert "boom" in session.validation_message
        assert session.stored_key == ""

        session.validator.validate = AsyncMock(return_value=ValidationResult.valid())
        assert asyncio.run(session.validate_and_save("key")) is KeyStatus.VALID

    def test_restore_validates_stored_key(self, session):
        session.preferences.set(API_KEY_PREF, "stored")
        assert asyncio.run(session.restore()) is KeyStatus.VALID

    def test_restore_without_key_stays_unknown(self, session, client_factory):
        _, calls = client_factory
        assert asyncio.run(session.restore()) is KeyStatus.UNKNOWN
        assert calls == []

    def test_forget_key(self, session):
        asyncio.run(session.validate_and_save("good-key"))
        session.forget_key()
        assert session.stored_key == ""
        assert session.key_status is KeyStatus.UNKNOWN


class TestSubmit:

    def test_submit_ignored_until_key_is_valid(self, session, client_factory):
        factory, _ = client_factory
        assert asyncio.run(session.submit("hi")) is None
        factory.client.aio.models.generate_content.assert_not_called()
        assert len(session.log) == 0

    def test_blank_prompt_is_ignored(self, session):
        asyncio.run(session.validate_and_save("good-key"))
        assert asyncio.run(session.submit("   ")) is None
        assert len(session.log) == 0

    def test_failure_appends_error_record(self, session, client_factory):
        factory, _ = client_factory
        asyncio.run(session.validate_and_save("good-key"))
        factory.client.aio.models.generate_content = AsyncMock(
            side_effect=ConnectionError("offline"),
        )
        record = asyncio.run(session.submit("hi"))
        assert record.is_error
        assert record.text_content == "Error: Unexpected - offline"
        assert session.log.snapshot() == (record,)
        assert not session.is_sending

    def test_client_exception_is_logged_as_error_record(self, session):
        asyncio.run(session.validate_and_save("good-key"))
        session.client = MagicMock()
        session.client.send = AsyncMock(side_effect=RuntimeError("boom"))

        record = asyncio.run(session.submit("hi"))

        assert len(session.log) == 1
        assert record.is_error
        assert record.original_query == "hi"
        assert record.text_content == "Error: An exception occurred - boom"
        assert not session.is_sending
        assert session.can_send

    def test_clear_responses(self, session, client_factory):
        factory, _ = client_factory
        factory.client.aio.models.generate_content = AsyncMock(return_value=make_response("ok"))
        asyncio.run(session.validate_and_save("good-key"))
        asyncio.run(session.submit("hi"))
        session.clear_responses()
        assert session.log.snapshot() == ()


class TestFormatSendError:

    def test_messages_per_category(self):
        assert format_send_error(RemoteServiceError("Quota", 429, "RESOURCE_EXHAUSTED")) == (
            "Error: Gemini API - Quota (code 429, status RESOURCE_EXHAUSTED)"
        )
        assert format_send_error(TransportError("offline")) == "Error: Unexpected - offline"
        assert format_send_error(EmptyResultError()) == (
            "Error: No valid response content received from Gemini."
        )
        assert format_send_error(PreconditionError("Message text is empty.")) == (
            "Error: Message text is empty."
        )


class TestEndToEnd:

    def test_validate_send_and_log(self, client_factory):
        factory, _ = client_factory
        factory.client.aio.models.generate_content = AsyncMock(return_value=make_response("4"))
        validator = CredentialValidator(factory)
        client = MessageClient(factory, model="test-model")
        session = PanelSession(
            preferences=InMemoryPreferenceStore(), validator=validator, client=client,
        )

        assert asyncio.run(validator.validate("good-key")) == ValidationResult.valid()
        asyncio.run(session.validate_and_save("good-key"))
        asyncio.run(session.submit("2+2?"))

        snap = session.log.snapshot()
        assert len(snap) == 1
        assert snap[0].original_query == "2+2?"
        assert snap[0].text_content == "4"
        assert not snap[0].is_error

    def test_log_order_follows_completion_order(self, session):
        asyncio.run(session.validate_and_save("good-key"))

        async def fake_send(credential, prompt):
            await asyncio.sleep(0.05 if prompt == "slow" else 0)
            return SendResult.success(prompt.upper())

        session.client = MagicMock()
        session.client.send = fake_send

        async def overlapping():
            # Bypass the sending gate to simulate a host allowing overlap
            slow = asyncio.create_task(session.submit("slow"))
            await asyncio.sleep(0)
            session.is_sending = False
            await session.submit("fast")
            await slow

        asyncio.run(overlapping())
        assert [r.text_content for r in session.log.snapshot()] == ["FAST", "SLOW"]
