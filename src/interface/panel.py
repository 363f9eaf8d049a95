"""Headless state behind the Gemini panel.

Holds the key status, the sending flag and the response log, and wires
the validator and message client to them. Rendering lives in cli.py.
"""

import logging
from enum import Enum

from src.agent.credentials import CredentialValidator
from src.agent.messaging import MessageClient
from src.agent.outcomes import (
    EmptyResultError,
    PreconditionError,
    RemoteServiceError,
    SendError,
    ValidationStatus,
)
from src.memory.preferences import API_KEY_PREF, PreferenceStore
from src.memory.response_log import ResponseLog, ResponseRecord

logger = logging.getLogger(__name__)


class KeyStatus(Enum):
    UNKNOWN = "unknown"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"


def format_send_error(error: SendError) -> str:
    """Human-readable text for an error record in the log."""
    if isinstance(error, RemoteServiceError):
        return f"Error: Gemini API - {error.describe()}"
    if isinstance(error, (EmptyResultError, PreconditionError)):
        return f"Error: {error.message}"
    return f"Error: Unexpected - {error.message}"


class PanelSession:
    """One panel's worth of state.

    Usage:
        session = PanelSession(preferences=PreferenceStore())
        await session.restore()
        await session.validate_and_save(key)
        await session.submit("2+2?")
        for record in session.log.newest_first(): ...
    """

    def __init__(
        self,
        preferences=None,
        validator: CredentialValidator | None = None,
        client: MessageClient | None = None,
        log: ResponseLog | None = None,
    ):
        self.preferences = preferences if preferences is not None else PreferenceStore()
        self.validator = validator or CredentialValidator()
        self.client = client or MessageClient()
        self.log = log if log is not None else ResponseLog()

        self.key_status = KeyStatus.UNKNOWN
        self.validation_message = ""
        self.message_level = "info"
        self.is_sending = False

    @property
    def stored_key(self) -> str:
        return self.preferences.get(API_KEY_PREF, "")

    @property
    def can_send(self) -> bool:
        return self.key_status is KeyStatus.VALID and not self.is_sending

    async def restore(self) -> KeyStatus:
        """Re-validate the stored key, if any."""
        key = self.stored_key
        if key.strip():
            await self.validate_and_save(key)
        else:
            self.key_status = KeyStatus.UNKNOWN
        return self.key_status

    async def validate_and_save(self, key: str) -> KeyStatus:
        if self.key_status is KeyStatus.VALIDATING:
            logger.info("Validation already in progress, ignoring request")
            return self.key_status

        if not key or not key.strip():
            self.key_status = KeyStatus.UNKNOWN
            self.validation_message = "API Key cannot be empty."
            self.message_level = "error"
            return self.key_status

        self.key_status = KeyStatus.VALIDATING
        self.validation_message = ""
        try:
            result = await self.validator.validate(key)
        except Exception as e:
            self.key_status = KeyStatus.INVALID
            self.validation_message = f"API Key validation failed. An exception occurred - {e}"
            self.message_level = "error"
            logger.error("Gemini API key validation raised: %s", e)
            return self.key_status

        if result.is_valid:
            self.preferences.set(API_KEY_PREF, key)
            self.key_status = KeyStatus.VALID
            self.validation_message = "API Key is valid and has been saved!"
            self.message_level = "info"
            logger.info("Gemini API key saved")
        else:
            self.key_status = KeyStatus.INVALID
            message = "API Key validation failed. Please check the key and try again."
            if result.status is ValidationStatus.ERROR and result.detail:
                message = f"{message} ({result.detail})"
            self.validation_message = message
            self.message_level = "error"
            logger.error("Gemini API key validation failed")
        return self.key_status

    async def submit(self, prompt: str) -> ResponseRecord | None:
        """Send prompt with the stored key and log whatever comes back.

        Returns the appended record, or None when the submit was ignored.
        """
        if not prompt or not prompt.strip() or not self.can_send:
            return None

        self.is_sending = True
        try:
            result = await self.client.send(self.stored_key, prompt)
            if result.ok:
                record = ResponseRecord(original_query=prompt, text_content=result.text)
            else:
                text = format_send_error(result.error)
                logger.error("Send failed: %s", text)
                record = ResponseRecord(original_query=prompt, text_content=text, is_error=True)
        except Exception as e:
            logger.error("Error sending message to Gemini: %s", e)
            record = ResponseRecord(
                original_query=prompt,
                text_content=f"Error: An exception occurred - {e}",
                is_error=True,
            )
        finally:
            self.is_sending = False
        self.log.append(record)
        return record

    def clear_responses(self) -> None:
        self.log.clear()
        logger.info("Responses cleared")

    def forget_key(self) -> None:
        self.preferences.delete(API_KEY_PREF)
        self.key_status = KeyStatus.UNKNOWN
        self.validation_message = ""
