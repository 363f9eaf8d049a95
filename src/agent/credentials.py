"""API key validation against the Gemini service.

A key is considered usable when a cheap read-only call (listing models)
succeeds and returns at least one model. Exactly one attempt is made per
call; there are no retries.
"""

import logging
from typing import Callable

from google import genai
from google.genai import errors

from src.agent.llm import get_client
from src.agent.outcomes import RemoteServiceError, ValidationResult

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], genai.Client]


class CredentialValidator:
    """Checks candidate API keys.

    Usage:
        validator = CredentialValidator()
        result = await validator.validate(key)
        if result.is_valid: ...
    """

    def __init__(self, client_factory: ClientFactory = get_client):
        self._client_factory = client_factory

    async def validate(self, candidate: str) -> ValidationResult:
        if not candidate or not candidate.strip():
            logger.error("API key is empty, skipping validation call")
            return ValidationResult.invalid()

        try:
            client = self._client_factory(candidate)
            pager = await client.aio.models.list(config={"page_size": 1})
            found = False
            async for _model in pager:
                found = True
                break
        except errors.APIError as e:
            error = RemoteServiceError(message=e.message or str(e), code=e.code, status=e.status)
            logger.error("API key validation failed: Gemini API error - %s", error.describe())
            return ValidationResult.error(f"Gemini API error - {error.describe()}")
        except Exception as e:
            logger.error("API key validation failed: unexpected error - %s", e)
            return ValidationResult.error(f"Unexpected error - {e}")

        if not found:
            logger.error("API key validation failed: no models returned")
            return ValidationResult.error("No models returned for this key")

        logger.info("API key is valid, models listed successfully")
        return ValidationResult.valid()
