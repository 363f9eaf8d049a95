"""Single-shot text generation against Gemini.

MessageClient.send issues one generate_content request and returns a
SendResult. It never touches the response log; appending is up to the
caller.
"""

import logging

from google.genai import errors

from src.agent.credentials import ClientFactory
from src.agent.llm import MODEL, get_client
from src.agent.outcomes import (
    EmptyResultError,
    PreconditionError,
    RemoteServiceError,
    SendResult,
    TransportError,
)

logger = logging.getLogger(__name__)


def extract_text(response) -> str:
    """Concatenate the text of every part of the first candidate, in order.

    Returns "" when the candidate, its content or its parts are missing.
    Parts without text (function calls, inline data) contribute nothing.
    """
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return ""
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) if content is not None else None
    if not parts:
        return ""
    return "".join(part.text for part in parts if getattr(part, "text", None))


class MessageClient:
    """Sends one prompt per call and returns the generated text.

    Usage:
        client = MessageClient()
        result = await client.send(api_key, "2+2?")
        if result.ok: print(result.text)
    """

    def __init__(self, client_factory: ClientFactory = get_client, model: str = MODEL):
        self._client_factory = client_factory
        self.model = model

    async def send(self, credential: str, prompt: str) -> SendResult:
        if not credential or not credential.strip():
            logger.error("API key is empty, cannot send message")
            return SendResult.failure(PreconditionError("API key is empty."))
        if not prompt or not prompt.strip():
            logger.error("Prompt is empty, cannot send message")
            return SendResult.failure(PreconditionError("Message text is empty."))

        try:
            client = self._client_factory(credential)
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except errors.APIError as e:
            error = RemoteServiceError(message=e.message or str(e), code=e.code, status=e.status)
            logger.warning("Gemini API error sending message: %s", error.describe())
            return SendResult.failure(error)
        except Exception as e:
            logger.warning("Unexpected error sending message: %s", e)
            return SendResult.failure(TransportError(str(e)))

        text = extract_text(response)
        if not text:
            logger.warning("Gemini returned no text content")
            return SendResult.failure(EmptyResultError())

        logger.info("Received %d chars from Gemini", len(text))
        return SendResult.success(text)
