"""Tagged outcomes returned by key validation and message sending.

Failures are values, not exceptions: the panel branches on them to update
its status line without ever letting an error escape an awaited call.
"""

from dataclasses import dataclass
from enum import Enum


class ValidationStatus(Enum):
    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one key validation. `detail` is only set for ERROR."""
    status: ValidationStatus
    detail: str | None = None

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(ValidationStatus.VALID)

    @classmethod
    def invalid(cls) -> "ValidationResult":
        return cls(ValidationStatus.INVALID)

    @classmethod
    def error(cls, detail: str) -> "ValidationResult":
        return cls(ValidationStatus.ERROR, detail)

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.VALID


# -- Send errors -------------------------------------------------------------

@dataclass(frozen=True)
class PreconditionError:
    """Blank credential or prompt, caught before any network call."""
    message: str


@dataclass(frozen=True)
class TransportError:
    """Connectivity or other unexpected failure beneath the remote call."""
    message: str


@dataclass(frozen=True)
class RemoteServiceError:
    """The service answered but reported a failure (bad key, quota, ...)."""
    message: str
    code: int | None = None
    status: str | None = None

    def describe(self) -> str:
        extras = []
        if self.code is not None:
            extras.append(f"code {self.code}")
        if self.status:
            extras.append(f"status {self.status}")
        if not extras:
            return self.message
        return f"{self.message} ({', '.join(extras)})"


@dataclass(frozen=True)
class EmptyResultError:
    """The service answered successfully but returned no usable text."""
    message: str = "No valid response content received from Gemini."


SendError = PreconditionError | TransportError | RemoteServiceError | EmptyResultError


@dataclass(frozen=True)
class SendResult:
    """Either the generated text or one of the SendError kinds."""
    text: str | None = None
    error: SendError | None = None

    @classmethod
    def success(cls, text: str) -> "SendResult":
        return cls(text=text)

    @classmethod
    def failure(cls, error: SendError) -> "SendResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None
