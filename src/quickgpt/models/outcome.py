"""Result values returned by the chat client."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class OutcomeKind(str, Enum):
    """Terminal state of a single chat-completion call."""

    SUCCESS = "success"
    EMPTY_CONTENT = "empty_content"
    NETWORK_UNAVAILABLE = "network_unavailable"
    CONFIGURATION_MISSING = "configuration_missing"
    CONFIGURATION_INVALID = "configuration_invalid"
    TRANSPORT_FAILURE = "transport_failure"
    AUTHORIZATION_FAILED = "authorization_failed"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    UNEXPECTED_STATUS = "unexpected_status"
    DECODE_ERROR = "decode_error"
    UNEXPECTED_ERROR = "unexpected_error"


class TransportErrorKind(str, Enum):
    """Classification of a transport-level failure."""

    NO_CONNECTION = "no_connection"
    TIMEOUT = "timeout"
    HOST_UNREACHABLE = "host_unreachable"
    OTHER = "other"


NETWORK_UNAVAILABLE_MESSAGE = "No internet connection. Please check your network settings and try again."
CONFIGURATION_MISSING_MESSAGE = "API Key not configured. Please set your API key in the configuration file."
CONFIGURATION_INVALID_MESSAGE = "Invalid API endpoint URL. Please check the URL in the configuration file."
AUTHORIZATION_FAILED_MESSAGE = "Authorization failed. Please check your API key in the configuration file."
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again later."
SERVER_ERROR_MESSAGE = "Server error. The chat service might be experiencing issues."
EMPTY_CONTENT_MESSAGE = "No response content received"

TRANSPORT_MESSAGES = {
    TransportErrorKind.NO_CONNECTION: "No internet connection. Please check your network settings.",
    TransportErrorKind.TIMEOUT: "Request timed out. The server might be busy or unreachable.",
    TransportErrorKind.HOST_UNREACHABLE: (
        "Cannot connect to the API server. Please check your network connection and try again."
    ),
}


class ChatOutcome(BaseModel):
    """
    Outcome of ChatClient.complete().

    Every call resolves to one of these; `message` is what the caller shows
    to the user, whether the call succeeded or not.
    """

    kind: OutcomeKind = Field(..., description="Terminal state of the call")

    message: str = Field(..., description="User-facing text to display verbatim")

    text: Optional[str] = Field(
        default=None,
        description="Assistant reply (SUCCESS only)"
    )

    status_code: Optional[int] = Field(
        default=None,
        description="HTTP status for status-derived outcomes"
    )

    transport_kind: Optional[TransportErrorKind] = Field(
        default=None,
        description="Failure class for TRANSPORT_FAILURE"
    )

    model_config = {"frozen": True}

    @property
    def is_error(self) -> bool:
        """True unless the call reached the API and decoded a reply."""
        return self.kind not in (OutcomeKind.SUCCESS, OutcomeKind.EMPTY_CONTENT)

    @classmethod
    def success(cls, text: str) -> "ChatOutcome":
        return cls(kind=OutcomeKind.SUCCESS, message=text, text=text)

    @classmethod
    def empty_content(cls) -> "ChatOutcome":
        return cls(kind=OutcomeKind.EMPTY_CONTENT, message=EMPTY_CONTENT_MESSAGE)

    @classmethod
    def network_unavailable(cls) -> "ChatOutcome":
        return cls(kind=OutcomeKind.NETWORK_UNAVAILABLE, message=NETWORK_UNAVAILABLE_MESSAGE)

    @classmethod
    def configuration_missing(cls) -> "ChatOutcome":
        return cls(kind=OutcomeKind.CONFIGURATION_MISSING, message=CONFIGURATION_MISSING_MESSAGE)

    @classmethod
    def configuration_invalid(cls) -> "ChatOutcome":
        return cls(kind=OutcomeKind.CONFIGURATION_INVALID, message=CONFIGURATION_INVALID_MESSAGE)

    @classmethod
    def transport_failure(cls, kind: TransportErrorKind, error: str) -> "ChatOutcome":
        message = TRANSPORT_MESSAGES.get(kind, f"Network error: {error}")
        return cls(
            kind=OutcomeKind.TRANSPORT_FAILURE,
            message=message,
            transport_kind=kind,
        )

    @classmethod
    def from_status(cls, status_code: int) -> "ChatOutcome":
        """
        Classify a non-2xx HTTP status.

        Args:
            status_code: HTTP status returned by the API

        Returns:
            Outcome for the status class
        """
        if status_code == 401:
            return cls(
                kind=OutcomeKind.AUTHORIZATION_FAILED,
                message=AUTHORIZATION_FAILED_MESSAGE,
                status_code=status_code,
            )
        if status_code == 429:
            return cls(
                kind=OutcomeKind.RATE_LIMITED,
                message=RATE_LIMITED_MESSAGE,
                status_code=status_code,
            )
        if 500 <= status_code <= 599:
            return cls(
                kind=OutcomeKind.SERVER_ERROR,
                message=SERVER_ERROR_MESSAGE,
                status_code=status_code,
            )
        return cls(
            kind=OutcomeKind.UNEXPECTED_STATUS,
            message=f"HTTP Error: Status {status_code}",
            status_code=status_code,
        )

    @classmethod
    def decode_error(cls, error: str) -> "ChatOutcome":
        return cls(kind=OutcomeKind.DECODE_ERROR, message=f"Error parsing response: {error}")

    @classmethod
    def unexpected_error(cls, error: str) -> "ChatOutcome":
        return cls(kind=OutcomeKind.UNEXPECTED_ERROR, message=f"Error: {error}")
