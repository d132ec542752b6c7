"""Error normalisation for Campaign Monitor API failures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorCause:
    """Provider error body reduced to a common ``{error, error_description}`` shape."""

    error: str
    error_description: str


class ProviderError(Exception):
    """Raised when a Campaign Monitor call (OAuth or API) fails."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        status_text: str | None = None,
        cause: ErrorCause | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text
        self.cause = cause


def normalize_error(error: BaseException | str) -> ProviderError:
    """Wrap a transport/HTTP failure (or a plain message) in a ProviderError.

    HTTP error bodies come in two shapes: the API's ``{"Code", "Message"}``
    and the OAuth endpoint's ``{"error", "error_description"}``. Anything else
    is kept verbatim under an ``unknown`` cause.
    """
    if isinstance(error, ProviderError):
        return error
    if isinstance(error, str):
        return ProviderError(error)

    message = str(error) or "No Error message"
    if not isinstance(error, httpx.HTTPStatusError):
        return ProviderError(message)

    response = error.response
    return ProviderError(
        message,
        status=response.status_code or None,
        status_text=response.reason_phrase or None,
        cause=_cause_from_body(response),
    )


def _cause_from_body(response: httpx.Response) -> ErrorCause | None:
    if not response.content:
        return None
    try:
        data: Any = response.json()
    except ValueError:
        data = response.text

    if isinstance(data, dict):
        if data.get("Code") and data.get("Message"):
            return ErrorCause(str(data["Code"]), str(data["Message"]))
        if data.get("error") and data.get("error_description"):
            return ErrorCause(str(data["error"]), str(data["error_description"]))
    logger.debug("Unrecognised error body: %r", data)
    return ErrorCause("unknown", repr(data))
