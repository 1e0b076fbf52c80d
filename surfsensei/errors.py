"""Failure types raised by the Gemini-backed flows, and how they are shown."""

from __future__ import annotations


class SurfSenseiError(Exception):
    """Base class for errors raised by SurfSensei."""


class EmptyResponse(SurfSenseiError):
    """The model answered but produced no usable text (e.g. safety filtering)."""


class TransportError(SurfSenseiError):
    """The Gemini service could not be reached or rejected the request."""


class InvalidAutofillFormat(SurfSenseiError):
    """No JSON object could be extracted from an autofill response."""


class AutofillFailed(SurfSenseiError):
    """Autofill did not produce conditions; the form must be left untouched."""


class PersistenceDegraded(SurfSenseiError):
    """The feedback history could not be read or written."""


GENERIC_FAILURE = "Failed to get recommendation. Please try again."
API_KEY_FAILURE = "Failed to get recommendation. Please check your API key configuration."
NETWORK_FAILURE = "A network error occurred. Please check your connection and try again."
EMPTY_FAILURE = (
    "The AI returned an empty response. This might be due to content safety filters. "
    "Try adjusting your inputs and submit again."
)


def classify_error(message: str) -> str:
    """Sort an error message into ``config``, ``connectivity`` or ``other``.

    Gemini does not hand back structured codes we can rely on across
    transports, so this sniffs the message text. Keep it the single place
    that does so.
    """
    lowered = (message or "").lower()
    if "api key" in lowered:
        return "config"
    if "network" in lowered or "fetch" in lowered:
        return "connectivity"
    return "other"


def recommendation_error_message(exc: BaseException) -> str:
    if isinstance(exc, EmptyResponse):
        return EMPTY_FAILURE
    kind = classify_error(str(exc))
    if kind == "config":
        return API_KEY_FAILURE
    if kind == "connectivity":
        return NETWORK_FAILURE
    return GENERIC_FAILURE
