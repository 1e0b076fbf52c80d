"""
Live-conditions autofill.

The model is asked (with Google Search enabled) for a small JSON object of
current conditions.  Models like to wrap that in code fences or chat around
it, so the text is cleaned up before parsing.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Optional

from .errors import AutofillFailed, InvalidAutofillFormat
from .models import ConditionsSuggestion
from .prompts import build_conditions_prompt

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], str]

AUTOFILL_FAILURE = "Could not auto-fill conditions. Please enter them manually."

CONDITION_KEYS = (
    "swellHeight",
    "swellPeriod",
    "swellDirection",
    "windSpeed",
    "windDirection",
    "tideHeight",
    "tideDirection",
)

_FENCE_RE = re.compile(r"```(?:json)?")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> Dict[str, Any]:
    """Parse the JSON object in ``text``.

    Code fences are removed first.  If the remainder is not valid JSON, the
    span from the first ``{`` to the last ``}`` is tried instead.

    Raises:
        InvalidAutofillFormat: no object could be parsed.
    """
    cleaned = _FENCE_RE.sub("", text or "").strip()
    try:
        data = json.loads(cleaned)
    except ValueError:
        match = _OBJECT_RE.search(cleaned)
        if not match:
            raise InvalidAutofillFormat("Invalid JSON format") from None
        try:
            data = json.loads(match.group(0))
        except ValueError as exc:
            raise InvalidAutofillFormat(f"Invalid JSON format: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidAutofillFormat(f"Expected a JSON object, got {type(data).__name__}")
    return data


def normalize_tide_direction(value: Optional[Any]) -> str:
    # Anything that isn't clearly rising is treated as falling
    if value is not None and "rising" in str(value).lower():
        return "rising"
    return "falling"


def get_conditions(location_query: str, generate_with_search: SearchFn) -> ConditionsSuggestion:
    """Fetch current conditions for ``location_query``.

    Returns only the environmental form fields. Any failure is raised as
    :class:`AutofillFailed` so callers never apply a partial result.
    """
    try:
        text = generate_with_search(build_conditions_prompt(location_query))
        if not text:
            raise InvalidAutofillFormat("No data returned")
        raw = extract_json(text)
    except Exception as exc:
        logger.error("Autofill error for %r: %s", location_query, exc)
        raise AutofillFailed(AUTOFILL_FAILURE) from exc

    suggestion: ConditionsSuggestion = {}
    for key in CONDITION_KEYS:
        if key == "tideDirection":
            continue
        value = raw.get(key)
        if value is not None:
            suggestion[key] = str(value)
    suggestion["tideDirection"] = normalize_tide_direction(raw.get("tideDirection"))
    logger.info("Autofilled conditions for %r: %s", location_query, suggestion)
    return suggestion
