"""
Data records shared by the prompt, parsing, autofill and feedback layers.

Form values are kept as plain text exactly as the user typed them; nothing
here validates or converts numbers.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

TIDE_DIRECTIONS = ("rising", "falling")
SKILL_LEVELS = ("Beginner", "Intermediate", "Advanced")
ACCURACY_CHOICES = ("accurate", "inaccurate")

# Form field names used by the page, keyed by dataclass attribute
FORM_NAMES: Dict[str, str] = {
    "session_datetime": "sessionDateTime",
    "spots": "spots",
    "swell_height": "swellHeight",
    "swell_period": "swellPeriod",
    "swell_direction": "swellDirection",
    "wind_speed": "windSpeed",
    "wind_direction": "windDirection",
    "tide_height": "tideHeight",
    "tide_direction": "tideDirection",
    "skill_level": "skillLevel",
    "body_weight": "bodyWeight",
    "user_boards": "userBoards",
}

# Fields an autofill result is allowed to overwrite
CONDITION_FIELDS = (
    "swell_height",
    "swell_period",
    "swell_direction",
    "wind_speed",
    "wind_direction",
    "tide_height",
    "tide_direction",
)

PROFILE_FIELDS = ("session_datetime", "skill_level", "body_weight", "user_boards")

ConditionsSuggestion = Dict[str, str]


def _default_session_time(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return now.strftime("%Y-%m-%dT%H:%M")


@dataclass
class SessionInput:
    """Everything the user enters about one planned surf session."""

    session_datetime: str = ""
    spots: str = ""
    swell_height: str = ""
    swell_period: str = ""
    swell_direction: str = ""
    wind_speed: str = ""
    wind_direction: str = ""
    tide_height: str = ""
    tide_direction: str = "rising"
    skill_level: str = "Intermediate"
    body_weight: str = ""
    user_boards: str = ""

    @classmethod
    def default(cls, now: Optional[datetime] = None) -> "SessionInput":
        return cls(session_datetime=_default_session_time(now))

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "SessionInput":
        """Build an input from submitted form fields.

        Missing fields take their defaults; tide direction and skill level
        outside their allowed values fall back to the default choice.
        """
        base = cls.default()
        values: Dict[str, str] = {}
        for attr, name in FORM_NAMES.items():
            raw = form.get(name)
            values[attr] = getattr(base, attr) if raw is None else str(raw)
        if values["tide_direction"] not in TIDE_DIRECTIONS:
            values["tide_direction"] = base.tide_direction
        if values["skill_level"] not in SKILL_LEVELS:
            values["skill_level"] = base.skill_level
        return cls(**values)

    def to_form(self) -> Dict[str, str]:
        return {FORM_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class Recommendation:
    spot: str
    board: str
    comparison: str
    strategy: str


@dataclass(frozen=True)
class FeedbackRecord:
    timestamp: str
    accuracy: str
    comments: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"timestamp": self.timestamp, "accuracy": self.accuracy, "comments": self.comments}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FeedbackRecord":
        return cls(
            timestamp=str(data.get("timestamp") or ""),
            accuracy=str(data.get("accuracy") or ""),
            comments=str(data.get("comments") or ""),
        )


def merge_conditions(session: SessionInput, suggestion: Mapping[str, Any]) -> SessionInput:
    """Apply autofilled conditions to ``session``.

    Only environmental fields are taken from ``suggestion`` (keyed by form
    name, e.g. ``swellHeight``). Spots and the surfer's profile are kept;
    keys that are missing or null leave the current value alone.
    """
    updates: Dict[str, str] = {}
    for attr in CONDITION_FIELDS:
        value = suggestion.get(FORM_NAMES[attr])
        if value is None:
            continue
        updates[attr] = str(value)
    return replace(session, **updates)
