import pytest

from surfsensei.autofill import extract_json, get_conditions, normalize_tide_direction
from surfsensei.errors import AutofillFailed, InvalidAutofillFormat, TransportError

PAYLOAD = '{"swellHeight": "3-4", "swellPeriod": "14", "tideDirection": "rising"}'


def test_fenced_json_parses_like_plain_json():
    assert extract_json(f"```json\n{PAYLOAD}\n```") == extract_json(PAYLOAD)
    assert extract_json(f"```\n{PAYLOAD}\n```") == extract_json(PAYLOAD)


def test_object_is_found_inside_chatter():
    data = extract_json(f"Here you go: {PAYLOAD} Thanks!")
    assert data["swellHeight"] == "3-4"


@pytest.mark.parametrize("text", ["", "no json here", "{not: valid}", "[1, 2, 3]"])
def test_invalid_autofill_format(text):
    with pytest.raises(InvalidAutofillFormat):
        extract_json(text)


@pytest.mark.parametrize("value", ["rising", "Rising", "RISING fast", "slowly rising"])
def test_tide_direction_rising(value):
    assert normalize_tide_direction(value) == "rising"


@pytest.mark.parametrize("value", ["", "FALLING", "unknown", "high", None])
def test_tide_direction_everything_else_falls(value):
    assert normalize_tide_direction(value) == "falling"


def test_get_conditions_returns_environment_fields_only():
    prompts = []

    def search(prompt):
        prompts.append(prompt)
        return (
            '{"swellHeight": "3-4", "swellPeriod": 14, "swellDirection": "W", "windSpeed": "5-10", '
            '"windDirection": "NW", "tideHeight": 2.5, "tideDirection": "Rising", "bodyWeight": "300"}'
        )

    result = get_conditions("Pipeline", search)
    assert result == {
        "swellHeight": "3-4",
        "swellPeriod": "14",
        "swellDirection": "W",
        "windSpeed": "5-10",
        "windDirection": "NW",
        "tideHeight": "2.5",
        "tideDirection": "rising",
    }
    assert '"Pipeline"' in prompts[0]


def test_get_conditions_missing_tide_direction_is_falling():
    result = get_conditions("Pipeline", lambda prompt: '{"swellHeight": "6"}')
    assert result == {"swellHeight": "6", "tideDirection": "falling"}


@pytest.mark.parametrize("reply", ["", "I could not find anything"])
def test_get_conditions_bad_reply_fails(reply):
    with pytest.raises(AutofillFailed) as excinfo:
        get_conditions("Pipeline", lambda prompt: reply)
    assert str(excinfo.value) == "Could not auto-fill conditions. Please enter them manually."


def test_get_conditions_wraps_transport_errors():
    def search(prompt):
        raise TransportError("Network error contacting Gemini: down")

    with pytest.raises(AutofillFailed) as excinfo:
        get_conditions("Pipeline", search)
    assert isinstance(excinfo.value.__cause__, TransportError)
