import pytest

from surfsensei import main
from surfsensei.feedback import FeedbackStore


class FakeGemini:
    """Stands in for GeminiClient; records what the app sends."""

    def __init__(self, text="", search_text="", error=None):
        self.text = text
        self.search_text = search_text
        self.error = error
        self.calls = []

    def generate(self, system_instruction, user_query):
        self.calls.append(("generate", system_instruction, user_query))
        if self.error:
            raise self.error
        return self.text

    def generate_with_search(self, prompt):
        self.calls.append(("search", prompt))
        if self.error:
            raise self.error
        return self.search_text


@pytest.fixture
def store(tmp_path, monkeypatch):
    feedback_store = FeedbackStore(tmp_path / "feedback.json")
    monkeypatch.setattr(main, "get_store", lambda: feedback_store)
    return feedback_store


@pytest.fixture
def fake_gemini(monkeypatch):
    fake = FakeGemini()
    monkeypatch.setattr(main, "get_client", lambda: fake)
    return fake
