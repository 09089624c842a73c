import threading

import pytest

from assistant.conversation import ConversationManager
from config.settings import Settings


class FakeClient:
    """Stands in for GenerationClient; records every prompt it receives."""

    def __init__(self, reply="Tier 1: 100-499 units at $8.40/unit", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, prompt, system_instruction=None, temperature=None):
        self.calls.append({"prompt": prompt, "system_instruction": system_instruction})
        if self.error is not None:
            raise self.error
        return self.reply


class BlockingClient(FakeClient):
    """Holds each generate() call open until release() is called."""

    def __init__(self, reply="late reply"):
        super().__init__(reply=reply)
        self.entered = threading.Event()
        self._gate = threading.Event()

    def release(self):
        self._gate.set()

    def generate(self, prompt, system_instruction=None, temperature=None):
        self.calls.append({"prompt": prompt, "system_instruction": system_instruction})
        self.entered.set()
        assert self._gate.wait(timeout=5), "test never released the blocking client"
        return self.reply


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def manager(fake_client):
    return ConversationManager(client=fake_client, tool="pricing_advisor")


@pytest.fixture
def make_settings(monkeypatch):
    def _make(**env):
        for key in (
            "GOOGLE_API_KEY",
            "API_KEY",
            "GEMINI_MODEL",
            "MODEL_TEMPERATURE",
            "MODEL_TOP_P",
            "MODEL_TIMEOUT",
            "MAX_SESSIONS",
            "LOG_LEVEL",
        ):
            monkeypatch.delenv(key, raising=False)
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return Settings()

    return _make
