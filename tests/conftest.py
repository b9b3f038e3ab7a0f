import io
from types import SimpleNamespace

import pytest
from PIL import Image

from config import Settings
from models import GenerationError, ScriptResponse


SAMPLE_RESULT = ScriptResponse(
    script="console.log('clip');",
    explanation="Clicks every .clip-btn with a 4s delay.",
    confidence="High",
    target_selectors=(".clip-btn", "button[aria-label='Clip']"),
)


# -----------------------------
# Test doubles
# -----------------------------
class FakeGenerator:
    """Records every call; returns ``result`` or raises ``error``."""

    def __init__(self, result=SAMPLE_RESULT, error=None):
        self.result = result
        self.error = error
        self.calls = []
        self.on_call = None

    def generate(self, payload, auto_scroll=False):
        self.calls.append((payload, auto_scroll))
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.result


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class FakeGenaiClient:
    def __init__(self, text=None, error=None):
        self.models = FakeModels(text=text, error=error)


# -----------------------------
# Helpers
# -----------------------------
def make_image_bytes(fmt="PNG", size=(8, 8)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 40, 40)).save(buf, format=fmt)
    return buf.getvalue()


def make_settings(**overrides):
    values = dict(
        api_key="test-key",
        model="gemini-2.5-flash",
        timeout_ms=None,
        max_image_bytes=4 * 1024 * 1024,
        html_char_limit=30_000,
        max_sessions=16,
        host="127.0.0.1",
        port=5001,
        debug=False,
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def failing_generator():
    return FakeGenerator(error=GenerationError("boom"))
