from conftest import SAMPLE_RESULT
from models import Failed, Idle, Loading, Populated
from presenter import confidence_tier, present


def test_idle_and_failed_render_placeholder():
    assert present(Idle())["state"] == "idle"
    assert present(Failed("nope"))["state"] == "idle"
    assert "Upload a screenshot or paste HTML" in present(Idle())["message"]


def test_loading():
    view = present(Loading(3))
    assert view == {"state": "loading", "message": "Analyzing DOM structure..."}


def test_populated():
    view = present(Populated(SAMPLE_RESULT))
    assert view["state"] == "populated"
    assert view["script"] == SAMPLE_RESULT.script
    assert view["explanation"] == SAMPLE_RESULT.explanation
    assert view["confidence"] == "High"
    assert view["confidence_tier"] == "high"
    assert view["selectors"] == [".clip-btn", "button[aria-label='Clip']"]


def test_confidence_tiers():
    assert confidence_tier("High") == "high"
    assert confidence_tier("Medium") == "other"
    assert confidence_tier("Low") == "other"
    assert confidence_tier("very high") == "other"

