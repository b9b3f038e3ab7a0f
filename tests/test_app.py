import io
import re

import pytest

from app import create_app
from conftest import SAMPLE_RESULT, FakeGenerator, make_settings
from controller import HTML_FAILED_MESSAGE, IMAGE_FAILED_MESSAGE
from models import GenerationError


@pytest.fixture
def fake_gen():
    return FakeGenerator()


@pytest.fixture
def app(fake_gen):
    return create_app(settings=make_settings(), generator=fake_gen)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def view_id(client):
    page = client.get("/").get_data(as_text=True)
    return re.search(r'const VIEW_ID = "([0-9a-f]+)";', page).group(1)


def upload(client, view_id, data, name="coupons.png", mimetype="image/png"):
    return client.post(
        f"/api/{view_id}/image",
        data={"file": (io.BytesIO(data), name, mimetype)},
        content_type="multipart/form-data",
    )


def test_index_serves_page_with_view_id(client):
    res = client.get("/")
    assert res.status_code == 200
    page = res.get_data(as_text=True)
    assert "AutoClip AI" in page
    assert "gemini-2.5-flash active" in page
    assert "const COPY_ACK_MS = 2000;" in page
    assert "/*__VIEW_ID__*/" not in page


def test_copy_button_writes_script_and_reverts_after_two_seconds(client, view_id, png_bytes):
    page = client.get("/").get_data(as_text=True)
    assert "const COPY_ACK_MS = 2000;" in page
    assert 'const COPY_LABEL = "Copy Code";' in page
    assert 'const COPIED_LABEL = "Copied!";' in page
    assert "navigator.clipboard.writeText(view.script);" in page
    assert "}, COPY_ACK_MS);" in page

    # the text the button copies is the result script, unchanged
    res = upload(client, view_id, png_bytes)
    assert res.get_json()["state"]["result"]["script"] == SAMPLE_RESULT.script


def test_back_forward_cache_keeps_view(client):
    page = client.get("/").get_data(as_text=True)
    assert "if (!event.persisted) navigator.sendBeacon('/api/' + VIEW_ID + '/close');" in page
    assert "window.addEventListener('pageshow'" in page


def test_generator_crash_leaves_actionable_state(client, view_id, fake_gen):
    fake_gen.error = RuntimeError("sdk blew up")
    res = client.post(f"/api/{view_id}/html", json={"html": "<button>Clip</button>"})
    assert res.status_code == 502
    body = res.get_json()
    assert body["error"] == HTML_FAILED_MESSAGE
    assert body["state"]["loading"] is False
    assert "sdk blew up" not in res.get_data(as_text=True)


def test_initial_state(client, view_id):
    state = client.get(f"/api/{view_id}/state").get_json()["state"]
    assert state["mode"] == "SCREENSHOT"
    assert state["result"]["state"] == "idle"
    assert state["error"] is None


def test_unknown_view_is_404(client):
    res = client.get("/api/deadbeef/state")
    assert res.status_code == 404
    assert "error" in res.get_json()


def test_requires_api_key_without_generator():
    with pytest.raises(RuntimeError):
        create_app(settings=make_settings(api_key=""))


def test_upload_generates_script(client, view_id, fake_gen, png_bytes):
    res = upload(client, view_id, png_bytes)
    assert res.status_code == 200
    state = res.get_json()["state"]
    assert state["result"]["state"] == "populated"
    assert state["result"]["script"] == SAMPLE_RESULT.script
    assert state["result"]["selectors"] == list(SAMPLE_RESULT.target_selectors)
    assert state["image_preview"].startswith("data:image/png;base64,")
    payload, _ = fake_gen.calls[0]
    assert payload.data == png_bytes


def test_upload_without_file(client, view_id, fake_gen):
    res = client.post(f"/api/{view_id}/image", data={}, content_type="multipart/form-data")
    assert res.status_code == 400
    assert fake_gen.calls == []


def test_oversized_upload_rejected(client, view_id, fake_gen):
    res = upload(client, view_id, b"\0" * (4 * 1024 * 1024))
    assert res.status_code == 400
    body = res.get_json()
    assert body["error"] == "Image size must be under 4MB"
    assert body["state"]["error"] == "Image size must be under 4MB"
    assert body["state"]["result"]["state"] == "idle"
    assert fake_gen.calls == []


def test_request_body_cap(fake_gen):
    app = create_app(settings=make_settings(max_image_bytes=64), generator=fake_gen)
    client = app.test_client()
    page = client.get("/").get_data(as_text=True)
    vid = re.search(r'const VIEW_ID = "([0-9a-f]+)";', page).group(1)

    res = upload(client, vid, b"\0" * 1000)
    assert res.status_code == 413
    assert res.get_json()["error"] == "Image size must be under 64 bytes"
    assert fake_gen.calls == []


def test_upload_failure_is_502_with_generic_message(client, view_id, fake_gen, png_bytes):
    fake_gen.error = GenerationError("raw SDK detail")
    res = upload(client, view_id, png_bytes)
    assert res.status_code == 502
    body = res.get_json()
    assert body["error"] == IMAGE_FAILED_MESSAGE
    assert "raw SDK detail" not in res.get_data(as_text=True)
    assert body["state"]["loading"] is False


def test_regenerate_and_clear(client, view_id, fake_gen, png_bytes):
    upload(client, view_id, png_bytes)
    client.post(f"/api/{view_id}/auto-scroll", json={"enabled": True})
    res = client.post(f"/api/{view_id}/regenerate")
    assert res.status_code == 200
    assert fake_gen.calls[0][0] == fake_gen.calls[1][0]
    assert [scroll for _, scroll in fake_gen.calls] == [False, True]

    res = client.delete(f"/api/{view_id}/image")
    assert res.get_json()["state"]["has_image"] is False
    res = client.post(f"/api/{view_id}/regenerate")
    assert res.status_code == 400
    assert len(fake_gen.calls) == 2


def test_html_flow(client, view_id, fake_gen):
    client.post(f"/api/{view_id}/mode", json={"mode": "HTML"})
    res = client.post(f"/api/{view_id}/html", json={"html": "  "})
    assert res.status_code == 400
    assert res.get_json()["error"] == "Please paste some HTML code."
    assert fake_gen.calls == []

    res = client.post(f"/api/{view_id}/html", json={"html": "<button>Clip</button>"})
    assert res.status_code == 200
    state = res.get_json()["state"]
    assert state["mode"] == "HTML"
    assert state["error"] is None
    assert state["result"]["state"] == "populated"


def test_html_failure(client, view_id, fake_gen):
    fake_gen.error = GenerationError("bad json")
    res = client.post(f"/api/{view_id}/html", json={"html": "<button>Clip</button>"})
    assert res.status_code == 502
    assert res.get_json()["error"] == HTML_FAILED_MESSAGE


def test_bad_mode(client, view_id):
    res = client.post(f"/api/{view_id}/mode", json={"mode": "PDF"})
    assert res.status_code == 400


def test_auto_scroll_toggle(client, view_id, fake_gen):
    res = client.post(f"/api/{view_id}/auto-scroll", json={})
    assert res.get_json()["state"]["auto_scroll"] is True
    res = client.post(f"/api/{view_id}/auto-scroll", json={"enabled": False})
    assert res.get_json()["state"]["auto_scroll"] is False
    assert fake_gen.calls == []


def test_playground_endpoints(client, view_id):
    data = client.get(f"/api/{view_id}/playground").get_json()
    assert len(data["coupons"]) == 6

    data = client.post(f"/api/{view_id}/playground/clip/3").get_json()
    assert [c["id"] for c in data["coupons"] if c["isClipped"]] == [3]
    assert data["notification"] == "Clipped Large Eggs!"

    assert client.post(f"/api/{view_id}/playground/clip/99").status_code == 404

    data = client.post(f"/api/{view_id}/playground/reset").get_json()
    assert not any(c["isClipped"] for c in data["coupons"])


def test_bulk_hook_requires_mount(client, view_id):
    assert client.post(f"/api/{view_id}/playground/clip-all").status_code == 409

    client.post(f"/api/{view_id}/playground/mount")
    client.post(f"/api/{view_id}/playground/clip/1")
    client.post(f"/api/{view_id}/playground/clip/2")
    data = client.post(f"/api/{view_id}/playground/clip-all").get_json()
    assert data["clipped"] == 4
    assert data["notification"] == "Auto-clipped 4 coupons!"
    assert all(c["isClipped"] for c in data["coupons"])

    assert client.post(f"/api/{view_id}/playground/unmount").status_code == 204
    assert client.post(f"/api/{view_id}/playground/clip-all").status_code == 409


def test_close_discards_view(client, view_id):
    client.post(f"/api/{view_id}/playground/mount")
    assert client.post(f"/api/{view_id}/close").status_code == 204
    assert client.get(f"/api/{view_id}/state").status_code == 404
    assert client.post(f"/api/{view_id}/playground/clip-all").status_code == 409
