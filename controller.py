import base64
import io
import logging
import threading
import uuid
from collections import OrderedDict

from PIL import Image, UnidentifiedImageError

from config import MAX_IMAGE_BYTES
from models import (
    Failed,
    GenerationError,
    HtmlPayload,
    Idle,
    ImagePayload,
    InputMode,
    Loading,
    Populated,
    ValidationError,
)
from playground import DemoPlayground
from presenter import present

logger = logging.getLogger(__name__)

IMAGE_FAILED_MESSAGE = "Failed to analyze image. Please try again."
HTML_FAILED_MESSAGE = "Failed to analyze HTML. Ensure it contains button elements."
EMPTY_HTML_MESSAGE = "Please paste some HTML code."
NO_IMAGE_MESSAGE = "Upload a screenshot first."
NOT_AN_IMAGE_MESSAGE = "Please upload a PNG or JPG image."
TOO_MANY_PIXELS_MESSAGE = "Image dimensions are too large. Please upload a smaller screenshot."


def size_limit_message(max_bytes):
    mib = 1024 * 1024
    if max_bytes >= mib and max_bytes % mib == 0:
        return f"Image size must be under {max_bytes // mib}MB"
    return f"Image size must be under {max_bytes} bytes"


def sniff_image(data):
    """Return the MIME type Pillow detects for ``data``, or raise ValidationError."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except Image.DecompressionBombError as e:
        raise ValidationError(TOO_MANY_PIXELS_MESSAGE) from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ValidationError(NOT_AN_IMAGE_MESSAGE) from e
    mime = Image.MIME.get(fmt or "")
    if not mime or not mime.startswith("image/"):
        raise ValidationError(NOT_AN_IMAGE_MESSAGE)
    return mime


class InputController:
    """UI state for one page view.

    Generation state is one of Idle, Loading, Populated or Failed. Every new
    generation gets a fresh request id; a completion carrying an older id is
    dropped, so a slow first request can never overwrite a newer result.
    """

    def __init__(self, generator, max_image_bytes=MAX_IMAGE_BYTES):
        self.generator = generator
        self.max_image_bytes = max_image_bytes
        self.mode = InputMode.SCREENSHOT
        self.auto_scroll = False
        self.state = Idle()
        self.validation_error = None
        self.image = None
        self.image_filename = None
        self.image_preview = None
        self.html_input = ""
        self._next_request_id = 0
        self._lock = threading.Lock()

    @property
    def is_loading(self):
        return isinstance(self.state, Loading)

    @property
    def result(self):
        return self.state.result if isinstance(self.state, Populated) else None

    @property
    def error(self):
        if self.validation_error:
            return self.validation_error
        if isinstance(self.state, Failed):
            return self.state.message
        return None

    def select_mode(self, mode):
        with self._lock:
            self.mode = InputMode(mode)

    def set_auto_scroll(self, enabled):
        with self._lock:
            self.auto_scroll = bool(enabled)

    def toggle_auto_scroll(self):
        with self._lock:
            self.auto_scroll = not self.auto_scroll

    def upload_image(self, filename, data, mime_type=None):
        if len(data) >= self.max_image_bytes:
            self._reject(size_limit_message(self.max_image_bytes))
        try:
            detected = sniff_image(data)
        except ValidationError as e:
            self._reject(str(e))

        if not (mime_type or "").startswith("image/"):
            mime_type = detected
        payload = ImagePayload(data=data, mime_type=mime_type)
        b64 = base64.b64encode(data).decode("utf-8")
        with self._lock:
            self.image = payload
            self.image_filename = filename
            self.image_preview = f"data:{payload.mime_type};base64,{b64}"
        return self._run(payload, IMAGE_FAILED_MESSAGE)

    def regenerate(self):
        with self._lock:
            payload = self.image
        if payload is None:
            self._reject(NO_IMAGE_MESSAGE)
        return self._run(payload, IMAGE_FAILED_MESSAGE)

    def clear_image(self):
        with self._lock:
            self.image = None
            self.image_filename = None
            self.image_preview = None

    def submit_html(self, html):
        with self._lock:
            self.html_input = html or ""
        if not self.html_input.strip():
            self._reject(EMPTY_HTML_MESSAGE)
        return self._run(HtmlPayload(html=self.html_input), HTML_FAILED_MESSAGE)

    def _reject(self, message):
        with self._lock:
            self.validation_error = message
        raise ValidationError(message)

    def _begin(self):
        with self._lock:
            self._next_request_id += 1
            self.validation_error = None
            self.state = Loading(self._next_request_id)
            return self._next_request_id, self.auto_scroll

    def _finish(self, request_id, new_state):
        with self._lock:
            if self.state != Loading(request_id):
                logger.info("Discarding stale response for request %s", request_id)
                return False
            self.state = new_state
            return True

    def _run(self, payload, failure_message):
        request_id, auto_scroll = self._begin()
        try:
            result = self.generator.generate(payload, auto_scroll)
        except Exception as e:
            logger.exception("Error generating script from %s", payload.kind)
            self._finish(request_id, Failed(failure_message))
            if isinstance(e, GenerationError):
                raise
            raise GenerationError(f"Unexpected generator failure: {e}") from e
        self._finish(request_id, Populated(result))
        return result

    def snapshot(self):
        with self._lock:
            return {
                "mode": self.mode.value,
                "auto_scroll": self.auto_scroll,
                "loading": self.is_loading,
                "error": self.error,
                "has_image": self.image is not None,
                "image_filename": self.image_filename,
                "image_preview": self.image_preview,
                "html_input": self.html_input,
                "result": present(self.state),
            }


class PageView:
    def __init__(self, view_id, controller, playground):
        self.view_id = view_id
        self.controller = controller
        self.playground = playground


class SessionStore:
    """In-memory page views, keyed by the id handed out with the page."""

    def __init__(self, generator, hooks, max_sessions=256, max_image_bytes=MAX_IMAGE_BYTES):
        self.generator = generator
        self.hooks = hooks
        self.max_sessions = max_sessions
        self.max_image_bytes = max_image_bytes
        self._views = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._views)

    def open(self):
        view_id = uuid.uuid4().hex
        view = PageView(
            view_id,
            InputController(self.generator, max_image_bytes=self.max_image_bytes),
            DemoPlayground(),
        )
        with self._lock:
            self._views[view_id] = view
            while len(self._views) > self.max_sessions:
                evicted, _ = self._views.popitem(last=False)
                self.hooks.deregister(evicted)
                logger.info("Evicted page view %s", evicted)
        return view

    def get(self, view_id):
        with self._lock:
            view = self._views[view_id]
            self._views.move_to_end(view_id)
            return view

    def close(self, view_id):
        with self._lock:
            self._views.pop(view_id, None)
        self.hooks.deregister(view_id)
