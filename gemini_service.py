import base64
import binascii
import json
import logging
import time

from google import genai
from google.genai import types

from config import DEFAULT_MODEL, HTML_CHAR_LIMIT
from models import GenerationError, HtmlPayload, ImagePayload, ScriptResponse
from script_prompt import HTML_CONTENT_PREFIX, build_prompt

logger = logging.getLogger(__name__)

SCRIPT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "script": types.Schema(
            type=types.Type.STRING,
            description="The JavaScript code to run in the console.",
        ),
        "explanation": types.Schema(
            type=types.Type.STRING,
            description="A brief explanation of how the script targets the elements and handles rate limiting.",
        ),
        "confidence": types.Schema(
            type=types.Type.STRING,
            description="High, Medium, or Low confidence.",
        ),
        "targetSelectors": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(type=types.Type.STRING),
            description="List of CSS selectors used.",
        ),
    },
    required=["script", "explanation", "confidence", "targetSelectors"],
)


def make_client(api_key, timeout_ms=None):
    kwargs = {"api_key": api_key}
    if timeout_ms:
        kwargs["http_options"] = types.HttpOptions(timeout=timeout_ms)
    return genai.Client(**kwargs)


class ScriptGenerator:
    """Turns a screenshot or HTML snippet into a coupon-clipping script via Gemini."""

    def __init__(self, client, model=DEFAULT_MODEL, html_char_limit=HTML_CHAR_LIMIT):
        self.client = client
        self.model = model
        self.html_char_limit = html_char_limit

    def build_contents(self, payload, auto_scroll):
        if isinstance(payload, ImagePayload):
            return [
                types.Part.from_bytes(data=payload.data, mime_type=payload.mime_type),
                build_prompt("image", auto_scroll),
            ]
        if isinstance(payload, HtmlPayload):
            return [
                build_prompt("html", auto_scroll),
                HTML_CONTENT_PREFIX + payload.html[:self.html_char_limit],
            ]
        raise TypeError(f"Unsupported payload: {type(payload).__name__}")

    def build_config(self):
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=SCRIPT_RESPONSE_SCHEMA,
        )

    def generate(self, payload, auto_scroll=False):
        contents = self.build_contents(payload, auto_scroll)

        try:
            start = time.time()
            response = self.client.models.generate_content(
                model=self.model, contents=contents, config=self.build_config(),
            )
            elapsed = round(time.time() - start, 1)
            text = response.text
        except Exception as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

        logger.info("Generated %s script with %s in %ss (auto_scroll=%s)",
                    payload.kind, self.model, elapsed, auto_scroll)

        if not text:
            raise GenerationError("No response text received from Gemini.")
        try:
            return ScriptResponse.from_dict(json.loads(text))
        except ValueError as e:
            raise GenerationError(f"Malformed response from Gemini: {e}") from e

    def generate_from_image(self, image_base64, mime_type, auto_scroll=False):
        try:
            data = base64.b64decode(image_base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise GenerationError("Image data is not valid base64.") from e
        return self.generate(ImagePayload(data=data, mime_type=mime_type), auto_scroll)

    def generate_from_html(self, html, auto_scroll=False):
        return self.generate(HtmlPayload(html=html), auto_scroll)
