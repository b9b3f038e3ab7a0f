from dataclasses import dataclass, field, replace
from enum import Enum


class AutoClipError(Exception):
    pass


class ValidationError(AutoClipError):
    """Rejected input; raised before any call to Gemini."""


class GenerationError(AutoClipError):
    """Gemini call failed or returned something we could not parse."""


class HookNotRegistered(AutoClipError):
    pass


class InputMode(str, Enum):
    SCREENSHOT = "SCREENSHOT"
    HTML = "HTML"


@dataclass(frozen=True)
class ScriptResponse:
    script: str
    explanation: str
    confidence: str
    target_selectors: tuple = ()

    @classmethod
    def from_dict(cls, data):
        """Build from the Gemini JSON shape, rejecting anything off-contract."""
        if not isinstance(data, dict):
            raise ValueError("response is not a JSON object")
        for key in ("script", "explanation", "confidence"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"missing or non-string field: {key}")
        selectors = data.get("targetSelectors")
        if not isinstance(selectors, list) or not all(isinstance(s, str) for s in selectors):
            raise ValueError("targetSelectors must be a list of strings")
        return cls(
            script=data["script"],
            explanation=data["explanation"],
            confidence=data["confidence"],
            target_selectors=tuple(selectors),
        )

    def to_dict(self):
        return {
            "script": self.script,
            "explanation": self.explanation,
            "confidence": self.confidence,
            "targetSelectors": list(self.target_selectors),
        }


@dataclass(frozen=True)
class ImagePayload:
    data: bytes = field(repr=False)
    mime_type: str

    kind = "image"


@dataclass(frozen=True)
class HtmlPayload:
    html: str = field(repr=False)

    kind = "html"


# Generation state. Exactly one of these is current per page view.

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    request_id: int


@dataclass(frozen=True)
class Populated:
    result: ScriptResponse


@dataclass(frozen=True)
class Failed:
    message: str


@dataclass(frozen=True)
class Coupon:
    id: int
    product: str
    discount: str
    image: str
    is_clipped: bool = False

    def clipped(self, value=True):
        return replace(self, is_clipped=value)

    def to_dict(self):
        return {
            "id": self.id,
            "product": self.product,
            "discount": self.discount,
            "isClipped": self.is_clipped,
            "image": self.image,
        }
