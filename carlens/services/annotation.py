"""
Car metadata from a generative vision model.

The model is asked for a JSON object describing the car in the image. Its
reply is free text, so it is parsed into one of two results:

* ``Structured``: the reply (after removing a Markdown code fence) is valid JSON.
* ``Unstructured``: anything else; the raw reply is kept as a description.

Only a failing model call is an error. A reply that does not parse never
is, so an upload always ends up with some payload.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

import google.generativeai as genai

from carlens.core.config import Settings
from carlens.core.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

CAR_INFO_FIELDS = [
    "make",
    "model",
    "year",
    "body_type",
    "horsepower",
    "top_speed_kph",
    "fuel_efficiency_kmpl",
    "price_usd",
]

ANNOTATION_PROMPT = (
    "You will be given an image of a car. Identify the vehicle and estimate its specifications. "
    "Respond ONLY with a JSON object with these keys: "
    + ", ".join(CAR_INFO_FIELDS)
    + ". Use a string for make, model and body_type, numbers for the other keys, "
    "and null when a value cannot be determined. "
    "Do not add any explanation or text outside the JSON object. "
    "Here is the image to analyze:"
)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


@dataclass(frozen=True)
class Structured:
    """Model reply that parsed as JSON."""
    payload: Any

    def to_json(self) -> str:
        return json.dumps(self.payload)


@dataclass(frozen=True)
class Unstructured:
    """Model reply that did not parse; kept verbatim."""
    text: str

    def to_json(self) -> str:
        return json.dumps({"description": self.text})


Annotation = Union[Structured, Unstructured]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def strip_code_fence(text: str) -> str:
    """Remove the first Markdown code fence around the reply, if any."""
    return _FENCE_RE.sub(r"\1", text, count=1).strip()


def parse_annotation(text: str) -> Annotation:
    """Turn a model reply into a Structured or Unstructured annotation."""
    cleaned = strip_code_fence(text or "")
    try:
        payload = json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as e:
        logger.warning(f"Failed to parse model response as JSON ({e}): {cleaned[:200]!r}")
        return Unstructured(text=text or "")
    return Structured(payload=payload)


class AnnotationClient:
    """
    Sends images to a generative model and parses the reply.

    Args:
        model: object exposing ``generate_content(contents)`` and returning a
            response with a ``text`` attribute, e.g. ``google.generativeai.GenerativeModel``
        prompt: instruction sent ahead of the image
    """

    def __init__(self, model: Any, prompt: str = ANNOTATION_PROMPT):
        self.model = model
        self.prompt = prompt

    def annotate(self, image_bytes: bytes, mime_type: str = None) -> Annotation:
        if not mime_type or not mime_type.startswith("image/"):
            mime_type = DEFAULT_MIME_TYPE

        try:
            response = self.model.generate_content([
                self.prompt,
                {"mime_type": mime_type, "data": image_bytes},
            ])
            # Blocked or empty candidates raise here too
            text = response.text
        except Exception as e:
            logger.error(f"Image analysis failed: {e}")
            raise UpstreamError("Image analysis failed") from e

        return parse_annotation(text)


class GeminiModel:
    """Gemini model created on first use, so the app starts without the SDK configured."""

    def __init__(self, api_key: str, model_name: str):
        self.api_key = api_key
        self.model_name = model_name
        self._model = None

    def generate_content(self, contents):
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
            logger.info(f"Initialized Gemini model {self.model_name}")
        return self._model.generate_content(contents)


def build_annotator(settings: Settings) -> AnnotationClient:
    """Create an AnnotationClient backed by Gemini."""
    return AnnotationClient(GeminiModel(settings.GEMINI_API_KEY, settings.GEMINI_MODEL))
