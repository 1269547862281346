"""
Resilient JSON Extractor.

Recovers a structured value from language-model text that is supposed to be
JSON but often is not quite: wrapped in code fences, surrounded by prose,
missing commas between keys, or listing bare unquoted strings.

Three paths, tried in order:
    direct  - strip noise, slice the object, repair, json.loads, validate
    parser  - LangChain PydanticOutputParser bound to the expected shape
    default - the shape's fixed fallback value

The extractor never raises to its caller.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import PydanticOutputParser
from pydantic import ValidationError

from .shapes import ExtractionShape

logger = logging.getLogger(__name__)

ShapeT = TypeVar("ShapeT", bound=ExtractionShape)

_FENCE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
_THINK_BLOCK = re.compile(r"<think>.*?</think>", re.DOTALL)
_MISSING_COMMA_AFTER_ARRAY = re.compile(r"\]\s*\n\s*\"")
_MISSING_COMMA_AFTER_OBJECT = re.compile(r"\}\s*\n\s*\"")
_BARE_ARRAY_ELEMENT = re.compile(r"(\[|,)\s*\n\s*([A-Z][^\"\[\]{},]*?)\s*(?=,|\])")


class ExtractionPath(str, Enum):
    """Which strategy produced the extracted value."""

    DIRECT = "direct"
    PARSER = "parser"
    DEFAULT = "default"


@dataclass
class Extraction(Generic[ShapeT]):
    """Extracted value plus the path that produced it."""

    value: ShapeT
    path: ExtractionPath

    @property
    def degraded(self) -> bool:
        return self.path is ExtractionPath.DEFAULT


def response_text(output: Any) -> str:
    """Plain text from a model response (string, message or anything else)."""
    if isinstance(output, str):
        return output
    content = getattr(output, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return str(output)


def strip_noise(text: str) -> str:
    """Remove reasoning blocks and code-fence markers."""
    cleaned = _THINK_BLOCK.sub("", text.strip())
    return _FENCE.sub("", cleaned).strip()


def slice_object(text: str) -> str:
    """Keep the text between the first '{' and the last '}'."""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start : end + 1]
    return text


def repair_json(text: str) -> str:
    """
    Repair the malformations models commonly produce.

    - a quoted key on the line after a closing ']' or '}' gets its comma
    - bare array elements on their own line get quoted
    """
    repaired = _MISSING_COMMA_AFTER_ARRAY.sub('],\n"', text)
    repaired = _MISSING_COMMA_AFTER_OBJECT.sub('},\n"', repaired)
    return _BARE_ARRAY_ELEMENT.sub(
        lambda m: f'{m.group(1)}\n"{m.group(2).strip()}"', repaired
    )


class ResilientJSONExtractor:
    """
    Extract a typed value from language-model output.

    Usage:
        extractor = ResilientJSONExtractor()
        insights = extractor.extract(response_text, InsightsResult)
    """

    def extract(self, raw_text: Any, shape: type[ShapeT]) -> ShapeT:
        """Return the best value recoverable from raw_text."""
        return self.extract_with_path(raw_text, shape).value

    def extract_with_path(self, raw_text: Any, shape: type[ShapeT]) -> Extraction[ShapeT]:
        """Like extract(), but also report which path succeeded."""
        text = response_text(raw_text)

        try:
            candidate = repair_json(slice_object(strip_noise(text)))
            data = json.loads(candidate)
            return Extraction(value=shape.model_validate(data), path=ExtractionPath.DIRECT)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"[Extractor] Direct parse into {shape.__name__} failed: {e}")

        parser = PydanticOutputParser(pydantic_object=shape)
        try:
            return Extraction(value=parser.parse(text), path=ExtractionPath.PARSER)
        except (OutputParserException, ValidationError) as e:
            logger.warning(f"[Extractor] Structured parser for {shape.__name__} failed: {e}")

        logger.warning(f"[Extractor] Using default {shape.__name__}")
        return Extraction(value=shape.fallback(), path=ExtractionPath.DEFAULT)  # type: ignore[arg-type]

    @staticmethod
    def format_instructions(shape: type[ExtractionShape]) -> str:
        """Schema instructions to embed in a prompt asking for this shape."""
        return PydanticOutputParser(pydantic_object=shape).get_format_instructions()
