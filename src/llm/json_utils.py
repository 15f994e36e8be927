# src/llm/json_utils.py
# Recovering JSON objects from free-form model replies.

import json
import logging
import re
from typing import Any, Dict, Optional

from .errors import JSONExtractionError

logger = logging.getLogger(__name__)

_FENCE_PATTERN = re.compile(r"```[a-zA-Z]*[ \t]*\n?|\n?```")


def strip_code_fences(text: str) -> str:
    """Removes markdown code fences (```json ... ```) and surrounding whitespace."""
    return _FENCE_PATTERN.sub("", text).strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Returns the first balanced ``{...}`` substring of ``text``, or None.

    Braces inside JSON string literals (including escaped quotes) are
    ignored, so a '}' in a quoted value does not end the object early.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def parse_json_response(text: str) -> Dict[str, Any]:
    """
    Parses a model reply into a JSON object.

    Strips code fences, tries the whole text, then the first balanced
    object inside it.

    Raises:
        JSONExtractionError: nothing in ``text`` parses to a JSON object.
    """
    if not text or not text.strip():
        raise JSONExtractionError("Empty response text")

    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    candidate = extract_json_object(cleaned)
    if candidate is None:
        raise JSONExtractionError("No JSON object found in response")
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.debug(f"Balanced-brace candidate failed to parse: {e}")
        raise JSONExtractionError(f"Malformed JSON object in response: {e}") from e
    if not isinstance(parsed, dict):
        raise JSONExtractionError("Response JSON is not an object")
    return parsed
