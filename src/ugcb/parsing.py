"""Recover JSON objects from free-text model replies."""

import json
import logging
import re
from typing import Any, Optional

from .errors import ParseError

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Assistant updated the brief (summary missing)."

_FENCED_JSON_RE = re.compile(r"```json[ \t]*\n?(.*?)\n?```", re.DOTALL | re.IGNORECASE)


def _first_object(text: str) -> Optional[str]:
    """Return the first balanced top-level ``{...}`` span in ``text``."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            char = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from here; try the next opening brace
        start = text.find("{", start + 1)
    return None


def find_json_block(text: str) -> Optional[str]:
    """Locate the JSON payload in a model reply.

    A fenced block tagged ``json`` wins over a bare object; otherwise the
    first balanced top-level object is used.

    Returns:
        The candidate JSON string, or None if the reply has neither form.
    """
    if not text:
        return None

    match = _FENCED_JSON_RE.search(text)
    if match:
        return match.group(1).strip()

    return _first_object(text)


def parse_json_object(text: str) -> Optional[dict[str, Any]]:
    """Parse the JSON object embedded in a model reply.

    Returns:
        The parsed object, or None if the reply contains no JSON candidate.

    Raises:
        ParseError: If a candidate was found but is not a valid JSON object.
            The raw reply is kept on the exception.
    """
    candidate = find_json_block(text)
    if candidate is None:
        return None

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON: {e}")
        logger.debug(f"Raw response: {text}")
        raise ParseError(f"Invalid JSON in model response: {e}", raw_text=text) from e

    if not isinstance(data, dict):
        raise ParseError("Model response JSON is not an object", raw_text=text)
    return data


def summary_or_fallback(data: dict[str, Any]) -> str:
    """Return ``summaryOfChanges`` or the fallback text when it is missing."""
    summary = data.get("summaryOfChanges")
    if isinstance(summary, str) and summary.strip():
        return summary
    logger.warning("Parsed JSON missing 'summaryOfChanges' string")
    return SUMMARY_FALLBACK
