"""Best-effort repair of JSON emitted by a model.

Models wrap JSON in markdown fences and put literal newlines inside
string values. Both make ``json.loads`` fail on otherwise usable output.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from tada_llm.errors import MalformedResponseError

_logger = logging.getLogger(__name__)

_OUTER_FENCES = re.compile(r"^```json\s*|```\s*$")


def strip_code_fences(text: str) -> str:
    cleaned = _OUTER_FENCES.sub("", text).strip()
    return cleaned.replace("```json", "").replace("```", "").strip()


def sanitize_json_text(text: str) -> str:
    """Trim to the outermost object and escape newlines inside strings.

    Carriage returns inside strings are dropped. Text outside string
    literals passes through unchanged.
    """
    cleaned = strip_code_fences(text)

    first = cleaned.find("{")
    last = cleaned.rfind("}")
    if first != -1 and last > first:
        cleaned = cleaned[first:last + 1]

    out: list[str] = []
    in_string = False
    escaped = False
    for char in cleaned:
        if char == '"' and not escaped:
            in_string = not in_string

        if in_string and char == "\n":
            out.append("\\n")
        elif in_string and char == "\r":
            pass
        else:
            out.append(char)

        escaped = char == "\\" and not escaped

    return "".join(out)


def parse_model_json(text: str) -> Any:
    """Parse model output as JSON, repairing it first.

    Raises MalformedResponseError carrying both the raw and sanitized
    text when neither the sanitized form nor the crude fallback parses.
    """
    sanitized = sanitize_json_text(text)
    try:
        return json.loads(sanitized)
    except json.JSONDecodeError as err:
        _logger.error("JSON parse error. Raw: %r Sanitized: %r", text, sanitized)
        first_error = err

    crude = _OUTER_FENCES.sub("", text).replace("\n", "\\n")
    try:
        return json.loads(crude)
    except json.JSONDecodeError:
        pass

    raise MalformedResponseError(
        f"Model returned invalid JSON: {first_error}",
        raw=text,
        sanitized=sanitized,
        cause=first_error,
    )
