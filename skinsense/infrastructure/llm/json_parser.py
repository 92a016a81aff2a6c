"""Best-effort parsing of JSON text produced by language models."""
import json
import logging
import re
from typing import Any, Optional


logger = logging.getLogger(__name__)


_FENCE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_PY_LITERALS = (
    (re.compile(r"\bTrue\b"), "true"),
    (re.compile(r"\bFalse\b"), "false"),
    (re.compile(r"\bNone\b"), "null"),
    (re.compile(r"\bNaN\b"), "null"),
)


def _try_loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _outermost(text: str) -> Optional[str]:
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start:end + 1]


def _repair(text: str) -> str:
    text = _TRAILING_COMMA.sub(r"\1", text)
    for pattern, replacement in _PY_LITERALS:
        text = pattern.sub(replacement, text)
    return text


def parse_llm_json(value: Any) -> Any:
    """
    Parse possibly malformed JSON text.

    Non-string values are returned unchanged. Strings are tried as-is, then
    without Markdown code fences, then cut down to the outermost object or
    array, then with common model mistakes repaired (trailing commas, Python
    literals, NaN). Returns None when nothing parses.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    text = value.strip()
    if not text:
        return None

    fenced = _FENCE.search(text)
    candidates = [text]
    if fenced:
        candidates.append(fenced.group(1).strip())
    sliced = _outermost(candidates[-1])
    if sliced:
        candidates.append(sliced)

    for candidate in candidates:
        parsed = _try_loads(candidate)
        if parsed is not None:
            return parsed

    for candidate in candidates:
        parsed = _try_loads(_repair(candidate))
        if parsed is not None:
            return parsed

    logger.debug("Could not parse model output as JSON: %s", text[:200])
    return None
