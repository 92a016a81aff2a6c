"""Deep search for the analysis record inside an agent payload.

The agent's answer can be wrapped in several layers by the agent platform and
by the JSON repair step, sometimes with whole layers serialized to strings.
The search below unwraps those layers until it finds an object carrying a
``prediction`` with a ``condition_name``.
"""
import json
import logging
from typing import Any, Optional

from skinsense.domain.models import ExtractedAnalysis


logger = logging.getLogger(__name__)


MAX_EXTRACTION_DEPTH = 6

# Checked in this order; the first key that leads to a match wins.
WRAPPER_KEYS = ("result", "response", "data", "output", "content", "text", "message")


def is_analysis_record(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    prediction = value.get("prediction")
    return isinstance(prediction, dict) and bool(prediction.get("condition_name"))


def _as_analysis(value: dict) -> ExtractedAnalysis:
    disclaimer = value.get("disclaimer")
    return {
        "prediction": value["prediction"],
        "condition_details": value.get("condition_details") or {},
        "disclaimer": disclaimer if isinstance(disclaimer, str) else "",
    }


def extract_analysis(value: Any, depth: int = 0) -> Optional[ExtractedAnalysis]:
    """Find the analysis record in ``value``, or return None.

    A match at the current level beats anything reachable through wrapper
    keys. Lists are not walked.
    """
    if depth > MAX_EXTRACTION_DEPTH or not value:
        return None

    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except (ValueError, RecursionError):
            return None
        return extract_analysis(parsed, depth + 1)

    if not isinstance(value, dict):
        return None

    if is_analysis_record(value):
        return _as_analysis(value)

    for key in WRAPPER_KEYS:
        nested = value.get(key)
        if not nested:
            continue
        if isinstance(nested, str):
            try:
                nested = json.loads(nested)
            except (ValueError, RecursionError):
                logger.debug("Skipping non-JSON string under %r at depth %s", key, depth)
                continue
        found = extract_analysis(nested, depth + 1)
        if found is not None:
            return found

    return None
