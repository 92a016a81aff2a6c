from typing import Any, Dict, Tuple


DEFAULT_CONDITION_NAME = "Unknown Condition"
DEFAULT_CONFIDENCE_SCORE = 0
DEFAULT_URGENCY_LEVEL = "Low"
DEFAULT_DISCLAIMER = "This is for informational purposes only. Consult a healthcare professional."

# Observed urgency values. The set is open: anything else is kept verbatim
# and only styled like "Low".
URGENCY_BADGES: Dict[str, Tuple[str, str]] = {
    "Low": ("🟢", "green"),
    "Moderate": ("🟡", "orange"),
    "High": ("🟠", "red"),
    "Urgent": ("🔴", "red"),
}


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a score
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def resolve_condition_name(prediction: Dict[str, Any]) -> str:
    name = prediction.get("condition_name")
    if name is None:
        return DEFAULT_CONDITION_NAME
    return str(name)


def resolve_confidence_score(prediction: Dict[str, Any]):
    score = prediction.get("confidence_score")
    return score if is_number(score) else DEFAULT_CONFIDENCE_SCORE


def resolve_urgency_level(prediction: Dict[str, Any]) -> str:
    level = prediction.get("urgency_level")
    if level is None:
        return DEFAULT_URGENCY_LEVEL
    return str(level)


def urgency_badge(level: str) -> Tuple[str, str]:
    """Return (icon, colour) for an urgency level, styled as Low when unknown."""
    return URGENCY_BADGES.get(level, URGENCY_BADGES[DEFAULT_URGENCY_LEVEL])


def confidence_band(score: float) -> str:
    if score > 70:
        return "green"
    if score > 40:
        return "orange"
    return "red"
