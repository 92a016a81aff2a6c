from typing import Any, Dict, List

from skinsense.application.extraction import extract_analysis
from skinsense.application.schemas import AnalysisReport
from skinsense.domain.models import AnalysisResult
from skinsense.domain.rules import DEFAULT_DISCLAIMER, is_number


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _items(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]


def build_report(result: AnalysisResult) -> AnalysisReport:
    """
    Build the render model for a fresh or stored AnalysisResult.

    Runs the same deep search as the analysis path over the stored
    ``full_result`` (then over the whole record), so an entry replayed from
    history renders exactly like it did when first analysed.
    """
    analysis = extract_analysis(result.full_result) or extract_analysis(result.to_record())
    full_result = _as_dict(result.full_result)

    if analysis is not None:
        prediction = analysis["prediction"]
        details = _as_dict(analysis["condition_details"])
        disclaimer = analysis["disclaimer"]
    else:
        prediction = {}
        details = _as_dict(full_result.get("condition_details"))
        disclaimer = ""

    condition_name = prediction.get("condition_name")
    confidence_score = prediction.get("confidence_score")
    urgency_level = prediction.get("urgency_level")

    return AnalysisReport(
        condition_name=_text(condition_name) if condition_name is not None else result.condition_name,
        confidence_score=confidence_score if is_number(confidence_score) else result.confidence_score,
        urgency_level=_text(urgency_level) if urgency_level is not None else result.urgency_level,
        description=_text(details.get("description")),
        symptoms=_items(details.get("symptoms")),
        possible_causes=_items(details.get("possible_causes")),
        treatment_options=_items(details.get("treatment_options")),
        when_to_see_doctor=_text(details.get("when_to_see_doctor")),
        disclaimer=disclaimer or _text(full_result.get("disclaimer")) or DEFAULT_DISCLAIMER,
    )
