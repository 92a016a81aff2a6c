import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from skinsense.application.extraction import extract_analysis
from skinsense.application.ports import JsonParserPort
from skinsense.domain.models import AgentCallResult, AnalysisResult, ExtractedAnalysis
from skinsense.domain.rules import (
    resolve_condition_name,
    resolve_confidence_score,
    resolve_urgency_level,
)


logger = logging.getLogger(__name__)


class AnalysisAssembler:
    """Turns an agent call envelope into an AnalysisResult.

    Candidate roots are searched in a fixed order and the first match wins:
    the repaired ``response.result`` text, the raw ``response`` object, the
    repaired ``raw_response`` text, then the whole envelope. When nothing
    matches, the result is still built from defaults.
    """

    def __init__(self, json_parser: JsonParserPort):
        self.json_parser = json_parser

    def parse_primary_payload(self, call_result: AgentCallResult) -> Any:
        response = call_result.response
        text = response.get("result") if isinstance(response, dict) else None
        return self.json_parser(text)

    def find_analysis(self, call_result: AgentCallResult, primary: Any) -> Optional[ExtractedAnalysis]:
        analysis = extract_analysis(primary)
        if analysis is None:
            analysis = extract_analysis(call_result.response)
        if analysis is None and call_result.raw_response:
            analysis = extract_analysis(self.json_parser(call_result.raw_response))
        if analysis is None:
            analysis = extract_analysis(dict(call_result))
        return analysis

    def assemble(self, call_result: AgentCallResult, image_data_url: str = "") -> AnalysisResult:
        primary = self.parse_primary_payload(call_result)
        analysis = self.find_analysis(call_result, primary)

        if analysis is None:
            logger.warning("No analysis record found in agent response; using defaults")
            prediction = {}
            full_result = primary if primary is not None else {}
        else:
            prediction = analysis["prediction"]
            full_result = analysis

        return AnalysisResult(
            id=str(int(time.time() * 1000)),
            timestamp=datetime.now(timezone.utc).isoformat(),
            condition_name=resolve_condition_name(prediction),
            confidence_score=resolve_confidence_score(prediction),
            urgency_level=resolve_urgency_level(prediction),
            image_data_url=image_data_url,
            full_result=full_result,
        )
