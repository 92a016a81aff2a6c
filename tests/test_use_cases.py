import base64
import json

import pytest

from skinsense.application.assembly import AnalysisAssembler
from skinsense.application.report import build_report
from skinsense.application.use_cases import (
    ANALYSIS_PROMPT,
    AnalysisFailedError,
    SkinAnalysisUseCase,
)
from skinsense.domain.models import AgentCallResult, AnalysisResult
from skinsense.infrastructure.llm.json_parser import parse_llm_json


ANALYSIS = {
    "prediction": {"condition_name": "Eczema", "confidence_score": 91, "urgency_level": "Moderate"},
    "condition_details": {"symptoms": ["itch"]},
    "disclaimer": "Not medical advice.",
}


class DummyAgent:
    def __init__(self, upload=None, call=None):
        self.upload = upload or AgentCallResult(success=True, asset_ids=["asset-1"])
        self.call = call or AgentCallResult(
            success=True,
            response={"status": "success", "result": json.dumps(ANALYSIS)},
        )
        self.calls = []

    def upload_files(self, filename, content, content_type):
        return self.upload

    def call_agent(self, message, agent_id, assets):
        self.calls.append((message, agent_id, assets))
        return self.call


def _assemble(call_result, parser=parse_llm_json):
    return AnalysisAssembler(parser).assemble(call_result, image_data_url="data:image/png;base64,AA==")


class TestSkinAnalysisUseCase:
    def test_analyze_returns_result(self):
        agent = DummyAgent()
        usecase = SkinAnalysisUseCase(agent=agent, json_parser=parse_llm_json, agent_id="agent-1")
        result = usecase.analyze("rash.png", b"\x89PNG", "image/png")

        assert isinstance(result, AnalysisResult)
        assert result.condition_name == "Eczema"
        assert result.confidence_score == 91
        assert result.urgency_level == "Moderate"
        assert result.image_data_url == "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode()
        assert agent.calls == [(ANALYSIS_PROMPT, "agent-1", ["asset-1"])]

    def test_upload_failure_raises(self):
        agent = DummyAgent(upload=AgentCallResult(success=False, error="quota exceeded"))
        usecase = SkinAnalysisUseCase(agent=agent, json_parser=parse_llm_json, agent_id="agent-1")
        with pytest.raises(AnalysisFailedError, match="quota exceeded"):
            usecase.analyze("rash.png", b"data", "image/png")
        assert agent.calls == []

    def test_agent_failure_without_message_uses_default(self):
        agent = DummyAgent(call=AgentCallResult(success=False))
        usecase = SkinAnalysisUseCase(agent=agent, json_parser=parse_llm_json, agent_id="agent-1")
        with pytest.raises(AnalysisFailedError, match="Analysis failed"):
            usecase.analyze("rash.jpg", b"data", "image/jpeg")


class TestAnalysisAssembler:
    def test_primary_payload_wins(self):
        call = AgentCallResult(
            success=True,
            response={"result": json.dumps(ANALYSIS), "data": {"prediction": {"condition_name": "Other"}}},
            raw_response=json.dumps({"prediction": {"condition_name": "Raw"}}),
        )
        result = _assemble(call)
        assert result.condition_name == "Eczema"
        assert result.full_result["condition_details"] == {"symptoms": ["itch"]}
        assert result.full_result["disclaimer"] == "Not medical advice."

    def test_raw_response_object_second(self):
        call = AgentCallResult(
            success=True,
            response={"result": "no json here", "data": {"prediction": {"condition_name": "Acne"}}},
            raw_response=json.dumps({"prediction": {"condition_name": "Raw"}}),
        )
        assert _assemble(call).condition_name == "Acne"

    def test_raw_response_text_third(self):
        call = AgentCallResult(
            success=True,
            response={"result": "no json here"},
            raw_response="Here you go: " + json.dumps({"prediction": {"condition_name": "Raw"}}),
        )
        assert _assemble(call).condition_name == "Raw"

    def test_string_response_searched_without_repair(self):
        seen = []

        def parser(value):
            seen.append(value)
            return None

        call = AgentCallResult(
            success=True,
            response=json.dumps({"message": {"prediction": {"condition_name": "Melasma"}}}),
        )
        assert _assemble(call, parser).condition_name == "Melasma"
        # response is not an object, so the primary parse gets None
        assert seen == [None]

    def test_primary_prediction_is_not_copied(self):
        prediction = {"condition_name": "Tinea"}
        call = AgentCallResult(success=True, response={"result": {"prediction": prediction}})
        result = _assemble(call)
        assert result.full_result["prediction"] is prediction

    def test_defaults_when_nothing_found(self):
        call = AgentCallResult(success=True, response={"result": json.dumps({"status": "done"})})
        result = _assemble(call)
        assert result.condition_name == "Unknown Condition"
        assert result.confidence_score == 0
        assert result.urgency_level == "Low"
        assert result.full_result == {"status": "done"}

    def test_full_result_empty_when_primary_unusable(self):
        call = AgentCallResult(success=True, response=42)
        result = _assemble(call)
        assert result.condition_name == "Unknown Condition"
        assert result.full_result == {}

    def test_deeply_nested_text_falls_back_to_defaults(self):
        deep = "[" * 200000 + "]" * 200000
        call = AgentCallResult(success=True, response={"result": deep}, raw_response=deep)
        result = _assemble(call)
        assert result.condition_name == "Unknown Condition"
        assert result.confidence_score == 0
        assert result.full_result == {}

    def test_seven_wrapper_levels_fall_back_to_defaults(self):
        payload = {"prediction": {"condition_name": "X"}}
        for _ in range(7):
            payload = {"output": payload}
        call = AgentCallResult(success=True, response={"result": json.dumps(payload)})
        result = _assemble(call)
        assert result.condition_name == "Unknown Condition"
        assert result.confidence_score == 0
        assert result.urgency_level == "Low"

    def test_partial_prediction_defaults(self):
        call = AgentCallResult(success=True, response={"result": {"prediction": {"condition_name": "Vitiligo"}}})
        result = _assemble(call)
        assert result.condition_name == "Vitiligo"
        assert result.confidence_score == 0
        assert result.urgency_level == "Low"

    @pytest.mark.parametrize("score,expected", [(0, 0), (55.5, 55.5), ("80", 0), (True, 0), (None, 0)])
    def test_confidence_score_kept_only_when_numeric(self, score, expected):
        prediction = {"condition_name": "Acne", "confidence_score": score}
        call = AgentCallResult(success=True, response={"result": {"prediction": prediction}})
        assert _assemble(call).confidence_score == expected

    def test_unrecognized_urgency_is_kept(self):
        prediction = {"condition_name": "Acne", "urgency_level": "Critical"}
        call = AgentCallResult(success=True, response={"result": {"prediction": prediction}})
        assert _assemble(call).urgency_level == "Critical"

    def test_result_metadata(self):
        result = _assemble(AgentCallResult(success=True, response={"result": ANALYSIS}))
        assert result.id.isdigit()
        assert result.timestamp
        assert result.image_data_url == "data:image/png;base64,AA=="


class TestReplayMatchesFreshAnalysis:
    @pytest.mark.parametrize("response", [
        {"result": json.dumps(ANALYSIS)},
        {"result": "garbage", "content": json.dumps({"data": ANALYSIS})},
        {"result": json.dumps({"prediction": {"confidence_score": 50}})},
        {"result": {"prediction": {"condition_name": "Hives", "confidence_score": "high"}}},
        42,
    ])
    def test_round_trip_through_history_record(self, response):
        fresh = _assemble(AgentCallResult(success=True, response=response))
        stored = AnalysisResult.model_validate(json.loads(json.dumps(fresh.to_record())))
        report = build_report(stored)

        assert report.condition_name == fresh.condition_name
        assert report.confidence_score == fresh.confidence_score
        assert report.urgency_level == fresh.urgency_level
