import json
from typing import List

from skinsense.application.ports import AgentPort
from skinsense.domain.models import AgentCallResult, AnalysisResult


SAMPLE_ANALYSIS = {
    "prediction": {
        "condition_name": "Contact Dermatitis",
        "confidence_score": 82,
        "urgency_level": "Moderate",
    },
    "condition_details": {
        "description": (
            "Contact dermatitis is a type of inflammation of the skin that occurs when substances "
            "touching the skin cause irritation or an allergic reaction. The resulting red, itchy rash "
            "is not contagious or life-threatening, but it can be very uncomfortable."
        ),
        "symptoms": [
            "Red, itchy rash on affected area",
            "Dry, cracked, or scaly skin",
            "Bumps and blisters that may ooze or crust",
            "Swelling, burning, or tenderness",
            "Skin may appear darkened or leathery",
        ],
        "possible_causes": [
            "Direct contact with irritants (soaps, detergents, chemicals)",
            "Allergic reaction to metals (nickel), latex, or cosmetics",
            "Exposure to certain plants (poison ivy, poison oak)",
            "Prolonged exposure to water or wet conditions",
            "Friction from clothing or accessories",
        ],
        "treatment_options": [
            "Identify and avoid the triggering substance",
            "Apply over-the-counter hydrocortisone cream",
            "Use moisturizers to restore the skin barrier",
            "Take oral antihistamines for itching relief",
            "Apply cool, wet compresses to soothe affected areas",
            "Prescription corticosteroid creams for severe cases",
        ],
        "when_to_see_doctor": (
            "Seek medical attention if the rash is severe, widespread, or does not improve within "
            "2-3 weeks. See a doctor immediately if you develop signs of infection such as increasing "
            "pain, swelling, warmth, pus, or fever."
        ),
    },
    "disclaimer": (
        "This AI analysis is for informational purposes only and should not be used as a substitute "
        "for professional medical advice, diagnosis, or treatment. Always seek the advice of a "
        "qualified healthcare provider."
    ),
}


def sample_analysis_result() -> AnalysisResult:
    prediction = SAMPLE_ANALYSIS["prediction"]
    return AnalysisResult(
        id="sample-1",
        timestamp="2025-01-15T10:30:00Z",
        condition_name=prediction["condition_name"],
        confidence_score=prediction["confidence_score"],
        urgency_level=prediction["urgency_level"],
        image_data_url="",
        full_result=SAMPLE_ANALYSIS,
    )


class MockAgentAdapter(AgentPort):
    """Offline agent answering every image with the sample analysis.

    The answer is wrapped the way the live platform wraps it, a JSON string
    under ``response.result``.
    """

    def upload_files(self, filename: str, content: bytes, content_type: str) -> AgentCallResult:
        return AgentCallResult(success=True, asset_ids=[f"mock-{len(content)}"])

    def call_agent(self, message: str, agent_id: str, assets: List[str]) -> AgentCallResult:
        text = json.dumps(SAMPLE_ANALYSIS)
        return AgentCallResult(
            success=True,
            response={"status": "success", "result": text},
            raw_response=json.dumps({"response": text}),
        )
