from typing import Any, Dict, List, Optional, TypedDict, Union

from pydantic import BaseModel, ConfigDict, Field


class Prediction(TypedDict, total=False):
    condition_name: str
    confidence_score: float  # 0-100, not validated upstream
    urgency_level: str  # Low/Moderate/High/Urgent observed, open set


class ConditionDetails(TypedDict, total=False):
    description: str
    symptoms: List[str]
    possible_causes: List[str]
    treatment_options: List[str]
    when_to_see_doctor: str


class ExtractedAnalysis(TypedDict):
    """Record found inside an agent payload.

    Values are the raw objects from the payload, not validated copies, so
    ``prediction`` is the same dict the agent returned.
    """

    prediction: Prediction
    condition_details: ConditionDetails
    disclaimer: str


class AgentCallResult(BaseModel):
    success: bool
    error: Optional[str] = None
    response: Any = None
    raw_response: Optional[str] = None
    asset_ids: List[str] = []


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    timestamp: str
    condition_name: str = Field(..., alias="conditionName")
    confidence_score: Union[int, float] = Field(0, alias="confidenceScore")
    urgency_level: str = Field("Low", alias="urgencyLevel")
    image_data_url: str = Field("", alias="imageDataUrl")
    full_result: Any = Field(default_factory=dict, alias="fullResult")

    def to_record(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys used in history files."""
        return self.model_dump(by_alias=True)
