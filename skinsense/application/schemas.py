from typing import List, Union

from pydantic import BaseModel


class AnalysisReport(BaseModel):
    condition_name: str
    confidence_score: Union[int, float]
    urgency_level: str  # open set, badge falls back to "Low" styling
    description: str = ""
    symptoms: List[str] = []
    possible_causes: List[str] = []
    treatment_options: List[str] = []
    when_to_see_doctor: str = ""
    disclaimer: str
