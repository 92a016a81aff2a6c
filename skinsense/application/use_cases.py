import base64
import logging

from skinsense.application.assembly import AnalysisAssembler
from skinsense.application.ports import AgentPort, JsonParserPort
from skinsense.domain.models import AnalysisResult


logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = (
    "Analyze this skin condition image and provide a detailed prediction with condition name, "
    "confidence score, urgency level, description, symptoms, possible causes, treatment options, "
    "and when to see a doctor."
)


class AnalysisFailedError(RuntimeError):
    pass


def encode_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class SkinAnalysisUseCase:
    def __init__(self, agent: AgentPort, json_parser: JsonParserPort, agent_id: str):
        self.agent = agent
        self.agent_id = agent_id
        self.assembler = AnalysisAssembler(json_parser)

    def analyze(self, filename: str, content: bytes, content_type: str) -> AnalysisResult:
        upload = self.agent.upload_files(filename, content, content_type)
        if not upload.success:
            logger.warning("Image upload failed: %s", upload.error)
            raise AnalysisFailedError(upload.error or "Failed to upload image. Please try again.")

        call_result = self.agent.call_agent(ANALYSIS_PROMPT, self.agent_id, list(upload.asset_ids))
        if not call_result.success:
            logger.warning("Agent call failed: %s", call_result.error)
            raise AnalysisFailedError(call_result.error or "Analysis failed. Please try again.")

        return self.assembler.assemble(call_result, image_data_url=encode_data_url(content, content_type))
