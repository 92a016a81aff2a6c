from typing import Any, List, Protocol

from skinsense.domain.models import AgentCallResult


class AgentPort(Protocol):
    def upload_files(self, filename: str, content: bytes, content_type: str) -> AgentCallResult:
        ...

    def call_agent(self, message: str, agent_id: str, assets: List[str]) -> AgentCallResult:
        """
        Sends a message to the agent and returns the call envelope.
        Transport failures come back as success=False, never as exceptions.
        """
        ...


class JsonParserPort(Protocol):
    def __call__(self, value: Any) -> Any:
        """
        Best-effort parse of possibly malformed JSON text; None when nothing parses.
        """
        ...
