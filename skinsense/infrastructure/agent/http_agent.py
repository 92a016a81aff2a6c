import logging
import uuid
from typing import Any, List

import requests
from pydantic import ValidationError

from skinsense.application.ports import AgentPort
from skinsense.domain.models import AgentCallResult
from skinsense.infrastructure.config import Settings


logger = logging.getLogger(__name__)


UPLOAD_PATH = "/assets/upload"
CHAT_PATH = "/inference/chat/"
UPLOAD_TIMEOUT = 60


def _asset_ids(body: Any) -> List[str]:
    if not isinstance(body, dict):
        return []
    if isinstance(body.get("asset_ids"), list):
        return [str(a) for a in body["asset_ids"]]
    ids = []
    for item in body.get("results") or []:
        if isinstance(item, dict) and item.get("asset_id"):
            ids.append(str(item["asset_id"]))
    return ids


class HttpAgentAdapter(AgentPort):
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.api_key = self.settings.agent_api_key
        self.base_url = self.settings.agent_base_url
        self.timeout = self.settings.agent_timeout

    def _headers(self) -> dict:
        return {"x-api-key": self.api_key or "", "accept": "application/json"}

    def upload_files(self, filename: str, content: bytes, content_type: str) -> AgentCallResult:
        if not self.api_key:
            logger.error("Agent API key is missing; upload skipped.")
            return AgentCallResult(success=False, error="Agent API key is not configured.")

        url = self.base_url + UPLOAD_PATH
        try:
            resp = requests.post(
                url,
                headers=self._headers(),
                files={"files": (filename, content, content_type)},
                timeout=UPLOAD_TIMEOUT,
            )
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception("Asset upload failed: %s", e)
            return AgentCallResult(success=False, error="Failed to upload image. Please try again.")

        asset_ids = _asset_ids(body)
        if not asset_ids:
            logger.warning("Upload response carried no asset ids: %s", str(body)[:200])
            return AgentCallResult(success=False, error="Upload returned no asset ids.")
        return AgentCallResult(success=True, asset_ids=asset_ids)

    def call_agent(self, message: str, agent_id: str, assets: List[str]) -> AgentCallResult:
        if not self.api_key:
            logger.error("Agent API key is missing; agent call skipped.")
            return AgentCallResult(success=False, error="Agent API key is not configured.")

        url = self.base_url + CHAT_PATH
        payload = {
            "agent_id": agent_id,
            "session_id": f"{agent_id}-{uuid.uuid4().hex[:12]}",
            "user_id": "skinsense",
            "message": message,
            "assets": assets,
        }
        try:
            resp = requests.post(url, headers=self._headers(), json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception("Agent call failed: %s", e)
            return AgentCallResult(success=False, error="Analysis failed. Please try again.")

        raw_text = resp.text
        try:
            body = resp.json()
        except ValueError:
            # plain-text answer, left for the JSON repair step
            logger.warning("Agent returned a non-JSON body (%s bytes)", len(raw_text))
            return AgentCallResult(success=True, response={"result": raw_text}, raw_response=raw_text)

        if isinstance(body, dict) and "success" in body:
            body.setdefault("raw_response", raw_text)
            try:
                return AgentCallResult(**body)
            except ValidationError as e:
                logger.warning("Agent envelope did not validate: %s", e)

        result = body.get("response", body) if isinstance(body, dict) else body
        return AgentCallResult(
            success=True,
            response={"status": "success", "result": result},
            raw_response=raw_text,
        )
