"""Remote analysis calls against the chat completion provider.

Each call shape has its own request record so the prompts and attachments a
pass needs are explicit. The client takes any LangChain chat runnable, which
keeps the provider swappable and lets tests use fake models.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import groq
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable


logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).parent / "prompts"
ANALYSIS_PROMPT_PATH = PROMPT_DIR / "analysis.txt"
VISION_PROMPT_PATH = PROMPT_DIR / "vision.txt"


class RemoteAnalysisError(RuntimeError):
    """Raised when the provider cannot be reached or answers with an error."""


@dataclass(frozen=True)
class TextAnalysisRequest:
    """Telemetry analysis request expecting a JSON-only answer."""

    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class VisionAnalysisRequest:
    """Screenshot analysis request expecting a free-text answer.

    Attributes:
        system_prompt: Instructions for the vision model
        user_prompt: Text part sent ahead of the images
        images_base64: Raw base64 image data, newest first, no data URI prefix
    """

    system_prompt: str
    user_prompt: str
    images_base64: Sequence[str] = ()


@dataclass(frozen=True)
class AnalysisResponse:
    """Text content returned by the provider.

    ``usage`` holds provider-reported token counts when the model supplies
    them. The budget does not use it; it is kept for logging.
    """

    content: str
    usage: Dict[str, Any] = field(default_factory=dict)


def load_system_prompt(path: Path) -> str:
    """Load a system prompt from disk.

    Raises:
        FileNotFoundError: If the prompt file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8").strip()


def build_text_prompt(day: str, telemetry: str) -> str:
    return f"Here is the telemetry data for {day}:\n\n{telemetry}"


def build_vision_prompt(day: str, image_count: int) -> str:
    return (
        f"Here are {image_count} screenshot(s) from the user's desktop on {day}. "
        "Analyze what the user was working on."
    )


def _message_text(message: BaseMessage) -> str:
    """Flatten message content, which may be a list of typed parts."""
    content = message.content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        content = "".join(parts)
    return content or ""


def _to_response(message: BaseMessage) -> AnalysisResponse:
    text = _message_text(message)
    if not text.strip():
        raise RemoteAnalysisError("No response content from API")
    usage = dict(getattr(message, "usage_metadata", None) or {})
    if usage:
        logger.debug("Provider reported usage: %s", usage)
    return AnalysisResponse(content=text, usage=usage)


class RemoteAnalysisClient:
    """Sends text and vision analysis requests, one blocking call each.

    No retries are attempted here; a failure goes straight back to the caller.

    Args:
        text_model: Chat runnable used for telemetry analysis
        vision_model: Chat runnable used for screenshots (defaults to text_model)
    """

    def __init__(self, text_model: Runnable, vision_model: Optional[Runnable] = None) -> None:
        self.text_model = text_model
        self.vision_model = vision_model or text_model
        prompt = ChatPromptTemplate.from_messages(
            [
                ("system", "{system_prompt}"),
                ("human", "{user_prompt}"),
            ]
        )
        self._text_chain = prompt | self.text_model

    def analyze_text(self, request: TextAnalysisRequest) -> AnalysisResponse:
        """Run the telemetry analysis pass.

        Raises:
            RemoteAnalysisError: On transport failure, error status, or empty reply
        """
        try:
            message = self._text_chain.invoke(
                {
                    "system_prompt": request.system_prompt,
                    "user_prompt": request.user_prompt,
                }
            )
        except groq.APIError as exc:
            raise RemoteAnalysisError(f"Text analysis request failed: {exc}") from exc
        return _to_response(message)

    def analyze_vision(self, request: VisionAnalysisRequest) -> AnalysisResponse:
        """Run the screenshot analysis pass.

        Images are attached as PNG data URIs after the text part.

        Raises:
            RemoteAnalysisError: On transport failure, error status, or empty reply
        """
        content: List[Dict[str, Any]] = [{"type": "text", "text": request.user_prompt}]
        for image in request.images_base64:
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:image/png;base64,{image}"},
                }
            )
        messages = [
            SystemMessage(content=request.system_prompt),
            HumanMessage(content=content),
        ]
        try:
            message = self.vision_model.invoke(messages)
        except groq.APIError as exc:
            raise RemoteAnalysisError(f"Vision analysis request failed: {exc}") from exc
        return _to_response(message)
