"""Factory helpers for configuring the remote chat models.

Reads provider settings from the environment and builds the Groq-backed chat
models used by ``RemoteAnalysisClient``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from langchain_groq import ChatGroq

from analysis.client import RemoteAnalysisClient


DEFAULT_TEXT_MODEL = "llama-3.3-70b-versatile"
DEFAULT_VISION_MODEL = "meta-llama/llama-4-maverick-17b-128e-instruct"
DEFAULT_TIMEOUT_SECONDS = 60.0


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing from the environment."""


@dataclass(frozen=True)
class ModelConfig:
    """Declarative configuration for the text and vision models.

    Attributes:
        api_key: Groq API credential
        text_model: Model id for the telemetry pass
        vision_model: Model id for the screenshot pass
        text_temperature: Sampling temperature for the telemetry pass
        vision_temperature: Sampling temperature for the screenshot pass
        vision_max_tokens: Reply cap for the screenshot pass
        timeout: Per-request deadline in seconds
        max_retries: Provider-side retries (0: failures surface immediately)
    """

    api_key: str
    text_model: str = DEFAULT_TEXT_MODEL
    vision_model: str = DEFAULT_VISION_MODEL
    text_temperature: float = 0.7
    vision_temperature: float = 0.5
    vision_max_tokens: int = 512
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = 0


def resolve_model_configuration() -> ModelConfig:
    """Return the model configuration pulled from the environment.

    GROQ_API_KEY is required. GROQ_MODEL and GROQ_VISION_MODEL override the
    model ids; NARRATOR_REQUEST_TIMEOUT overrides the request deadline.

    Returns:
        ModelConfig: Settings ready for ``build_client``

    Raises:
        ConfigurationError: If GROQ_API_KEY is unset or the timeout is not a number
    """
    api_key = os.getenv("GROQ_API_KEY")
    if not api_key:
        raise ConfigurationError("GROQ_API_KEY environment variable not set")

    raw_timeout = os.getenv("NARRATOR_REQUEST_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
    except ValueError as exc:
        raise ConfigurationError(
            f"NARRATOR_REQUEST_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
        ) from exc

    return ModelConfig(
        api_key=api_key,
        text_model=os.getenv("GROQ_MODEL") or DEFAULT_TEXT_MODEL,
        vision_model=os.getenv("GROQ_VISION_MODEL") or DEFAULT_VISION_MODEL,
        timeout=timeout,
    )


def build_client(config: Optional[ModelConfig] = None) -> RemoteAnalysisClient:
    """Instantiate the text and vision chat models and wrap them in a client.

    Args:
        config: Model settings (read from the environment if None)

    Returns:
        RemoteAnalysisClient: Client ready for both analysis passes
    """
    cfg = config or resolve_model_configuration()

    text_model = ChatGroq(
        model=cfg.text_model,
        api_key=cfg.api_key,
        temperature=cfg.text_temperature,
        timeout=cfg.timeout,
        max_retries=cfg.max_retries,
    )
    vision_model = ChatGroq(
        model=cfg.vision_model,
        api_key=cfg.api_key,
        temperature=cfg.vision_temperature,
        max_tokens=cfg.vision_max_tokens,
        timeout=cfg.timeout,
        max_retries=cfg.max_retries,
    )
    return RemoteAnalysisClient(text_model, vision_model)
