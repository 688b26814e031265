"""
OpenAI client initialisation.

Builds an ``AsyncAzureOpenAI`` or ``AsyncOpenAI`` client from the
environment and caches it for the life of the process.
"""

from __future__ import annotations

from openai import AsyncAzureOpenAI, AsyncOpenAI

from dataguardian.agents import config
from dataguardian.utils import logger

log = logger.create_logger("LLMClient")

_client: AsyncOpenAI | AsyncAzureOpenAI | None = None
_model_name: str = ""


def get_client() -> tuple[AsyncOpenAI | AsyncAzureOpenAI, str] | None:
    """Return ``(client, model)`` for the configured backend, or ``None``."""
    global _client, _model_name

    if _client is not None:
        return _client, _model_name

    azure = config.AzureOpenAIConfig()
    if azure.validate_config():
        log.info("Using Azure OpenAI")
        _client = AsyncAzureOpenAI(
            azure_endpoint=azure.endpoint,
            api_key=azure.api_key,
            api_version=azure.api_version,
            azure_deployment=azure.deployment,
        )
        _model_name = azure.deployment
        return _client, _model_name

    openai_cfg = config.OpenAIConfig()
    if openai_cfg.validate_config():
        log.info("Using standard OpenAI")
        _client = AsyncOpenAI(api_key=openai_cfg.api_key, base_url=openai_cfg.base_url)
        _model_name = openai_cfg.model
        return _client, _model_name

    log.warn(config.validate_llm_config() or "LLM is not configured")
    return None


def reset_client() -> None:
    """Drop the cached client so the next call re-reads the environment."""
    global _client, _model_name
    _client = None
    _model_name = ""
