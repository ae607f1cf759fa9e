"""Default chat model wiring using environment-derived settings.

The engine only needs an object with ``async ainvoke(messages)``; any
LangChain chat model qualifies. ``build_chat_model`` creates the default
OpenAI-compatible one from ``ModelSettings``.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, TypedDict, runtime_checkable

from langchain_openai import ChatOpenAI

from reactAgent.config import Settings, get_settings


@runtime_checkable
class ChatModel(Protocol):
    async def ainvoke(self, input: Sequence[Any], *args: Any, **kwargs: Any) -> Any:
        ...


class ModelConfig(TypedDict):
    id: str
    api_key: Optional[str]
    base_url: Optional[str]
    temperature: float


def resolve_model_config(settings: Settings) -> ModelConfig:
    """Normalized model config (id + credentials) from settings."""
    model = settings.model
    return {
        "id": model.model_id,
        "api_key": model.api_key,
        "base_url": model.base_url,
        "temperature": model.temperature,
    }


def build_chat_model(settings: Optional[Settings] = None) -> ChatOpenAI:
    """Instantiate the default chat model.

    Raises:
        ValueError: no API key configured
    """
    config = resolve_model_config(settings or get_settings())
    if not config["api_key"]:
        raise ValueError("MODEL_API_KEY is not set; pass a model to build_application() or configure .env")

    kwargs = {
        "model": config["id"],
        "api_key": config["api_key"],
        "temperature": config["temperature"],
    }
    if config["base_url"]:
        kwargs["base_url"] = config["base_url"]
    return ChatOpenAI(**kwargs)
