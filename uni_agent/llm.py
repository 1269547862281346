"""
Language model access.

The core only needs `invoke(prompt) -> text`. ChatModelClient adapts any
LangChain chat model to that; create_chat_model builds the configured
OpenAI-compatible endpoint. Clients are constructed once by the caller and
passed into the agents.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from config import Settings, config

from .parsing import response_text

logger = logging.getLogger(__name__)


@runtime_checkable
class LanguageModel(Protocol):
    """Collaborator capability: prompt text in, response text out."""

    async def invoke(self, prompt: str) -> str:
        ...


class ChatModelClient:
    """LanguageModel backed by a LangChain chat model."""

    def __init__(self, chat_model: BaseChatModel):
        self.chat_model = chat_model

    async def invoke(self, prompt: str) -> str:
        logger.debug(f"[LLM] Prompt ({len(prompt)} chars)")
        response = await self.chat_model.ainvoke([HumanMessage(content=prompt)])
        return response_text(response)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.chat_model.__class__.__name__})"


def create_chat_model(
    temperature: float | None = None,
    settings: Settings | None = None,
) -> ChatOpenAI:
    """
    Create a chat model for the configured OpenAI-compatible endpoint.

    Args:
        temperature: Overrides the configured default temperature
        settings: Settings to use instead of the global config
    """
    llm_config = (settings or config).llm
    return ChatOpenAI(
        model=llm_config.model,
        base_url=llm_config.base_url,
        api_key=llm_config.api_key,
        temperature=llm_config.temperature if temperature is None else temperature,
    )


def create_llm_client(
    temperature: float | None = None,
    settings: Settings | None = None,
) -> ChatModelClient:
    """Convenience: configured chat model wrapped as a LanguageModel."""
    return ChatModelClient(create_chat_model(temperature, settings))
