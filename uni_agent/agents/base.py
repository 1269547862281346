"""
Base Agent class.

Provides common functionality for the planner, analyst and report agents.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from uni_agent.llm import LanguageModel
from uni_agent.parsing import ExtractionShape, ResilientJSONExtractor
from uni_agent.utils import preview

logger = logging.getLogger(__name__)


class AgentRole(str, Enum):
    """Agent role identifiers."""

    PLANNER = "planner"
    ANALYST = "analyst"
    REPORTER = "reporter"


@dataclass
class AgentCard:
    """Describes an agent's capabilities."""

    name: str
    description: str
    role: AgentRole
    capabilities: list[str] = field(default_factory=list)
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "role": self.role.value,
            "capabilities": self.capabilities,
            "version": self.version,
        }


InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")
ShapeT = TypeVar("ShapeT", bound=ExtractionShape)


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """
    Abstract base class for Uni Agent agents.

    Provides:
    - An injected language model (constructed once by the caller)
    - Resilient parsing of model output into typed shapes
    - Logging of model calls
    """

    def __init__(
        self,
        llm: LanguageModel,
        extractor: ResilientJSONExtractor | None = None,
    ):
        """
        Initialize base agent.

        Args:
            llm: Language model used by this agent
            extractor: JSON extractor for model output (default instance if omitted)
        """
        self.llm = llm
        self.extractor = extractor or ResilientJSONExtractor()

    @property
    @abstractmethod
    def agent_card(self) -> AgentCard:
        """Return the agent's capability card."""
        ...

    @property
    def role(self) -> AgentRole:
        """Get agent role."""
        return self.agent_card.role

    @property
    def name(self) -> str:
        """Get agent name."""
        return self.agent_card.name

    @abstractmethod
    async def process(self, input_data: InputT) -> OutputT:
        """
        Process input and produce output.

        This is the main entry point for agent execution.
        """
        ...

    async def invoke_llm(self, prompt: str) -> str:
        """Send a prompt to the language model and return its text."""
        logger.info(f"[{self.name}] Calling LLM ({len(prompt)} chars)")
        response = await self.llm.invoke(prompt)
        logger.debug(f"[{self.name}] LLM response: {preview(response)}")
        return response

    async def invoke_for(self, prompt: str, shape: type[ShapeT]) -> ShapeT:
        """Call the model and extract a typed value; degrades to the shape's default."""
        response = await self.invoke_llm(prompt)
        return self.extractor.extract(response, shape)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name}, role={self.role.value})"
