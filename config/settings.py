"""
Uni Agent Configuration Module.

Centralized configuration using Pydantic Settings.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    """Language model configuration (any OpenAI-compatible endpoint)."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    model: str = Field(default="llama3", description="Chat model name")
    base_url: str = Field(
        default="http://localhost:11434/v1",
        description="OpenAI-compatible base URL (Ollama serves one at /v1)",
    )
    api_key: str = Field(default="ollama", description="API key for the endpoint")
    temperature: float = Field(default=0.2, description="Report synthesis temperature")
    planner_temperature: float = Field(default=0.3, description="Workflow planning temperature")
    analysis_temperature: float = Field(default=0.0, description="Data analysis temperature")


class ReportConfig(BaseSettings):
    """Report synthesis configuration."""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    max_data_chars: int = Field(
        default=8000, description="Data longer than this is truncated before synthesis"
    )
    default_report_type: str = Field(default="standard", description="Report type when none given")


class WorkflowConfig(BaseSettings):
    """Workflow planning and execution configuration."""

    model_config = SettingsConfigDict(env_prefix="WORKFLOW_")

    critical_categories: list[str] = Field(
        default=["retrieval", "processing"],
        description="Action categories whose failure aborts the workflow",
    )
    direct_routing: bool = Field(
        default=False,
        description="Build simple single-intent plans without calling the LLM",
    )
    recursion_limit: int = Field(
        default=100,
        description="Minimum LangGraph step budget per run; raised to plan length + 3",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-configs
    llm: LLMConfig = Field(default_factory=LLMConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "console"] = Field(
        default="json", description="Logging format"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global config instance
config = get_settings()
