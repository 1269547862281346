"""
Data Analyst Agent - Decides which processing passes a dataset needs.

Responsibilities:
- Inspect a raw data blob
- Flag whether cleaning, transformation and validation should run
- Fall back to running every pass when the model's answer is unusable
"""

from __future__ import annotations

import logging

from uni_agent.parsing import DataAnalysis
from uni_agent.utils import truncate_data

from .base import AgentCard, AgentRole, BaseAgent

logger = logging.getLogger(__name__)

# Enough rows for the model to judge quality
ANALYSIS_SAMPLE_CHARS = 4000


class DataAnalystAgent(BaseAgent[str, DataAnalysis]):
    """Data quality analyst producing a DataAnalysis per data blob."""

    @property
    def agent_card(self) -> AgentCard:
        return AgentCard(
            name="DataAnalyst",
            description="Data quality analyst that selects processing passes",
            role=AgentRole.ANALYST,
            capabilities=["data_quality_analysis"],
        )

    async def process(self, input_data: str) -> DataAnalysis:
        return await self.analyze(input_data)

    async def analyze(self, data: str) -> DataAnalysis:
        """Ask the model which passes the data needs."""
        sample, _ = truncate_data(data, ANALYSIS_SAMPLE_CHARS)
        analysis = await self.invoke_for(self._build_prompt(sample), DataAnalysis)
        logger.info(
            f"[Analyst] cleaning={analysis.needs_cleaning} "
            f"transformation={analysis.needs_transformation} "
            f"validation={analysis.needs_validation}"
        )
        return analysis

    def _build_prompt(self, data: str) -> str:
        return f"""You are a data quality analyst. Analyze the data and determine processing needs.

RULES:
- needs_cleaning: true if NULL, N/A, empty values, or whitespace issues exist
- needs_transformation: true if dates, emails, phones, or currency need standardization
- needs_validation: true if data integrity checks are needed (invalid emails, ages, dates)
- raw_text_allowed: true if data is NOT tabular/CSV format

Use this JSON format:
{self.extractor.format_instructions(DataAnalysis)}

Data to analyze:
{data}"""
