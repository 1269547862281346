"""
Shared fixtures for the Uni Agent tests.

The language model is replaced by a scripted fake that answers according to
which prompt it receives and records every prompt.
"""

import json
import os
import sys

import pytest

# Add project root to path (go up 2 levels: test -> scripts -> project root)
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, project_root)

from config import Settings
from config.settings import ReportConfig, WorkflowConfig
from uni_agent.models import KnowledgeRecord
from uni_agent.models.store import InMemoryRecordStore

# Prompt markers
PLAN_PROMPT = "plans data processing workflows"
FALLBACK_PLAN_PROMPT = "Plan a data workflow for this request"
ANALYSIS_PROMPT = "You are a data quality analyst"
SUMMARY_PROMPT = "creating concise summaries"
INSIGHTS_PROMPT = "providing deep insights"

EMPLOYEES_CSV = "name,age\nJohn,30\nJane,25"

SUMMARY_JSON = json.dumps({
    "summary": "A small roster of employees with their ages.",
    "key_points": ["Two employees", "Ages between 25 and 30"],
    "data_quality": "good - no missing values",
    "record_count": 2,
})

INSIGHTS_JSON = json.dumps({
    "insights": ["The team is young"],
    "trends": ["Ages cluster in the late twenties"],
    "anomalies": [],
    "recommendations": ["Collect department information"],
})

ANALYSIS_JSON = json.dumps({
    "needs_cleaning": True,
    "needs_transformation": True,
    "needs_validation": True,
    "raw_text_allowed": False,
    "explanation": "Nulls, mixed-case emails and out-of-range ages",
})


class ScriptedLLM:
    """
    LanguageModel fake.

    routes maps a prompt substring to a reply: a string, a list of replies
    consumed in order, or an exception to raise.
    """

    def __init__(self, routes=None, default="{}"):
        self.routes = {key: list(value) if isinstance(value, list) else value
                       for key, value in (routes or {}).items()}
        self.default = default
        self.prompts = []

    async def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.default
        for marker, value in self.routes.items():
            if marker in prompt:
                reply = value.pop(0) if isinstance(value, list) else value
                break
        if isinstance(reply, Exception):
            raise reply
        return reply

    def calls_to(self, marker: str) -> int:
        return sum(1 for prompt in self.prompts if marker in prompt)


def plan_json(tasks, reasoning="test plan") -> str:
    return json.dumps({"tasks": tasks, "reasoning": reasoning})


def report_routes(**extra):
    routes = {SUMMARY_PROMPT: SUMMARY_JSON, INSIGHTS_PROMPT: INSIGHTS_JSON, ANALYSIS_PROMPT: ANALYSIS_JSON}
    routes.update(extra)
    return routes


def make_settings(**workflow) -> Settings:
    return Settings(
        workflow=WorkflowConfig(**workflow),
        report=ReportConfig(),
    )


@pytest.fixture
def employees_record():
    return KnowledgeRecord(
        id="R1",
        title="employees",
        content=EMPLOYEES_CSV,
        raw_content=EMPLOYEES_CSV,
        filename="employees.csv",
        file_type="csv",
    )


@pytest.fixture
def store(employees_record):
    return InMemoryRecordStore([employees_record])


@pytest.fixture
def settings():
    return make_settings()
