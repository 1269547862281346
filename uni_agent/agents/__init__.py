"""
Uni Agent agents.

Exports the planner, data analyst and report agents.
"""

from .analyst import DataAnalystAgent
from .base import AgentCard, AgentRole, BaseAgent
from .planner import PlannerAgent, PlannerInput, detect_intent, needs_planning
from .reporter import ReportAgent, ReportSource, count_records, data_statistics

__all__ = [
    # Base
    "BaseAgent",
    "AgentCard",
    "AgentRole",
    # Planner
    "PlannerAgent",
    "PlannerInput",
    "needs_planning",
    "detect_intent",
    # Analyst
    "DataAnalystAgent",
    # Reporter
    "ReportAgent",
    "ReportSource",
    "count_records",
    "data_statistics",
]
