"""
Uni Agent - LLM workflow planning and execution over tabular data.

Natural-language requests are planned into ordered tasks (record lookup,
CSV cleaning/transformation/validation, statistics, report synthesis,
export) and executed with dependency and failure semantics.
"""

from .exceptions import (
    CriticalTaskFailure,
    InvalidParamsError,
    MalformedInputError,
    PlanningError,
    RecordNotFoundError,
    UniAgentError,
    UnknownActionError,
)

__version__ = "0.1.0"

__all__ = [
    "UniAgentError",
    "MalformedInputError",
    "PlanningError",
    "UnknownActionError",
    "CriticalTaskFailure",
    "RecordNotFoundError",
    "InvalidParamsError",
]
