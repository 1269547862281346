"""
Report export formatters.

HTML (the PDF stand-in), Markdown and JSON renderings of a Report. All three
carry the same content; HTML and Markdown are rendered from the Jinja2
templates in uni_agent/templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError

from uni_agent.exceptions import InvalidParamsError
from uni_agent.models import Report

TEMPL_DIR = (Path(__file__).resolve().parent / "templates").resolve()

_env = Environment(
    loader=FileSystemLoader(TEMPL_DIR),
    autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def coerce_report(value: Any) -> Report:
    """Accept a Report or its dict form (camelCase or snake_case metadata)."""
    if isinstance(value, Report):
        return value
    if isinstance(value, dict):
        candidate = value.get("report", value)
        try:
            return Report.model_validate(candidate)
        except ValidationError as e:
            raise InvalidParamsError(f"Invalid report format for export: {e}") from e
    raise InvalidParamsError(f"Invalid report format for export: {type(value).__name__}")


def _render(name: str, report: Report) -> str:
    template = _env.get_template(name)
    return template.render(
        metadata=report.metadata,
        generated=report.metadata.generated_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
        sections=report.sections,
        recommendations=report.recommendations,
    )


def export_html(report: Report | dict[str, Any]) -> str:
    """Standalone styled HTML document. Returned in place of a PDF."""
    return _render("report.html.j2", coerce_report(report))


def export_markdown(report: Report | dict[str, Any]) -> str:
    return _render("report.md.j2", coerce_report(report))


def export_json(report: Report | dict[str, Any]) -> dict[str, Any]:
    """JSON-serializable dict: metadata, sections, summary, recommendations."""
    return coerce_report(report).to_dict()
