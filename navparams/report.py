"""
Plain-text reports for extraction and validation results.

Renders the parameter hierarchy as an indented tree next to the bound
values, followed by missing-required parameters, structural errors,
validation errors, dependency warnings and cache counters.
"""

from typing import Any, Dict, Mapping, Optional

from jinja2 import Environment, PackageLoader, StrictUndefined

from .patterns.extraction import ExtractionResult
from .patterns.hierarchy import iter_tree
from .validation.validator import ValidationResult

REPORT_TEMPLATE = "report.txt.j2"


def display_value(value: Optional[str]) -> str:
    """Render a bound value; distinguishes empty from unbound."""
    if value is None:
        return "<unbound>"
    if value == "":
        return '""'
    return value


class ReportRenderer:
    """Jinja2-backed renderer for engine results."""

    def __init__(self, env: Optional[Environment] = None):
        self.env = env or Environment(
            loader=PackageLoader("navparams", "templates"),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["display_value"] = display_value

    def render(
        self,
        extraction: ExtractionResult,
        validation: Optional[ValidationResult] = None,
        metrics: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> str:
        template = self.env.get_template(REPORT_TEMPLATE)
        context: Dict[str, Any] = {
            "extraction": extraction,
            "tree": iter_tree(extraction.hierarchy),
            "validation": validation,
            "metrics": dict(metrics or {}),
        }
        return template.render(**context)


_renderer: Optional[ReportRenderer] = None


def render_report(
    extraction: ExtractionResult,
    validation: Optional[ValidationResult] = None,
    metrics: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> str:
    """Render a report with a shared default renderer."""
    global _renderer
    if _renderer is None:
        _renderer = ReportRenderer()
    return _renderer.render(extraction, validation, metrics)
