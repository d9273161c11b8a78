"""Template discovery and rendering."""

from crxforge.template.engine import TemplateContext, TemplateEngine, TemplateFile, make_context
from crxforge.template.registry import Template, TemplateRegistry

__all__ = [
    "Template",
    "TemplateContext",
    "TemplateEngine",
    "TemplateFile",
    "TemplateRegistry",
    "make_context",
]
