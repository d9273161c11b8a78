"""Registry of the project templates shipped with crxforge.

Each template lives at ``<templates_dir>/<id>/`` with a ``template.json``
metadata file and a ``files/`` tree handed to the template engine.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from crxforge.config import BUNDLED_TEMPLATES_DIR
from crxforge.errors import TemplateNotFoundError
from crxforge.utils import load_json, print_debug

KNOWN_TEMPLATES: tuple[str, ...] = ("vanilla",)
METADATA_FILE = "template.json"
FILES_DIR = "files"


class Template(BaseModel):
    """Metadata of one registered template."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    description: str = ""
    files: str = Field(..., description="Absolute path of the template's file tree")
    dependencies: list[str] = Field(default_factory=list)
    dev_dependencies: list[str] = Field(default_factory=list, alias="devDependencies")


class TemplateRegistry:
    """Loads every known template once, at construction time."""

    def __init__(self, templates_dir: str | Path | None = None) -> None:
        self.templates_dir = Path(templates_dir) if templates_dir else BUNDLED_TEMPLATES_DIR
        self._templates: dict[str, Template] = {}
        self._load_templates()

    def _load_templates(self) -> None:
        for template_id in KNOWN_TEMPLATES:
            base = self.templates_dir / template_id
            meta_path = base / METADATA_FILE
            if not meta_path.is_file():
                print_debug(f"Template '{template_id}' skipped: {meta_path} not found")
                continue

            metadata = load_json(meta_path)
            self._templates[template_id] = Template.model_validate(
                {"id": template_id, **metadata, "files": str((base / FILES_DIR).resolve())}
            )

    def get(self, template_id: str) -> Optional[Template]:
        return self._templates.get(template_id)

    def has(self, template_id: str) -> bool:
        return template_id in self._templates

    def list(self) -> list[Template]:
        """All registered templates, in registration order."""
        return list(self._templates.values())

    def require(self, template_id: str) -> Template:
        """Like :meth:`get` but raises :class:`TemplateNotFoundError`."""
        template = self.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id, list(self._templates))
        return template
