"""Project scaffolding orchestrator.

Creates a new extension project from a registered template::

    scaffolder = ProjectScaffolder()
    result = await scaffolder.create("my-extension", CreateOptions(directory="/tmp"))

The project is staged in a temporary directory, checked with
``validate_complete`` and only then moved into place, so a failed run never
leaves a half-written project behind.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from crxforge.errors import FileSystemError, ManifestConfigError, ProjectNameError
from crxforge.fs import FileSystem, FileSystemUtils
from crxforge.manifest.generator import DEFAULT_VERSION, ManifestGenerator
from crxforge.manifest.validator import ManifestValidator
from crxforge.template.engine import TemplateEngine, make_context
from crxforge.template.registry import TemplateRegistry
from crxforge.utils import dump_json, print_debug

MANIFEST_FILE = "manifest.json"
PROJECT_NAME_MAX_LENGTH = 214
_PROJECT_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9._-]*$")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class CreateOptions(BaseModel):
    """Options of a ``create`` run."""

    template: str = Field(default="vanilla", description="Registered template id")
    directory: Path = Field(default=Path("."), description="Parent directory of the new project")
    version: str = Field(default=DEFAULT_VERSION)
    description: str = Field(default="A Chrome extension")
    author: Optional[str] = None
    check_files: bool = Field(
        default=True, description="Run validate_complete on the staged project"
    )


class CreateResult(BaseModel):
    success: bool
    project_path: Path
    template_id: str
    files: list[str] = Field(default_factory=list, description="Relative paths written")
    manifest: dict[str, Any] = Field(default_factory=dict)


def validate_project_name(name: str) -> None:
    """Reject names that are not usable as an npm package / directory name.

    Raises:
        ProjectNameError: With the offending name in the context.
    """
    if not name:
        raise ProjectNameError("Project name is required", {"name": name})
    if len(name) > PROJECT_NAME_MAX_LENGTH:
        raise ProjectNameError(
            f"Project name must be {PROJECT_NAME_MAX_LENGTH} characters or less",
            {"name": name},
        )
    if not _PROJECT_NAME_RE.fullmatch(name):
        raise ProjectNameError(
            "Project name may only contain lowercase letters, digits, '-', '_' and '.', "
            "and must start with a letter or digit",
            {"name": name},
        )


# ---------------------------------------------------------------------------
# Scaffolder
# ---------------------------------------------------------------------------


class ProjectScaffolder:
    """Wires the registry, template engine, generator and validator together."""

    def __init__(
        self,
        registry: TemplateRegistry | None = None,
        engine: TemplateEngine | None = None,
        generator: ManifestGenerator | None = None,
        validator: ManifestValidator | None = None,
        fs: FileSystem | None = None,
    ) -> None:
        self.fs: FileSystem = fs or FileSystemUtils()
        self.registry = registry or TemplateRegistry()
        self.engine = engine or TemplateEngine(self.fs)
        self.generator = generator or ManifestGenerator()
        self.validator = validator or ManifestValidator(self.fs)

    async def create(self, project_name: str, options: CreateOptions | None = None) -> CreateResult:
        """Scaffold *project_name* under ``options.directory``.

        Raises:
            ProjectNameError: If the name is not a valid package name.
            TemplateNotFoundError: If the template id is unknown.
            FileSystemError: If the target exists or any write fails.
            ManifestConfigError: If the generated project does not validate.
        """
        options = options or CreateOptions()
        validate_project_name(project_name)
        template = self.registry.require(options.template)

        project_path = os.path.normpath(os.path.join(os.fspath(options.directory), project_name))
        if await self.fs.exists(project_path):
            raise FileSystemError(
                f"Directory already exists: {project_path}", {"path": project_path}
            )

        # fail on bad metadata before touching the disk
        manifest = self.generator.generate(
            {
                "name": project_name,
                "version": options.version,
                "description": options.description,
                "author": options.author,
            }
        ).to_dict()
        context = make_context(project_name, options.version, options.description, options.author)

        staging = await self.fs.create_temp_dir()
        staged_project = os.path.join(staging, project_name)
        print_debug(f"Staging '{project_name}' in {staged_project}")
        try:
            files = await self.engine.render(template.files, context)
            await self.engine.write(files, staged_project)
            await self.fs.write_file(os.path.join(staged_project, MANIFEST_FILE), dump_json(manifest))

            if options.check_files:
                result = await self.validator.validate_complete(manifest, staged_project)
                if not result.valid:
                    raise ManifestConfigError(
                        f"Generated project failed validation ({len(result.errors)} problem(s))",
                        errors=result.errors,
                        context={"template": template.id},
                    )

            await self.fs.move_atomic(staged_project, project_path)
        finally:
            await self.fs.remove(staging)

        written = sorted({file.path for file in files} | {MANIFEST_FILE})
        return CreateResult(
            success=True,
            project_path=Path(project_path),
            template_id=template.id,
            files=written,
            manifest=manifest,
        )
