"""Manifest V3 validator.

Checks a manifest's structure against :class:`~crxforge.manifest.schema.ManifestV3`
and cross-checks every file it references against the project directory.
All methods report problems as a :class:`ValidationResult`; malformed input
never raises.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from crxforge.fs import FileSystem, FileSystemUtils
from crxforge.manifest.descriptions import FIELD_DESCRIPTIONS, get_field_description
from crxforge.manifest.schema import ManifestV3

WHOLE_DOCUMENT_FIELD = "manifest"
NOT_AN_OBJECT_MESSAGE = "Manifest must be an object"


# ---------------------------------------------------------------------------
# Result models
# ---------------------------------------------------------------------------


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """One violated rule, located by a dotted path into the manifest."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Dotted path, e.g. 'content_scripts[0].matches'")
    message: str
    severity: Severity = Severity.ERROR
    description: Optional[str] = Field(default=None, description="Field documentation, if known")


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: Sequence[ValidationIssue]) -> "ValidationResult":
        return cls(valid=not issues, errors=list(issues))


# ---------------------------------------------------------------------------
# Pydantic error conversion
# ---------------------------------------------------------------------------


def format_loc(loc: Sequence[Any]) -> str:
    """Render a pydantic error location as a dotted path.

    Examples::

        format_loc(("content_scripts", 0, "matches")) -> "content_scripts[0].matches"
        format_loc(())                                -> ""
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path


def issues_from_pydantic(
    exc: PydanticValidationError,
    descriptions: Mapping[str, str] = FIELD_DESCRIPTIONS,
) -> list[ValidationIssue]:
    """Convert every error of a pydantic ``ValidationError`` into an issue."""
    issues: list[ValidationIssue] = []
    for error in exc.errors(include_url=False):
        field = format_loc(error["loc"])
        issues.append(
            ValidationIssue(
                field=field or WHOLE_DOCUMENT_FIELD,
                message=error["msg"],
                description=get_field_description(field, descriptions) if field else None,
            )
        )
    return issues


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class ManifestValidator:
    """Validates Chrome Extension Manifest V3 documents.

    Args:
        fs: Filesystem used by the file cross-checks.  Defaults to the real
            filesystem.
        descriptions: Field-description table used to annotate issues.
    """

    def __init__(
        self,
        fs: FileSystem | None = None,
        descriptions: Mapping[str, str] | None = None,
    ) -> None:
        self.fs: FileSystem = fs or FileSystemUtils()
        self.descriptions: Mapping[str, str] = (
            FIELD_DESCRIPTIONS if descriptions is None else descriptions
        )

    # -- Schema checks -----------------------------------------------------

    def validate(self, manifest: object) -> ValidationResult:
        """Check *manifest* against every structural rule.

        Returns one issue per violated rule; never raises for bad input.
        """
        if not isinstance(manifest, Mapping):
            return ValidationResult.from_issues([_not_an_object()])

        try:
            ManifestV3.model_validate(dict(manifest))
        except PydanticValidationError as exc:
            return ValidationResult.from_issues(issues_from_pydantic(exc, self.descriptions))
        return ValidationResult(valid=True, errors=[])

    def validate_schema(self, manifest: object) -> ValidationResult:
        """Alias for :meth:`validate`."""
        return self.validate(manifest)

    def validate_with_json_schema(self, manifest: object) -> ValidationResult:
        """Hook for an external JSON-Schema validator; currently :meth:`validate`."""
        return self.validate(manifest)

    # -- Filesystem checks -------------------------------------------------

    async def validate_files(self, manifest: object, project_root: str | os.PathLike[str]) -> ValidationResult:
        """Check that every file the manifest references exists under *project_root*.

        Glob entries in ``web_accessible_resources`` are skipped.  All checks
        run, so every missing file is reported in one pass.
        """
        if not isinstance(manifest, Mapping):
            return ValidationResult.from_issues([_not_an_object()])

        references = collect_file_references(manifest)
        root = os.fspath(project_root)
        found = await asyncio.gather(
            *(self.fs.exists(_under_root(root, path)) for _, path in references)
        )

        issues = [
            ValidationIssue(
                field=field,
                message=f"Referenced file does not exist: {path}",
                description=get_field_description(field, self.descriptions),
            )
            for (field, path), exists in zip(references, found)
            if not exists
        ]
        return ValidationResult.from_issues(issues)

    async def validate_complete(self, manifest: object, project_root: str | os.PathLike[str]) -> ValidationResult:
        """Schema validation, then file checks if the schema passed."""
        schema_result = self.validate(manifest)
        if not schema_result.valid:
            return schema_result

        files_result = await self.validate_files(manifest, project_root)
        return ValidationResult(
            valid=files_result.valid,
            errors=[*schema_result.errors, *files_result.errors],
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _not_an_object() -> ValidationIssue:
    return ValidationIssue(field=WHOLE_DOCUMENT_FIELD, message=NOT_AN_OBJECT_MESSAGE)


def _under_root(root: str, path: str) -> str:
    # "/popup.html" is relative to the extension root, not the host filesystem
    return os.path.join(root, path.lstrip("/\\"))


def _strings(value: Any) -> list[tuple[int, str]]:
    if not isinstance(value, list):
        return []
    return [(i, item) for i, item in enumerate(value) if isinstance(item, str)]


def collect_file_references(manifest: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Return ``(field, relative_path)`` for every file the manifest points at."""
    refs: list[tuple[str, str]] = []

    action = manifest.get("action")
    if isinstance(action, Mapping):
        if isinstance(action.get("default_popup"), str) and action["default_popup"]:
            refs.append(("action.default_popup", action["default_popup"]))
        icon = action.get("default_icon")
        if isinstance(icon, str) and icon:
            refs.append(("action.default_icon", icon))
        elif isinstance(icon, Mapping):
            refs.extend(
                (f"action.default_icon.{size}", path)
                for size, path in icon.items()
                if isinstance(path, str)
            )

    background = manifest.get("background")
    if isinstance(background, Mapping):
        worker = background.get("service_worker")
        if isinstance(worker, str) and worker:
            refs.append(("background.service_worker", worker))

    scripts = manifest.get("content_scripts")
    if isinstance(scripts, list):
        for i, script in enumerate(scripts):
            if not isinstance(script, Mapping):
                continue
            for kind in ("js", "css"):
                refs.extend(
                    (f"content_scripts[{i}].{kind}[{j}]", path)
                    for j, path in _strings(script.get(kind))
                )

    icons = manifest.get("icons")
    if isinstance(icons, Mapping):
        refs.extend((f"icons.{size}", path) for size, path in icons.items() if isinstance(path, str))

    if isinstance(manifest.get("options_page"), str) and manifest["options_page"]:
        refs.append(("options_page", manifest["options_page"]))

    options_ui = manifest.get("options_ui")
    if isinstance(options_ui, Mapping) and isinstance(options_ui.get("page"), str) and options_ui["page"]:
        refs.append(("options_ui.page", options_ui["page"]))

    resources = manifest.get("web_accessible_resources")
    if isinstance(resources, list):
        for i, entry in enumerate(resources):
            if not isinstance(entry, Mapping):
                continue
            refs.extend(
                (f"web_accessible_resources[{i}].resources[{j}]", path)
                for j, path in _strings(entry.get("resources"))
                if "*" not in path
            )

    return refs
