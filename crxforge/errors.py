"""Exception hierarchy for crxforge.

Every error raised on purpose by the package derives from ``ForgeError`` and
carries a machine-readable ``code`` plus an optional ``context`` mapping.  The
CLI turns these into exit codes via :func:`get_exit_code`.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from crxforge.manifest.validator import ValidationIssue


class ForgeError(Exception):
    """Base class for every expected crxforge failure."""

    def __init__(
        self,
        message: str,
        code: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.context = context
        super().__init__(message)


class ManifestConfigError(ForgeError):
    """Raised when a manifest configuration fails validation.

    ``errors`` lists every violated rule, not only the first one.
    """

    def __init__(
        self,
        message: str,
        errors: list["ValidationIssue"] | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.errors = list(errors or [])
        super().__init__(message, "VALIDATION_ERROR", context)


class ProjectNameError(ForgeError):
    """Raised when a project name cannot be used as a package name."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", context)


class FileSystemError(ForgeError):
    """Raised by the filesystem capability with the offending path(s)."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, "FS_ERROR", context)


class TemplateNotFoundError(ForgeError):
    """Raised when a template id is not registered."""

    def __init__(self, template_id: str, available: list[str] | None = None) -> None:
        super().__init__(
            f"Template not found: {template_id}",
            "TEMPLATE_NOT_FOUND",
            {"template": template_id, "available": list(available or [])},
        )


_EXIT_CODES: dict[str, int] = {
    "VALIDATION_ERROR": 2,
    "FS_ERROR": 3,
    "TEMPLATE_NOT_FOUND": 2,
}


def is_forge_error(value: object) -> bool:
    """Return ``True`` if *value* is a :class:`ForgeError` instance."""
    return isinstance(value, ForgeError)


def get_exit_code(error: BaseException) -> int:
    """Map an exception to the process exit code used by the CLI."""
    if isinstance(error, ForgeError):
        return _EXIT_CODES.get(error.code, 1)
    return 1


def format_error(error: BaseException) -> str:
    """Format an error for terminal output.

    Examples::

        format_error(ForgeError("boom", "X"))
        -> "Error: boom"

        format_error(FileSystemError("nope", {"path": "/tmp/a"}))
        -> 'Error: nope\\n\\nContext:\\n  path: "/tmp/a"'
    """
    lines = [f"Error: {error}"]
    context = getattr(error, "context", None)
    if context:
        lines.append("")
        lines.append("Context:")
        for key, value in context.items():
            lines.append(f"  {key}: {json.dumps(value, default=str)}")
    return "\n".join(lines)
