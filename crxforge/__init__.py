"""crxforge: scaffold and validate Chrome Manifest V3 extensions.

Quick usage::

    from crxforge import CreateOptions, ProjectScaffolder

    result = await ProjectScaffolder().create("my-extension", CreateOptions(directory="/tmp"))
"""

__version__ = "0.1.0"

from crxforge.errors import (  # noqa: E402
    FileSystemError,
    ForgeError,
    ManifestConfigError,
    ProjectNameError,
    TemplateNotFoundError,
)
from crxforge.scaffold import CreateOptions, CreateResult, ProjectScaffolder  # noqa: E402

__all__ = [
    "CreateOptions",
    "CreateResult",
    "FileSystemError",
    "ForgeError",
    "ManifestConfigError",
    "ProjectNameError",
    "ProjectScaffolder",
    "TemplateNotFoundError",
    "__version__",
]
