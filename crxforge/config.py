"""crxforge configuration.

Typed settings for the scaffolder and validator.  Like the rest of the
package, the configuration is a Pydantic v2 model so it is validated at
construction time and can be built from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global crxforge configuration.

    Instances are created once by the CLI entry point and passed to the
    registry and scaffolder.
    """

    templates_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding <id>/template.json + <id>/files; bundled templates when unset",
    )
    default_template: str = Field(default="vanilla", min_length=1)
    output_dir: Path = Field(default=Path("."))
    debug: bool = Field(default=False, description="Show error context and debug output")
    check_files: bool = Field(
        default=True, description="Cross-check referenced files when validating"
    )

    @property
    def resolved_templates_dir(self) -> Path:
        """Templates directory to load from, falling back to the bundled one."""
        return self.templates_dir or BUNDLED_TEMPLATES_DIR

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CRXFORGE_TEMPLATES_DIR, CRXFORGE_DEFAULT_TEMPLATE,
            CRXFORGE_OUTPUT_DIR, CRXFORGE_DEBUG (or DEBUG).
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CRXFORGE_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["CRXFORGE_TEMPLATES_DIR"])
        if os.environ.get("CRXFORGE_DEFAULT_TEMPLATE"):
            kwargs["default_template"] = os.environ["CRXFORGE_DEFAULT_TEMPLATE"]
        if os.environ.get("CRXFORGE_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CRXFORGE_OUTPUT_DIR"])

        kwargs["debug"] = _env_flag(os.environ.get("CRXFORGE_DEBUG")) or _env_flag(
            os.environ.get("DEBUG")
        )
        return cls(**kwargs)
