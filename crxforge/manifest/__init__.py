"""Manifest V3 validation and generation.

Quick usage::

    from crxforge.manifest import ManifestGenerator, ManifestValidator

    manifest = ManifestGenerator().generate({"name": "Demo", "version": "1.0.0"})
    result = await ManifestValidator().validate_complete(manifest.to_dict(), "./demo")
"""

from crxforge.manifest.generator import ManifestGenerator
from crxforge.manifest.schema import ManifestConfig, ManifestV3
from crxforge.manifest.validator import (
    ManifestValidator,
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "ManifestConfig",
    "ManifestGenerator",
    "ManifestV3",
    "ManifestValidator",
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
