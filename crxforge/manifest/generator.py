"""Manifest V3 generator.

Turns a small :class:`ManifestConfig` (or ``package.json`` metadata) into a
complete manifest following crxforge's fixed project layout: ``popup.html``
as the popup, ``background.js`` as a module service worker, one
``<all_urls>`` content script and icons under ``icons/``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from crxforge.errors import ManifestConfigError
from crxforge.manifest.schema import (
    Action,
    Background,
    ContentScript,
    ManifestConfig,
    ManifestV3,
)
from crxforge.manifest.validator import issues_from_pydantic

DEFAULT_NAME = "My Extension"
DEFAULT_VERSION = "1.0.0"

POPUP_PATH = "popup.html"
SERVICE_WORKER_PATH = "background.js"
CONTENT_SCRIPT_PATH = "content.js"
ICON_SIZES: tuple[str, ...] = ("16", "48", "128")


def default_icons() -> dict[str, str]:
    """``{"16": "icons/icon16.png", ...}`` for the generated sizes."""
    return {size: f"icons/icon{size}.png" for size in ICON_SIZES}


class ManifestGenerator:
    """Generates Chrome Extension Manifest V3 documents."""

    def generate(self, config: Union[ManifestConfig, Mapping[str, Any]]) -> ManifestV3:
        """Validate *config* and build the manifest.

        Raises:
            ManifestConfigError: If the config violates any rule.  The error
                lists every violation; no partial manifest is built.
        """
        validated = self._validate_config(config)

        try:
            manifest = ManifestV3(
                manifest_version=3,
                name=validated.name,
                version=validated.version,
                description=validated.description or "",
                action=Action(default_popup=POPUP_PATH, default_icon=default_icons()),
                background=Background(service_worker=SERVICE_WORKER_PATH, type="module"),
                content_scripts=[ContentScript(matches=["<all_urls>"], js=[CONTENT_SCRIPT_PATH])],
                icons=default_icons(),
            )
        except PydanticValidationError as exc:
            # config rules are looser than manifest rules (e.g. name length)
            raise _config_error(exc) from exc

        if validated.permissions:
            manifest.permissions = list(validated.permissions)
        if validated.host_permissions:
            manifest.host_permissions = list(validated.host_permissions)
        if validated.author:
            manifest.author = validated.author
        if validated.homepage_url:
            manifest.homepage_url = validated.homepage_url

        return manifest

    def from_package_json(self, package_json: Mapping[str, Any]) -> ManifestConfig:
        """Derive a manifest config from ``package.json`` metadata.

        Best effort: missing fields fall back to defaults and the result is
        not validated here, so this never fails.
        """
        fields: dict[str, Any] = {
            "name": package_json.get("name") or DEFAULT_NAME,
            "version": package_json.get("version") or DEFAULT_VERSION,
            "description": package_json.get("description"),
        }

        author = package_json.get("author")
        if isinstance(author, str) and author:
            fields["author"] = author
        elif isinstance(author, Mapping) and author.get("name"):
            fields["author"] = author["name"]

        if package_json.get("homepage"):
            fields["homepage_url"] = package_json["homepage"]

        return ManifestConfig.model_construct(**fields)

    def generate_from_package_json(
        self,
        package_json: Mapping[str, Any],
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ManifestV3:
        """Generate from ``package.json`` with *overrides* winning on conflicts."""
        config = self.from_package_json(package_json)
        merged = {**config.model_dump(exclude_none=True), **_to_field_names(overrides or {})}
        return self.generate(merged)

    # -- Internal ----------------------------------------------------------

    @staticmethod
    def _validate_config(config: Union[ManifestConfig, Mapping[str, Any]]) -> ManifestConfig:
        if isinstance(config, ManifestConfig):
            # may come from model_construct(), so re-check
            config = config.model_dump(exclude_none=True)
        if not isinstance(config, Mapping):
            raise ManifestConfigError(
                "Invalid manifest configuration: expected a mapping",
                context={"type": type(config).__name__},
            )
        try:
            return ManifestConfig.model_validate(dict(config))
        except PydanticValidationError as exc:
            raise _config_error(exc) from exc


def _config_error(exc: PydanticValidationError) -> ManifestConfigError:
    issues = issues_from_pydantic(exc)
    summary = "; ".join(f"{issue.field}: {issue.message}" for issue in issues)
    return ManifestConfigError(
        f"Invalid manifest configuration: {summary}",
        errors=issues,
        context={"fields": [issue.field for issue in issues]},
    )


def _to_field_names(values: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases (``hostPermissions``) to field names."""
    aliases = {
        info.alias: name
        for name, info in ManifestConfig.model_fields.items()
        if info.alias
    }
    return {aliases.get(key, key): value for key, value in values.items()}
