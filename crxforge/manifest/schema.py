"""Pydantic v2 models for Chrome Extension Manifest V3.

``ManifestV3`` describes a complete manifest (the validation subject and the
generator's output) and ``ManifestConfig`` the small input accepted by the
generator.  Field-level rules come from :mod:`crxforge.manifest.rules`;
failures are raised as ``PydanticCustomError`` so each one carries its
canonical message and a precise location.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    StrictBool,
    StrictStr,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from crxforge.manifest import rules

# ---------------------------------------------------------------------------
# Rule-backed field types
# ---------------------------------------------------------------------------


def _check_version(value: str) -> str:
    message = rules.version_error(value)
    if message is not None:
        raise PydanticCustomError("version", message)
    return value


def _check_match_pattern(value: str) -> str:
    if not rules.is_valid_match_pattern(value):
        raise PydanticCustomError("match_pattern", rules.MATCH_PATTERN_MESSAGE)
    return value


def _check_permission(value: str) -> str:
    if not rules.is_valid_permission(value):
        raise PydanticCustomError("permission", rules.PERMISSION_MESSAGE)
    return value


def _check_url(value: str) -> str:
    if not rules.is_valid_url(value):
        raise PydanticCustomError("url", rules.URL_MESSAGE)
    return value


def _check_required(value: str) -> str:
    if not value:
        raise PydanticCustomError("name_required", rules.NAME_REQUIRED_MESSAGE)
    return value


def _check_name(value: str) -> str:
    _check_required(value)
    if len(value) > rules.NAME_MAX_LENGTH:
        raise PydanticCustomError("name_too_long", rules.NAME_TOO_LONG_MESSAGE)
    return value


def _check_description(value: str) -> str:
    if len(value) > rules.DESCRIPTION_MAX_LENGTH:
        raise PydanticCustomError("description_too_long", rules.DESCRIPTION_TOO_LONG_MESSAGE)
    return value


def _check_short_name(value: str) -> str:
    if len(value) > rules.SHORT_NAME_MAX_LENGTH:
        raise PydanticCustomError("short_name_too_long", rules.SHORT_NAME_TOO_LONG_MESSAGE)
    return value


def _check_matches(value: list[str]) -> list[str]:
    if not value:
        raise PydanticCustomError("matches_required", rules.MATCHES_REQUIRED_MESSAGE)
    return value


def _check_icon_map(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping) or not all(
        isinstance(size, str) and isinstance(path, str) for size, path in value.items()
    ):
        raise PydanticCustomError("icon_map", "Icons must map sizes to file paths")
    if not rules.is_valid_icon_sizes(value):
        raise PydanticCustomError("icon_sizes", rules.ICON_SIZES_MESSAGE)
    return dict(value)


def _check_icon_spec(value: Any) -> Union[str, dict[str, str]]:
    # action.default_icon: a single path or a per-size map
    if isinstance(value, str):
        return value
    return _check_icon_map(value)


Version = Annotated[StrictStr, AfterValidator(_check_version)]
MatchPattern = Annotated[StrictStr, AfterValidator(_check_match_pattern)]
Permission = Annotated[StrictStr, AfterValidator(_check_permission)]
Url = Annotated[StrictStr, AfterValidator(_check_url)]
ExtensionName = Annotated[StrictStr, AfterValidator(_check_name)]
Description = Annotated[StrictStr, AfterValidator(_check_description)]
ShortName = Annotated[StrictStr, AfterValidator(_check_short_name)]
IconMap = Annotated[dict[str, str], PlainValidator(_check_icon_map)]
IconSpec = Annotated[Union[str, dict[str, str]], PlainValidator(_check_icon_spec)]
MatchList = Annotated[list[MatchPattern], AfterValidator(_check_matches)]

RunAt = Literal["document_start", "document_end", "document_idle"]


# ---------------------------------------------------------------------------
# Manifest substructures
# ---------------------------------------------------------------------------


class Action(BaseModel):
    """Toolbar action: popup, icon and tooltip."""

    default_popup: StrictStr = None
    default_icon: IconSpec = None
    default_title: StrictStr = None


class Background(BaseModel):
    """Background service worker declaration."""

    service_worker: StrictStr
    type: Literal["module", "classic"] = None


class ContentScript(BaseModel):
    """Scripts and styles injected into pages matching ``matches``."""

    matches: MatchList
    js: list[StrictStr] = None
    css: list[StrictStr] = None
    run_at: RunAt = None
    all_frames: StrictBool = None
    match_about_blank: StrictBool = None


class WebAccessibleResource(BaseModel):
    resources: list[StrictStr]
    matches: list[MatchPattern]
    use_dynamic_url: StrictBool = None


class OptionsUI(BaseModel):
    page: StrictStr
    open_in_tab: StrictBool = None


class ContentSecurityPolicy(BaseModel):
    extension_pages: StrictStr = None
    sandbox: StrictStr = None


class SuggestedKey(BaseModel):
    default: StrictStr = None
    mac: StrictStr = None
    windows: StrictStr = None
    chromeos: StrictStr = None
    linux: StrictStr = None


class Command(BaseModel):
    suggested_key: SuggestedKey = None
    description: StrictStr = None


class Omnibox(BaseModel):
    keyword: StrictStr


class SidePanel(BaseModel):
    default_path: StrictStr


# ---------------------------------------------------------------------------
# Complete manifest
# ---------------------------------------------------------------------------


class ManifestV3(BaseModel):
    """A Chrome Extension Manifest V3 document.

    Keys match the ones Chrome reads from ``manifest.json``.  Unknown
    top-level keys are kept so a validated manifest round-trips unchanged.
    Optional keys may be omitted but not set to ``null``: their ``None``
    default is never validated, an explicit ``None`` is.
    """

    model_config = ConfigDict(extra="allow")

    manifest_version: Literal[3]
    name: ExtensionName
    version: Version
    description: Description = None

    action: Action = None
    background: Background = None
    content_scripts: list[ContentScript] = None
    icons: IconMap = None
    permissions: list[Permission] = None
    host_permissions: list[MatchPattern] = None
    web_accessible_resources: list[WebAccessibleResource] = None

    author: StrictStr = None
    homepage_url: Url = None
    short_name: ShortName = None
    minimum_chrome_version: StrictStr = None

    options_page: StrictStr = None
    options_ui: OptionsUI = None
    content_security_policy: ContentSecurityPolicy = None
    commands: dict[str, Command] = None
    omnibox: Omnibox = None
    side_panel: SidePanel = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready manifest with absent optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Generator input
# ---------------------------------------------------------------------------


class ManifestConfig(BaseModel):
    """Project metadata the generator turns into a manifest.

    Accepts both snake_case field names and their camelCase aliases
    (``hostPermissions``, ``homepageUrl``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    name: Annotated[StrictStr, AfterValidator(_check_required)] = Field(
        ..., description="Extension name"
    )
    version: Version = Field(..., description="1-4 dot-separated integers")
    description: Optional[StrictStr] = None
    permissions: Optional[list[StrictStr]] = None
    host_permissions: Optional[list[StrictStr]] = None
    author: Optional[StrictStr] = None
    homepage_url: Optional[Url] = None
