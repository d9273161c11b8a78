"""Field-level validation rules for Chrome Extension Manifest V3.

Each rule is a pure predicate paired with the message reported when it
fails.  ``schema.py`` attaches these rules to the manifest models; they are
kept here as plain functions so other code (and tests) can use them on
single values.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

VERSION_FORMAT_MESSAGE = "Version must be 1-4 dot-separated integers"
VERSION_RANGE_MESSAGE = "Each version number must be between 0 and 65535"
MATCH_PATTERN_MESSAGE = "Invalid match pattern format"
ICON_SIZES_MESSAGE = "Icon sizes must be 16, 48, 128, or 256"
PERMISSION_MESSAGE = "Invalid permission or host permission"
URL_MESSAGE = "Invalid url"

NAME_REQUIRED_MESSAGE = "Name is required"
NAME_MAX_LENGTH = 45
NAME_TOO_LONG_MESSAGE = f"Name must be {NAME_MAX_LENGTH} characters or less"
DESCRIPTION_MAX_LENGTH = 132
DESCRIPTION_TOO_LONG_MESSAGE = f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less"
SHORT_NAME_MAX_LENGTH = 12
SHORT_NAME_TOO_LONG_MESSAGE = f"Short name must be {SHORT_NAME_MAX_LENGTH} characters or less"
MATCHES_REQUIRED_MESSAGE = "At least one match pattern required"

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_VERSION_PART = 65535
VALID_ICON_SIZES: tuple[str, ...] = ("16", "48", "128", "256")
REQUIRED_FIELDS: tuple[str, ...] = ("manifest_version", "name", "version")

CHROME_PERMISSIONS: frozenset[str] = frozenset(
    {
        "activeTab",
        "alarms",
        "background",
        "bookmarks",
        "browsingData",
        "certificateProvider",
        "clipboardRead",
        "clipboardWrite",
        "contentSettings",
        "contextMenus",
        "cookies",
        "debugger",
        "declarativeContent",
        "declarativeNetRequest",
        "declarativeNetRequestFeedback",
        "declarativeNetRequestWithHostAccess",
        "declarativeWebRequest",
        "desktopCapture",
        "documentScan",
        "downloads",
        "downloads.open",
        "downloads.ui",
        "enterprise.deviceAttributes",
        "enterprise.hardwarePlatform",
        "enterprise.networkingAttributes",
        "enterprise.platformKeys",
        "experimental",
        "fileBrowserHandler",
        "fileSystemProvider",
        "fontSettings",
        "gcm",
        "geolocation",
        "history",
        "identity",
        "identity.email",
        "idle",
        "loginState",
        "management",
        "nativeMessaging",
        "notifications",
        "offscreen",
        "pageCapture",
        "platformKeys",
        "power",
        "printerProvider",
        "printing",
        "printingMetrics",
        "privacy",
        "processes",
        "proxy",
        "scripting",
        "search",
        "sessions",
        "sidePanel",
        "storage",
        "system.cpu",
        "system.display",
        "system.memory",
        "system.storage",
        "tabCapture",
        "tabGroups",
        "tabs",
        "topSites",
        "tts",
        "ttsEngine",
        "unlimitedStorage",
        "vpnProvider",
        "wallpaper",
        "webAuthenticationProxy",
        "webNavigation",
        "webRequest",
        "webRequestBlocking",
    }
)

_VERSION_RE = re.compile(r"^(\d+)(\.\d+){0,3}$", re.ASCII)
_FILE_PATTERN_RE = re.compile(r"^file:///.*$", re.DOTALL)
_MATCH_PATTERN_RE = re.compile(
    r"^(\*|https?|file|ftp)://(\*|(?:\*\.)?[^/*]+|\[[\da-fA-F:]+\])(/.*)?$", re.DOTALL | re.ASCII
)
# Host permissions inside ``permissions`` only need the scheme prefix.
_PERMISSION_PATTERN_RE = re.compile(r"^(\*|https?|file|ftp)://")

_URL_ADAPTER = TypeAdapter(AnyUrl)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def version_error(version: str) -> str | None:
    """Return the failure message for *version*, or ``None`` when valid."""
    # fullmatch so a trailing newline is not accepted the way ``$`` would
    if not _VERSION_RE.fullmatch(version):
        return VERSION_FORMAT_MESSAGE
    if any(int(part) > MAX_VERSION_PART for part in version.split(".")):
        return VERSION_RANGE_MESSAGE
    return None


def is_valid_version(version: str) -> bool:
    """1-4 dot-separated integers, each within 0..65535.

    Examples::

        is_valid_version("1.0.0.0")   -> True
        is_valid_version("1.0.0.0.0") -> False
        is_valid_version("1.0.70000") -> False
    """
    return version_error(version) is None


def is_valid_match_pattern(pattern: str) -> bool:
    """Check a content-script / host-permission match pattern.

    Accepts ``<all_urls>``, any ``file:///`` pattern, and
    ``<scheme>://<host>[/path]`` where scheme is ``*``, ``http``, ``https``,
    ``file`` or ``ftp`` and host is ``*``, ``*.domain``, a bare domain or a
    bracketed IPv6 literal.
    """
    if pattern == "<all_urls>":
        return True
    if _FILE_PATTERN_RE.match(pattern):
        return True
    return _MATCH_PATTERN_RE.fullmatch(pattern) is not None


def is_valid_icon_sizes(icons: Mapping[str, Any]) -> bool:
    """Every key of an icon map must be one of 16, 48, 128 or 256."""
    return all(str(size) in VALID_ICON_SIZES for size in icons)


def is_valid_permission(permission: str) -> bool:
    """A known Chrome permission name or a host pattern with a known scheme.

    The host form is checked by scheme prefix only, which is looser than
    :func:`is_valid_match_pattern`.
    """
    return permission in CHROME_PERMISSIONS or _PERMISSION_PATTERN_RE.match(permission) is not None


def is_valid_url(value: str) -> bool:
    """Return ``True`` if *value* parses as an absolute URL."""
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def get_required_fields() -> list[str]:
    """Top-level keys every Manifest V3 document must define."""
    return list(REQUIRED_FIELDS)
