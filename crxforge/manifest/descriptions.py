"""Human-readable descriptions of manifest fields.

Used to enrich validation issues.  Keys are dotted paths with list indices
removed (``content_scripts.matches`` covers ``content_scripts[3].matches``).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Optional

FIELD_DESCRIPTIONS: Mapping[str, str] = {
    "manifest_version": "An integer specifying the version of the manifest file format. Must be 3.",
    "name": "The name of the extension",
    "short_name": "Short name of the extension, shown where space is limited.",
    "version": "One to four dot-separated integers identifying the version of this extension.",
    "description": "A plain text description of the extension (up to 132 characters).",
    "author": "The author of the extension.",
    "homepage_url": "The URL of the homepage for this extension.",
    "minimum_chrome_version": "The minimum version of Chrome required by the extension.",
    "icons": "One or more icons that represent the extension, keyed by size in pixels.",
    "action": "Defines the appearance and behavior of the extension's toolbar icon.",
    "action.default_popup": "The HTML file shown when the user clicks the toolbar icon.",
    "action.default_icon": "The toolbar icon: a single image path or images keyed by size.",
    "action.default_title": "Tooltip shown when hovering over the toolbar icon.",
    "background": "The extension's background service worker.",
    "background.service_worker": "Path to the JavaScript file that runs as the service worker.",
    "background.type": "Set to 'module' to load the service worker as an ES module.",
    "content_scripts": "Scripts and styles injected into matching web pages.",
    "content_scripts.matches": "Match patterns selecting the pages the content script is injected into.",
    "content_scripts.js": "JavaScript files injected into matching pages, in order.",
    "content_scripts.css": "CSS files injected into matching pages, in order.",
    "content_scripts.run_at": "When to inject: document_start, document_end or document_idle.",
    "content_scripts.all_frames": "Whether to inject into all frames or only the top frame.",
    "permissions": "API permissions the extension requests.",
    "host_permissions": "Match patterns for the hosts the extension can access.",
    "web_accessible_resources": "Extension files that web pages or other extensions may load.",
    "web_accessible_resources.resources": "Paths (globs allowed) of the resources to expose.",
    "web_accessible_resources.matches": "Match patterns of the pages allowed to load the resources.",
    "options_page": "Path to the extension's full-page options page.",
    "options_ui": "Embedded options page shown in the extensions management page.",
    "options_ui.page": "Path to the embedded options page.",
    "content_security_policy": "Content security policies for extension pages and sandboxes.",
    "commands": "Keyboard shortcuts that trigger extension actions.",
    "omnibox": "Registers a keyword with the address bar.",
    "omnibox.keyword": "The keyword that activates the extension in the address bar.",
    "side_panel": "Content shown in the browser side panel.",
    "side_panel.default_path": "Path to the HTML page shown in the side panel.",
}

_INDEX_RE = re.compile(r"\[\d+\]", re.ASCII)


def get_field_description(
    field: str, descriptions: Mapping[str, str] = FIELD_DESCRIPTIONS
) -> Optional[str]:
    """Look up *field*, falling back to the same path without list indices."""
    if field in descriptions:
        return descriptions[field]
    return descriptions.get(_INDEX_RE.sub("", field))
