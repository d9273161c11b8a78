"""Shared pytest fixtures for the crxforge test suite.

Provides reusable fixtures for:
- An in-memory filesystem implementing the ``FileSystem`` protocol
- Sample manifests (minimal and fully populated)
- A standard template context
- A small on-disk template directory
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest

from crxforge.errors import FileSystemError
from crxforge.fs import PathLike, normalize
from crxforge.template.engine import TemplateContext, make_context


# ---------------------------------------------------------------------------
# In-memory filesystem
# ---------------------------------------------------------------------------


class MemoryFileSystem:
    """Dict-backed fake of :class:`crxforge.fs.FileSystem`.

    Files are stored as bytes keyed by normalised path; directories are
    implied by the files below them plus any created explicitly.
    """

    def __init__(self, files: dict[str, str | bytes] | None = None) -> None:
        self.files: dict[str, bytes] = {}
        self.dirs: set[str] = set()
        self.exists_calls: list[str] = []
        self._temp_counter = 0
        for path, content in (files or {}).items():
            self._put(path, content)

    # -- helpers -----------------------------------------------------------

    def _put(self, path: PathLike, content: str | bytes) -> None:
        key = normalize(path)
        self.files[key] = content.encode("utf-8") if isinstance(content, str) else content
        self._add_parents(key)

    def _add_parents(self, key: str) -> None:
        parent = os.path.dirname(key)
        while parent and parent not in self.dirs:
            self.dirs.add(parent)
            next_parent = os.path.dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

    def _is_dir(self, key: str) -> bool:
        return key in self.dirs

    # -- FileSystem protocol -----------------------------------------------

    async def ensure_dir(self, path: PathLike) -> None:
        key = normalize(path)
        self.dirs.add(key)
        self._add_parents(key)

    async def copy_dir(self, src: PathLike, dest: PathLike) -> None:
        source, target = normalize(src), normalize(dest)
        if not self._is_dir(source):
            raise FileSystemError(f"Source directory does not exist: {src}", {"src": str(src)})
        if await self.exists(target):
            raise FileSystemError(f"Destination already exists: {dest}", {"dest": str(dest)})
        prefix = source + os.sep
        for key, data in list(self.files.items()):
            if key.startswith(prefix):
                self._put(target + key[len(source):], data)
        await self.ensure_dir(target)

    async def write_file(self, path: PathLike, content: str | bytes) -> None:
        self._put(path, content)

    async def read_file(self, path: PathLike) -> str:
        return (await self.read_bytes(path)).decode("utf-8")

    async def read_bytes(self, path: PathLike) -> bytes:
        key = normalize(path)
        if key not in self.files:
            raise FileSystemError(f"File does not exist: {path}", {"path": str(path)})
        return self.files[key]

    async def exists(self, path: PathLike) -> bool:
        key = normalize(path)
        self.exists_calls.append(key)
        return key in self.files or key in self.dirs

    async def is_directory(self, path: PathLike) -> bool:
        return self._is_dir(normalize(path))

    async def list_directory(self, path: PathLike) -> list[str]:
        key = normalize(path)
        if not self._is_dir(key):
            raise FileSystemError(f"Failed to list directory: {path}", {"path": str(path)})
        names = {
            os.path.relpath(entry, key).split(os.sep)[0]
            for entry in (*self.files, *self.dirs)
            if entry != key and entry.startswith(key + os.sep)
        }
        # reversed so callers cannot rely on listing order
        return sorted(names, reverse=True)

    async def remove(self, path: PathLike) -> None:
        key = normalize(path)
        prefix = key + os.sep
        self.files = {k: v for k, v in self.files.items() if k != key and not k.startswith(prefix)}
        self.dirs = {d for d in self.dirs if d != key and not d.startswith(prefix)}

    async def create_temp_dir(self) -> str:
        self._temp_counter += 1
        path = normalize(f"/tmp/crxforge-{self._temp_counter}")
        await self.ensure_dir(path)
        return path

    async def move_atomic(self, src: PathLike, dest: PathLike) -> None:
        source, target = normalize(src), normalize(dest)
        if not await self.exists(source):
            raise FileSystemError(f"Source does not exist: {src}", {"src": str(src)})
        if await self.exists(target):
            raise FileSystemError(f"Destination already exists: {dest}", {"dest": str(dest)})
        if source in self.files:
            self._put(target, self.files.pop(source))
            return
        await self.copy_dir(source, target)
        await self.remove(source)


@pytest.fixture
def memory_fs() -> MemoryFileSystem:
    """Empty in-memory filesystem."""
    return MemoryFileSystem()


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def minimal_manifest() -> dict[str, Any]:
    return {"manifest_version": 3, "name": "Test Extension", "version": "1.0.0"}


@pytest.fixture
def full_manifest() -> dict[str, Any]:
    """A manifest that uses every path-valued field."""
    return {
        "manifest_version": 3,
        "name": "Test Extension",
        "version": "1.0.0",
        "description": "A test extension",
        "action": {
            "default_popup": "popup.html",
            "default_icon": {"16": "icons/icon16.png", "48": "icons/icon48.png"},
            "default_title": "Test",
        },
        "background": {"service_worker": "background.js", "type": "module"},
        "content_scripts": [
            {
                "matches": ["https://*.example.com/*"],
                "js": ["content.js"],
                "css": ["content.css"],
                "run_at": "document_idle",
                "all_frames": False,
            }
        ],
        "icons": {
            "16": "icons/icon16.png",
            "48": "icons/icon48.png",
            "128": "icons/icon128.png",
        },
        "permissions": ["storage", "tabs"],
        "host_permissions": ["https://*.google.com/*"],
        "options_page": "options.html",
        "options_ui": {"page": "options.html", "open_in_tab": False},
        "web_accessible_resources": [
            {"resources": ["images/*.png", "inject.js"], "matches": ["<all_urls>"]}
        ],
        "commands": {"_execute_action": {"suggested_key": {"default": "Ctrl+Shift+Y"}}},
        "omnibox": {"keyword": "test"},
        "side_panel": {"default_path": "sidepanel.html"},
    }


FULL_MANIFEST_FILES = (
    "popup.html",
    "icons/icon16.png",
    "icons/icon48.png",
    "icons/icon128.png",
    "background.js",
    "content.js",
    "content.css",
    "options.html",
    "inject.js",
)


@pytest.fixture
def project_fs() -> MemoryFileSystem:
    """In-memory project at ``/project`` holding every file of ``full_manifest``."""
    return MemoryFileSystem({f"/project/{path}": "x" for path in FULL_MANIFEST_FILES})


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


@pytest.fixture
def template_context() -> TemplateContext:
    return make_context(
        project_name="test-extension",
        version="1.0.0",
        description="A test extension",
        author="Test Author",
    )


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """On-disk templates directory with a ``vanilla`` template."""
    root = tmp_path / "templates"
    files = root / "vanilla" / "files"
    (files / "src").mkdir(parents=True)
    (root / "vanilla" / "template.json").write_text(
        json.dumps(
            {
                "id": "vanilla",
                "name": "Vanilla JavaScript",
                "description": "Test template",
                "dependencies": ["lodash"],
                "devDependencies": ["web-ext"],
            }
        ),
        encoding="utf-8",
    )
    (files / "README.md").write_text("# {{projectName}}\n", encoding="utf-8")
    (files / "src" / "{{projectName}}.js").write_text("// v{{version}}\n", encoding="utf-8")
    return root


@pytest.fixture
def make_memory_fs():
    """Factory for pre-populated in-memory filesystems: ``make_memory_fs({path: content})``."""
    return MemoryFileSystem
