"""Unit tests for ProjectScaffolder and project-name validation.

Tests cover:
- Project name rules
- Option handling (template id, version, author, check_files)
- Failure paths: unknown template, existing target, invalid staged project
- No partial output when a run fails
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from crxforge.errors import (
    FileSystemError,
    ManifestConfigError,
    ProjectNameError,
    TemplateNotFoundError,
)
from crxforge.scaffold import (
    MANIFEST_FILE,
    PROJECT_NAME_MAX_LENGTH,
    CreateOptions,
    ProjectScaffolder,
    validate_project_name,
)
from crxforge.template.registry import TemplateRegistry

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Project names
# ---------------------------------------------------------------------------


class TestValidateProjectName:
    @pytest.mark.parametrize("name", ["my-extension", "ext2", "a", "my.ext_v2", "0day"])
    def test_accepts(self, name):
        validate_project_name(name)

    @pytest.mark.parametrize(
        "name", ["", "My-Extension", "-leading", ".hidden", "has space", "a/b", "ünïcode"]
    )
    def test_rejects(self, name):
        with pytest.raises(ProjectNameError) as exc_info:
            validate_project_name(name)
        assert exc_info.value.context == {"name": name}

    def test_length_limit(self):
        validate_project_name("a" * PROJECT_NAME_MAX_LENGTH)
        with pytest.raises(ProjectNameError):
            validate_project_name("a" * (PROJECT_NAME_MAX_LENGTH + 1))


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


@pytest.fixture
def scaffolder(templates_dir) -> ProjectScaffolder:
    """Scaffolder over the small test template, which has no manifest assets."""
    return ProjectScaffolder(registry=TemplateRegistry(templates_dir))


class TestCreate:
    async def test_create_without_file_checks(self, scaffolder, tmp_path):
        options = CreateOptions(directory=tmp_path, version="0.2.0", check_files=False)
        result = await scaffolder.create("demo", options)

        project = tmp_path / "demo"
        assert result.success is True
        assert result.project_path == project
        assert result.template_id == "vanilla"
        assert result.files == ["README.md", MANIFEST_FILE, "src/demo.js"]
        assert (project / "README.md").read_text(encoding="utf-8") == "# demo\n"
        assert (project / "src" / "demo.js").read_text(encoding="utf-8") == "// v0.2.0\n"
        assert result.manifest["version"] == "0.2.0"

    async def test_invalid_staged_project_leaves_nothing(self, scaffolder, tmp_path):
        with pytest.raises(ManifestConfigError) as exc_info:
            await scaffolder.create("demo", CreateOptions(directory=tmp_path))

        fields = {issue.field for issue in exc_info.value.errors}
        assert "action.default_popup" in fields
        assert exc_info.value.context == {"template": "vanilla"}
        assert not (tmp_path / "demo").exists()

    async def test_invalid_name(self, scaffolder, tmp_path):
        with pytest.raises(ProjectNameError):
            await scaffolder.create("Bad Name", CreateOptions(directory=tmp_path))
        assert list(tmp_path.iterdir()) == [tmp_path / "templates"]

    async def test_unknown_template(self, scaffolder, tmp_path):
        with pytest.raises(TemplateNotFoundError):
            await scaffolder.create("demo", CreateOptions(directory=tmp_path, template="react"))

    async def test_existing_target(self, scaffolder, tmp_path):
        (tmp_path / "demo").mkdir()
        (tmp_path / "demo" / "keep.txt").write_text("mine", encoding="utf-8")

        with pytest.raises(FileSystemError) as exc_info:
            await scaffolder.create("demo", CreateOptions(directory=tmp_path, check_files=False))

        assert "Directory already exists" in exc_info.value.message
        assert [p.name for p in (tmp_path / "demo").iterdir()] == ["keep.txt"]

    async def test_invalid_version(self, scaffolder, tmp_path):
        with pytest.raises(ManifestConfigError):
            await scaffolder.create("demo", CreateOptions(directory=tmp_path, version="1.x"))
        assert not (tmp_path / "demo").exists()

    async def test_in_memory_filesystem(self, templates_dir, make_memory_fs):
        template_fs = make_memory_fs(
            {
                "/tpl/vanilla/files/popup.html": "<h1>{{projectName}}</h1>",
                "/tpl/vanilla/files/background.js": "",
                "/tpl/vanilla/files/content.js": "",
                "/tpl/vanilla/files/icons/icon16.png": b"\x89PNG",
                "/tpl/vanilla/files/icons/icon48.png": b"\x89PNG",
                "/tpl/vanilla/files/icons/icon128.png": b"\x89PNG",
            }
        )
        registry = TemplateRegistry(templates_dir)
        template = registry.require("vanilla")
        # point the registered template at the in-memory tree
        registry._templates["vanilla"] = template.model_copy(update={"files": "/tpl/vanilla/files"})

        scaffolder = ProjectScaffolder(registry=registry, fs=template_fs)
        result = await scaffolder.create("demo", CreateOptions(directory="/out"))

        assert result.files == [
            "background.js",
            "content.js",
            "icons/icon128.png",
            "icons/icon16.png",
            "icons/icon48.png",
            MANIFEST_FILE,
            "popup.html",
        ]
        assert await template_fs.read_file("/out/demo/popup.html") == "<h1>demo</h1>"
        assert not any(path.startswith("/tmp/crxforge-") for path in template_fs.files)

    async def test_write_failure_removes_staging(self, scaffolder, tmp_path):
        staging_dirs: list[str] = []
        create_temp_dir = scaffolder.fs.create_temp_dir

        async def tracking_temp_dir() -> str:
            path = await create_temp_dir()
            staging_dirs.append(path)
            return path

        scaffolder.fs.create_temp_dir = tracking_temp_dir
        scaffolder.engine.write = AsyncMock(side_effect=FileSystemError("disk full"))

        with pytest.raises(FileSystemError, match="disk full"):
            await scaffolder.create("demo", CreateOptions(directory=tmp_path))

        assert len(staging_dirs) == 1
        assert not Path(staging_dirs[0]).exists()
        assert not (tmp_path / "demo").exists()
