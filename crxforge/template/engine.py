"""Template rendering for project scaffolding.

Templates are plain files with two kinds of tokens:

* ``{{name}}`` is replaced by the context value, or left untouched when the
  name is not in the context.
* ``{{#if name}} ... {{/if}}`` keeps its body when the context value is
  truthy and drops the whole block otherwise.  Blocks do not nest: the first
  ``{{/if}}`` closes the block.

Both file contents and file paths are rendered, so ``{{projectName}}.txt``
becomes ``my-extension.txt``.
"""

from __future__ import annotations

import os
import posixpath
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal, Optional, Union

from crxforge.fs import FileSystem, FileSystemUtils

TemplateContext = dict[str, Optional[str]]

_CONDITIONAL_RE = re.compile(r"\{\{#if\s+(\w+)\}\}([\s\S]*?)\{\{/if\}\}", re.ASCII)
_VARIABLE_RE = re.compile(r"\{\{(\w+)\}\}", re.ASCII)


@dataclass
class TemplateFile:
    """A rendered file, relative to the project root."""

    path: str
    content: Union[str, bytes]
    encoding: Literal["utf-8", "binary"] = "utf-8"


def make_context(
    project_name: str,
    version: str,
    description: str,
    author: Optional[str] = None,
    **extra: Optional[str],
) -> TemplateContext:
    """Build a context with the standard keys plus any *extra* ones."""
    context: TemplateContext = {
        "projectName": project_name,
        "version": version,
        "description": description,
        "author": author,
    }
    context.update(extra)
    return context


class TemplateEngine:
    """Renders template files and directory trees.

    Args:
        fs: Filesystem used to walk and read template directories.
    """

    def __init__(self, fs: FileSystem | None = None) -> None:
        self.fs: FileSystem = fs or FileSystemUtils()

    # -- String rendering --------------------------------------------------

    def render_file(self, content: str, context: Mapping[str, Optional[str]]) -> str:
        """Apply conditionals, then variables, to a single string."""
        result = self._process_conditionals(content, context)
        return self._process_variables(result, context)

    # -- Tree rendering (async) --------------------------------------------

    async def render(
        self, template_path: str | os.PathLike[str], context: Mapping[str, Optional[str]]
    ) -> list[TemplateFile]:
        """Render every file under *template_path*.

        Walks depth-first in sorted order.  Directories are not emitted.
        Files that are not UTF-8 text are passed through as binary with only
        their path rendered.
        """
        files: list[TemplateFile] = []
        await self._render_directory(os.fspath(template_path), "", context, files)
        return files

    async def write(
        self, files: Iterable[TemplateFile], output_dir: str | os.PathLike[str]
    ) -> list[str]:
        """Write rendered files below *output_dir*; returns the written paths."""
        written: list[str] = []
        for file in files:
            target = os.path.join(os.fspath(output_dir), *file.path.split("/"))
            await self.fs.write_file(target, file.content)
            written.append(target)
        return written

    async def _render_directory(
        self,
        directory: str,
        relative: str,
        context: Mapping[str, Optional[str]],
        files: list[TemplateFile],
    ) -> None:
        for entry in sorted(await self.fs.list_directory(directory)):
            full_path = os.path.join(directory, entry)
            rel_path = posixpath.join(relative, entry) if relative else entry

            if await self.fs.is_directory(full_path):
                await self._render_directory(full_path, rel_path, context, files)
                continue

            raw = await self.fs.read_bytes(full_path)
            rendered_path = self.render_file(rel_path, context)
            try:
                text = raw.decode("utf-8")
            except UnicodeDecodeError:
                files.append(TemplateFile(path=rendered_path, content=raw, encoding="binary"))
                continue
            files.append(TemplateFile(path=rendered_path, content=self.render_file(text, context)))

    # -- Token passes ------------------------------------------------------

    @staticmethod
    def _process_conditionals(content: str, context: Mapping[str, Optional[str]]) -> str:
        def replace(match: re.Match[str]) -> str:
            return match.group(2) if context.get(match.group(1)) else ""

        return _CONDITIONAL_RE.sub(replace, content)

    @staticmethod
    def _process_variables(content: str, context: Mapping[str, Optional[str]]) -> str:
        def replace(match: re.Match[str]) -> str:
            value = context.get(match.group(1))
            # unknown names stay visible so missing context is easy to spot
            return match.group(0) if value is None else str(value)

        return _VARIABLE_RE.sub(replace, content)
