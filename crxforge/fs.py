"""Filesystem capability used by the validator, template engine and scaffolder.

``FileSystem`` is the protocol the rest of the package depends on, so tests
can substitute an in-memory fake.  ``FileSystemUtils`` is the real
implementation: every method is async (blocking calls run in a worker thread
via ``asyncio.to_thread``), normalises its paths first and raises
:class:`~crxforge.errors.FileSystemError` on failure.
"""

from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
from pathlib import Path
from typing import Protocol, Union, runtime_checkable

from crxforge.errors import FileSystemError

PathLike = Union[str, Path]

TEMP_DIR_PREFIX = "crxforge-"


@runtime_checkable
class FileSystem(Protocol):
    """Async filesystem operations consumed by crxforge."""

    async def ensure_dir(self, path: PathLike) -> None: ...

    async def copy_dir(self, src: PathLike, dest: PathLike) -> None: ...

    async def write_file(self, path: PathLike, content: str | bytes) -> None: ...

    async def read_file(self, path: PathLike) -> str: ...

    async def read_bytes(self, path: PathLike) -> bytes: ...

    async def exists(self, path: PathLike) -> bool: ...

    async def is_directory(self, path: PathLike) -> bool: ...

    async def list_directory(self, path: PathLike) -> list[str]: ...

    async def remove(self, path: PathLike) -> None: ...

    async def create_temp_dir(self) -> str: ...

    async def move_atomic(self, src: PathLike, dest: PathLike) -> None: ...


def normalize(path: PathLike) -> str:
    """Collapse ``.``/``..`` segments and duplicate separators."""
    return os.path.normpath(os.fspath(path))


class FileSystemUtils:
    """Real filesystem implementation of :class:`FileSystem`."""

    async def ensure_dir(self, path: PathLike) -> None:
        """Create *path* and any missing parents."""
        target = normalize(path)
        try:
            await asyncio.to_thread(os.makedirs, target, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to ensure directory exists: {path}",
                {"path": str(path), "error": str(exc)},
            ) from exc

    async def copy_dir(self, src: PathLike, dest: PathLike) -> None:
        """Copy a directory tree; the destination must not exist yet."""
        source, target = normalize(src), normalize(dest)
        if not await self.exists(source):
            raise FileSystemError(f"Source directory does not exist: {src}", {"src": str(src)})
        try:
            # copytree refuses an existing destination by default
            await asyncio.to_thread(shutil.copytree, source, target)
        except (OSError, shutil.Error) as exc:
            raise FileSystemError(
                f"Failed to copy directory: {src} -> {dest}",
                {"src": str(src), "dest": str(dest), "error": str(exc)},
            ) from exc

    async def write_file(self, path: PathLike, content: str | bytes) -> None:
        """Write text (UTF-8) or bytes, creating parent directories."""
        target = normalize(path)
        await self.ensure_dir(os.path.dirname(target) or ".")
        try:
            await asyncio.to_thread(_write, target, content)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to write file: {path}", {"path": str(path), "error": str(exc)}
            ) from exc

    async def read_file(self, path: PathLike) -> str:
        """Read a UTF-8 text file."""
        data = await self.read_bytes(path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FileSystemError(
                f"Failed to read file: {path}", {"path": str(path), "error": str(exc)}
            ) from exc

    async def read_bytes(self, path: PathLike) -> bytes:
        """Read a file's raw bytes."""
        target = normalize(path)
        if not await self.exists(target):
            raise FileSystemError(f"File does not exist: {path}", {"path": str(path)})
        try:
            return await asyncio.to_thread(Path(target).read_bytes)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to read file: {path}", {"path": str(path), "error": str(exc)}
            ) from exc

    async def exists(self, path: PathLike) -> bool:
        return await asyncio.to_thread(os.path.exists, normalize(path))

    async def is_directory(self, path: PathLike) -> bool:
        return await asyncio.to_thread(os.path.isdir, normalize(path))

    async def list_directory(self, path: PathLike) -> list[str]:
        """Return entry names of a directory, in listing order."""
        target = normalize(path)
        try:
            return await asyncio.to_thread(os.listdir, target)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to list directory: {path}", {"path": str(path), "error": str(exc)}
            ) from exc

    async def remove(self, path: PathLike) -> None:
        """Remove a file or directory tree; missing paths are ignored."""
        target = normalize(path)
        try:
            await asyncio.to_thread(_remove, target)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to remove: {path}", {"path": str(path), "error": str(exc)}
            ) from exc

    async def create_temp_dir(self) -> str:
        """Create a fresh, uniquely named temporary directory."""
        try:
            created = await asyncio.to_thread(tempfile.mkdtemp, prefix=TEMP_DIR_PREFIX)
        except OSError as exc:
            raise FileSystemError(
                "Failed to create temporary directory", {"error": str(exc)}
            ) from exc
        return normalize(created)

    async def move_atomic(self, src: PathLike, dest: PathLike) -> None:
        """Move *src* to *dest* with a rename, copying across devices.

        Fails if the source is missing or the destination already exists.
        """
        source, target = normalize(src), normalize(dest)
        if not await self.exists(source):
            raise FileSystemError(f"Source does not exist: {src}", {"src": str(src)})
        if await self.exists(target):
            raise FileSystemError(f"Destination already exists: {dest}", {"dest": str(dest)})

        await self.ensure_dir(os.path.dirname(target) or ".")
        try:
            try:
                await asyncio.to_thread(os.rename, source, target)
            except OSError:
                # EXDEV and friends: fall back to copy + delete
                await asyncio.to_thread(_copy_any, source, target)
                await asyncio.to_thread(_remove, source)
        except OSError as exc:
            raise FileSystemError(
                f"Failed to move atomically: {src} -> {dest}",
                {"src": str(src), "dest": str(dest), "error": str(exc)},
            ) from exc


# ---------------------------------------------------------------------------
# Internal helpers (run inside worker threads)
# ---------------------------------------------------------------------------


def _write(path: str, content: str | bytes) -> None:
    if isinstance(content, bytes):
        Path(path).write_bytes(content)
    else:
        Path(path).write_text(content, encoding="utf-8")


def _remove(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.remove(path)


def _copy_any(src: str, dest: str) -> None:
    if os.path.isdir(src):
        shutil.copytree(src, dest)
    else:
        shutil.copy2(src, dest)
