"""Image upload pipeline.

An uploaded file is first *staged*: written under ``uploads/tmp`` with a random
name once its media type and size have been checked. It is then either
*committed*, renamed to its permanent path once the owning record's id is
known, or *discarded*. ``UploadPipeline.session()`` guarantees that nothing
stays staged when the request finishes, and rolls back files committed in the
same session when the request fails.
"""

import asyncio
import logging
import mimetypes
import os
import uuid
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from fastapi import UploadFile

from peakbook.services.errors import ValidationError

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "uploads"
STAGING_FOLDER = "tmp"
CHUNK_SIZE = 64 * 1024


class UploadState(StrEnum):
    """Lifecycle of an uploaded file."""

    STAGED = "staged"
    COMMITTED = "committed"
    DISCARDED = "discarded"


@dataclass
class StagedFile:
    """An uploaded file written to disk but not necessarily linked to a record."""

    path: Path
    extension: str
    content_type: str
    size: int
    state: UploadState = UploadState.STAGED
    relative_path: str | None = None


def _extension(filename: str | None, content_type: str) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower()
    if suffix and len(suffix) <= 10 and suffix[1:].isalnum():
        return suffix
    return mimetypes.guess_extension(content_type) or ""


def _copy_limited(source: BinaryIO, dest: Path, max_bytes: int) -> int:
    size = 0
    source.seek(0)
    try:
        with dest.open("xb") as out:
            while chunk := source.read(CHUNK_SIZE):
                size += len(chunk)
                if size > max_bytes:
                    raise ValidationError(
                        f"File exceeds the maximum size of {max_bytes / (1024 * 1024):g}MB."
                    )
                out.write(chunk)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    return size


class UploadBatch:
    """Files handled within one request."""

    def __init__(self, pipeline: "UploadPipeline") -> None:
        self.pipeline = pipeline
        self.files: list[StagedFile] = []

    async def stage(self, upload: UploadFile, max_bytes: int) -> StagedFile:
        """Validate ``upload`` and write it to the staging area.

        Raises:
            ValidationError: If the file is not an image or is too large.
        """
        content_type = upload.content_type or ""
        if not content_type.startswith("image/"):
            raise ValidationError(f"File {upload.filename or ''!r} is not an image.")

        staging_dir = self.pipeline.uploads_dir / STAGING_FOLDER
        await asyncio.to_thread(staging_dir.mkdir, parents=True, exist_ok=True)

        extension = _extension(upload.filename, content_type)
        dest = staging_dir / f"{uuid.uuid4().hex}{extension}"
        size = await asyncio.to_thread(_copy_limited, upload.file, dest, max_bytes)

        staged = StagedFile(path=dest, extension=extension, content_type=content_type, size=size)
        self.files.append(staged)
        logger.debug("Staged upload %s (%d bytes)", dest.name, size)
        return staged

    def commit(self, staged: StagedFile, folder: str, stem: str) -> str:
        """Move a staged file to ``uploads/<folder>/<stem><ext>`` and return that path."""
        if staged.state is not UploadState.STAGED:
            raise ValueError(f"Cannot commit a {staged.state} upload")
        relative_path = f"{UPLOADS_PREFIX}/{folder}/{stem}{staged.extension}"
        target = self.pipeline.resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        os.replace(staged.path, target)
        staged.path = target
        staged.relative_path = relative_path
        staged.state = UploadState.COMMITTED
        logger.info("Committed upload %s", relative_path)
        return relative_path

    def discard_staged(self) -> None:
        for staged in self.files:
            if staged.state is UploadState.STAGED:
                self.pipeline.remove(staged.path)
                staged.state = UploadState.DISCARDED

    def rollback(self) -> None:
        """Delete every file this batch wrote, committed ones included."""
        for staged in self.files:
            if staged.state is not UploadState.DISCARDED:
                self.pipeline.remove(staged.path)
                staged.state = UploadState.DISCARDED


class UploadPipeline:
    """Stages, commits and purges image files under ``<media_root>/uploads``."""

    def __init__(self, media_root: Path | str) -> None:
        self.media_root = Path(media_root)
        self.uploads_dir = self.media_root / UPLOADS_PREFIX

    @asynccontextmanager
    async def session(self) -> AsyncIterator[UploadBatch]:
        """Scope for the uploads of one request.

        On any exit no file is left staged. On error, files committed during the
        session are deleted too.
        """
        batch = UploadBatch(self)
        try:
            yield batch
        except BaseException:
            if batch.files:
                logger.info("Rolling back %d uploaded file(s)", len(batch.files))
            batch.rollback()
            raise
        finally:
            batch.discard_staged()

    def resolve(self, relative_path: str) -> Path:
        """Map a stored relative path to an absolute path inside the uploads tree."""
        parts = PurePosixPath(relative_path).parts
        if not parts or parts[0] != UPLOADS_PREFIX or ".." in parts:
            raise ValidationError(f"Invalid upload path {relative_path!r}.")
        return self.media_root.joinpath(*parts)

    def exists(self, relative_path: str) -> bool:
        return self.resolve(relative_path).exists()

    def remove(self, path: Path) -> None:
        """Delete a file, logging rather than raising on failure."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Error deleting file %s: %s", path, e)

    async def purge(self, relative_paths: Iterable[str]) -> None:
        """Delete stored files by relative path; failures are logged."""
        for relative_path in relative_paths:
            try:
                path = self.resolve(relative_path)
            except ValidationError:
                logger.warning("Skipping purge of invalid path %r", relative_path)
                continue
            await asyncio.to_thread(self.remove, path)
