"""Tests for the image upload pipeline."""

import io

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from peakbook.services.errors import ValidationError
from peakbook.services.uploads import UploadPipeline, UploadState
from tests.conftest import PNG_BYTES


def upload(filename: str = "peak.png", content: bytes = PNG_BYTES, content_type: str = "image/png"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def pipeline(tmp_path) -> UploadPipeline:
    return UploadPipeline(tmp_path)


def staging_contents(pipeline: UploadPipeline) -> list:
    return list((pipeline.uploads_dir / "tmp").glob("*"))


async def test_commit_moves_file_to_permanent_path(pipeline: UploadPipeline) -> None:
    async with pipeline.session() as batch:
        staged = await batch.stage(upload("Summit.PNG"), max_bytes=1024)
        assert staged.state is UploadState.STAGED
        assert staged.path.parent.name == "tmp"
        path = batch.commit(staged, "mountains", "4_1")

    assert path == "uploads/mountains/4_1.png"
    assert staged.state is UploadState.COMMITTED
    assert pipeline.resolve(path).read_bytes() == PNG_BYTES
    assert staging_contents(pipeline) == []


async def test_uncommitted_files_discarded_on_success(pipeline: UploadPipeline) -> None:
    async with pipeline.session() as batch:
        staged = await batch.stage(upload(), max_bytes=1024)

    assert staged.state is UploadState.DISCARDED
    assert staging_contents(pipeline) == []


async def test_error_rolls_back_committed_and_staged(pipeline: UploadPipeline) -> None:
    with pytest.raises(RuntimeError):
        async with pipeline.session() as batch:
            committed = await batch.stage(upload("a.png"), max_bytes=1024)
            path = batch.commit(committed, "mountains", "1_1")
            await batch.stage(upload("b.png"), max_bytes=1024)
            raise RuntimeError("persist failed")

    assert not pipeline.exists(path)
    assert staging_contents(pipeline) == []
    assert all(f.state is UploadState.DISCARDED for f in batch.files)


async def test_rejects_non_image(pipeline: UploadPipeline) -> None:
    async with pipeline.session() as batch:
        with pytest.raises(ValidationError):
            await batch.stage(upload("notes.txt", b"hi", "text/plain"), max_bytes=1024)

    assert batch.files == []


async def test_rejects_oversized_file(pipeline: UploadPipeline) -> None:
    with pytest.raises(ValidationError):
        async with pipeline.session() as batch:
            await batch.stage(upload(content=b"x" * 2048), max_bytes=1024)

    assert staging_contents(pipeline) == []


async def test_extension_from_content_type_when_filename_has_none(
    pipeline: UploadPipeline,
) -> None:
    async with pipeline.session() as batch:
        staged = await batch.stage(upload("blob", content_type="image/png"), max_bytes=1024)
        path = batch.commit(staged, "pfp", "alice-1")

    assert path == "uploads/pfp/alice-1.png"


def test_resolve_rejects_paths_outside_uploads(pipeline: UploadPipeline) -> None:
    with pytest.raises(ValidationError):
        pipeline.resolve("uploads/../secret.json")
    with pytest.raises(ValidationError):
        pipeline.resolve("data/users.json")


async def test_purge_ignores_missing_and_invalid(pipeline: UploadPipeline) -> None:
    async with pipeline.session() as batch:
        staged = await batch.stage(upload(), max_bytes=1024)
        path = batch.commit(staged, "mountains", "1_1")

    await pipeline.purge([path, "uploads/mountains/none.png", "../etc/passwd"])

    assert not pipeline.exists(path)
