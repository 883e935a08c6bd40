"""Helpers for multipart form handling."""

from collections.abc import Sequence
from typing import Any

from fastapi import UploadFile
from pydantic import ValidationError as PydanticValidationError


def validation_message(exc: PydanticValidationError | Sequence[Any]) -> str:
    """Flatten pydantic errors into one readable line."""
    errors = exc.errors() if isinstance(exc, PydanticValidationError) else exc
    parts = []
    for error in errors:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        location = ".".join(loc)
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def submitted_files(files: list[UploadFile] | None) -> list[UploadFile]:
    """Drop empty file parts that browsers send for untouched inputs."""
    return [f for f in files or [] if f.filename]
