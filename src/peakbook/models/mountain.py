"""Mountain record model."""

from datetime import UTC, datetime

from pydantic import Field

from peakbook.models.base import StoredRecord


class Mountain(StoredRecord):
    """Mountain entry stored in mountains.json."""

    id: int
    name: str
    height: int
    country: str
    needs_equipment: bool
    description: str = ""
    images: list[str] = Field(default_factory=list)
    uploaded_by: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
