"""Base class for stored records."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoredRecord(BaseModel):
    """Record persisted as one JSON object in a RecordStore file.

    Fields are snake_case in Python and camelCase on disk.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_record(self) -> dict[str, Any]:
        """Serialize for storage."""
        return self.model_dump(mode="json", by_alias=True)
