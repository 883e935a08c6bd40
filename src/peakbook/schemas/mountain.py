"""Pydantic schemas for mountain API endpoints."""

from pydantic import AliasChoices, Field, field_validator

from peakbook.schemas.common import APIModel


class MountainCreate(APIModel):
    """Text fields of the multipart mountain upload form."""

    name: str = Field(min_length=1, max_length=200, description="Mountain name")
    height: int = Field(gt=0, description="Height in meters")
    country: str = Field(min_length=1, max_length=100, description="Country")
    needs_equipment: bool = Field(description="Whether technical equipment is required")
    description: str = Field(default="", max_length=5000, description="Free-text description")

    @field_validator("name", "country", "description", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        """Trim surrounding whitespace before length checks."""
        if isinstance(v, str):
            return v.strip()
        return v


class ImagesAdded(APIModel):
    """Response after appending images to a mountain."""

    new_image_paths: list[str] = Field(description="Paths of the images just added")
    total_images: int = Field(description="Number of images the mountain now has")


class DeletePicture(APIModel):
    """Request body for removing one image from a mountain."""

    image_path: str = Field(
        min_length=1,
        validation_alias=AliasChoices("imageUrl", "imagePath"),
        description="Stored path of the image to delete",
    )
