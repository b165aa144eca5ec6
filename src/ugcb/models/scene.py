"""Scene data model."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from ..config import config

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/600x400?text=Scene+{number}+Visual"


def placeholder_image_url(scene_number: int) -> str:
    """Return the placeholder visual URL for a scene index."""
    return PLACEHOLDER_IMAGE_URL.format(number=scene_number)


class Visual(BaseModel):
    """Visual intent for a scene."""

    description: Optional[str] = Field(None, description="What the viewer sees")
    image_url: str = Field(
        default="",
        alias="imageUrl",
        description="Placeholder or generated asset URL",
    )

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    @property
    def has_asset(self) -> bool:
        """True once the image URL points at a real asset."""
        return bool(self.image_url) and not self.image_url.startswith(
            "https://via.placeholder.com/"
        )


class Scene(BaseModel):
    """One ordered unit of a brief."""

    scene_number: int = Field(..., alias="sceneNumber", gt=0)
    scene_title: str = Field(default="", alias="sceneTitle")
    script: str = Field(default="", description="Spoken or action copy")
    tone: Optional[list[str]] = Field(None, description="Tags from the tone vocabulary")
    time_seconds: Optional[float] = Field(None, alias="timeSeconds", gt=0)
    visual: Visual = Field(default_factory=Visual)

    class Config:
        """Pydantic config."""
        frozen = False
        populate_by_name = True

    @field_validator("tone")
    @classmethod
    def _check_tone(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return value
        unknown = [tone for tone in value if tone not in config.tone_vocabulary]
        if unknown:
            raise ValueError(
                f"Unknown tone(s) {', '.join(unknown)}; "
                f"expected one of: {', '.join(config.tone_vocabulary)}"
            )
        return value

    @model_validator(mode="after")
    def _fill_placeholder(self) -> "Scene":
        if not self.visual.image_url:
            self.visual.image_url = placeholder_image_url(self.scene_number)
        return self

    def renumber(self, scene_number: int) -> None:
        """Move the scene to a new position, keeping placeholders in step."""
        if not self.visual.has_asset:
            self.visual.image_url = placeholder_image_url(scene_number)
        self.scene_number = scene_number
