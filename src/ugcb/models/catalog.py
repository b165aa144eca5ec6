"""Brand, actor and asset records."""

import re
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_VOICE_ID_RE = re.compile(r"^[A-Za-z0-9]{1,32}$")


class Gender(str, Enum):
    """Actor gender."""
    FEMALE = "female"
    MALE = "male"
    NON_BINARY = "non-binary"
    TRANSGENDER = "transgender"
    AGENDER = "agender"
    PREFER_NOT_TO_SAY = "prefer_not_to_say"
    OTHER = "other"


class ActorType(str, Enum):
    """Whether the actor is a real person or an AI avatar."""
    HUMAN = "human"
    AI = "ai"


def _check_url(value: Optional[str]) -> Optional[str]:
    if value and not re.match(r"^https?://[^\s/]+", value):
        raise ValueError(f"Invalid URL format: {value}")
    return value


class Brand(BaseModel):
    """A brand briefs are produced for."""

    id: Optional[str] = Field(None, description="Database identifier")
    name: str = Field(..., min_length=1, description="Brand name")
    description: Optional[str] = None
    website: Optional[str] = None
    primary_contact_name: Optional[str] = None
    primary_contact_email: Optional[str] = None
    logo_asset_id: Optional[str] = None
    logo_url: Optional[str] = Field(None, description="Resolved from the logo asset")

    @field_validator("website")
    @classmethod
    def _check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)

    @field_validator("primary_contact_email")
    @classmethod
    def _check_email(cls, value: Optional[str]) -> Optional[str]:
        if value and not _EMAIL_RE.match(value):
            raise ValueError(f"Invalid email format: {value}")
        return value


class Actor(BaseModel):
    """UGC talent, human or AI."""

    id: Optional[str] = Field(None, description="Database identifier")
    name: str = Field(..., min_length=1)
    nationality: Optional[str] = None
    gender: Optional[Gender] = None
    actor_type: ActorType = Field(default=ActorType.HUMAN)
    visual_description: Optional[str] = None
    profile_image: Optional[str] = None
    elevenlabs_voice_id: Optional[str] = None

    @field_validator("profile_image")
    @classmethod
    def _check_profile_image(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)

    @field_validator("elevenlabs_voice_id")
    @classmethod
    def _check_voice_id(cls, value: Optional[str]) -> Optional[str]:
        if value and not _VOICE_ID_RE.match(value):
            raise ValueError(f"Invalid ElevenLabs voice ID: {value}")
        return value


class Asset(BaseModel):
    """An uploaded or generated file in blob storage."""

    id: Optional[str] = None
    filename: str
    url: str = Field(..., description="Public blob URL")
    mime_type: str
    file_size_bytes: int = Field(..., ge=0)
    uploaded_at: Optional[datetime] = None
