"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_TONES = (
    "Relaterende",
    "Spørgende",
    "Forstående",
    "Ægte",
    "Informativ",
    "Positiv",
    "Praktisk",
    "Inspirerende",
    "Opmuntrende",
    "Oprigtig",
)


def _tones_from_env() -> list[str]:
    raw = os.getenv("UGCB_TONES", "")
    tones = [tone.strip() for tone in raw.split(",") if tone.strip()]
    return tones or list(DEFAULT_TONES)


class Config(BaseModel):
    """Application configuration."""

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key (brief generation)"
    )
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="OpenAI API key (assistant threads)"
    )
    assistant_id: str = Field(
        default_factory=lambda: os.getenv("UGCB_ASSISTANT_ID", ""),
        description="OpenAI assistant used for brief editing"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID"
    )
    blob_bucket: str = Field(
        default_factory=lambda: os.getenv("UGCB_BLOB_BUCKET", ""),
        description="GCS bucket for uploaded and generated images"
    )

    # Paths
    database: Path = Field(
        default_factory=lambda: Path(os.getenv("UGCB_DATABASE", "ugcb.db")),
        description="SQLite database file"
    )

    # Model settings
    default_model: str = Field(
        default_factory=lambda: os.getenv("UGCB_MODEL", "claude-sonnet-4-20250514"),
        description="Default Claude model"
    )
    imagen_model: str = Field(
        default="imagen-3.0-generate-001",
        description="Imagen model for scene visuals"
    )

    # Brief pipeline
    tone_vocabulary: list[str] = Field(
        default_factory=_tones_from_env,
        description="Controlled vocabulary for scene tone tags"
    )
    user_agent: str = Field(default="UGC-Builder-Bot/1.0")
    fetch_timeout: float = Field(default=15.0, gt=0)
    max_text_length: int = Field(default=15000, gt=0)
    min_text_length: int = Field(default=50, ge=0)
    run_timeout: float = Field(default=60.0, gt=0)
    poll_interval: float = Field(default=1.0, gt=0)

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that required credentials are set."""
        if not self.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")

    def validate_chat_required(self) -> None:
        """Validate that the assistant credentials are set.

        Raises:
            ValueError: If any required assistant configuration is missing.
        """
        missing: list[str] = []

        if not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        if not self.assistant_id:
            missing.append("UGCB_ASSISTANT_ID")

        if missing:
            raise ValueError(
                f"Missing required assistant configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

    def validate_imagery_required(self) -> None:
        """Validate that Imagen and blob storage settings are set."""
        missing: list[str] = []

        if not self.google_cloud_project:
            missing.append("GOOGLE_CLOUD_PROJECT")
        if not self.blob_bucket:
            missing.append("UGCB_BLOB_BUCKET")

        if missing:
            raise ValueError(
                f"Missing required image configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables."
            )

        if self.blob_bucket.startswith("gs://"):
            raise ValueError(
                f"UGCB_BLOB_BUCKET must be a bare bucket name, not a URI. "
                f"Got: {self.blob_bucket}"
            )


# Global config instance
config = Config()
