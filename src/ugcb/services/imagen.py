"""Imagen on Vertex AI, called over REST."""

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

import google.auth
import google.auth.transport.requests
import requests
from google.auth.exceptions import GoogleAuthError

from ..config import config

logger = logging.getLogger(__name__)

PORTRAIT_ASPECT_RATIO = "9:16"
PREDICT_URL = (
    "https://{location}-aiplatform.googleapis.com/v1/projects/{project}"
    "/locations/{location}/publishers/google/models/{model}:predict"
)
REQUEST_TIMEOUT = 120


@dataclass
class ImageResult:
    """One generated image, or the reason there is none."""

    prompt: str
    image_data: Optional[bytes] = None
    mime_type: str = "image/png"
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    metadata: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error_message is None and bool(self.image_data)


class ImagenClient:
    """Generates scene stills with an Imagen model.

    Failures are reported on the returned ImageResult rather than raised, so a
    caller illustrating several scenes can decide per scene what to do.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: str = "us-central1",
        model: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.project_id = project_id or config.google_cloud_project
        if not self.project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")
        self.location = location
        self.model = model or config.imagen_model
        self._http = session or requests

    def _access_token(self) -> str:
        credentials, _ = google.auth.default(
            scopes=["https://www.googleapis.com/auth/cloud-platform"]
        )
        credentials.refresh(google.auth.transport.requests.Request())
        return credentials.token

    def _payload(self, prompt: str, aspect_ratio: str, negative_prompt: Optional[str]) -> dict[str, Any]:
        parameters: dict[str, Any] = {"sampleCount": 1, "aspectRatio": aspect_ratio}
        if negative_prompt:
            parameters["negativePrompt"] = negative_prompt
        return {"instances": [{"prompt": prompt}], "parameters": parameters}

    def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = PORTRAIT_ASPECT_RATIO,
        negative_prompt: Optional[str] = None,
    ) -> ImageResult:
        """Generate a single image.

        Args:
            prompt: What the image should show.
            aspect_ratio: One of Imagen's ratios; portrait by default.
            negative_prompt: What to keep out of the image.
        """
        result = ImageResult(prompt=prompt, metadata={"aspect_ratio": aspect_ratio, "model": self.model})
        url = PREDICT_URL.format(location=self.location, project=self.project_id, model=self.model)

        logger.info(f"Requesting {aspect_ratio} image from {self.model}")
        try:
            response = self._http.post(
                url,
                json=self._payload(prompt, aspect_ratio, negative_prompt),
                headers={"Authorization": f"Bearer {self._access_token()}"},
                timeout=REQUEST_TIMEOUT,
            )
        except (GoogleAuthError, requests.RequestException) as e:
            logger.error(f"Imagen request failed: {e}")
            result.error_message = str(e)
            return result

        if response.status_code != 200:
            result.error_message = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"Imagen returned {result.error_message}")
            return result

        prediction = next(iter(response.json().get("predictions") or []), {})
        encoded = prediction.get("bytesBase64Encoded")
        if not encoded:
            result.error_message = "Imagen returned no image (possibly filtered)"
            logger.warning(result.error_message)
            return result

        result.image_data = base64.b64decode(encoded)
        result.mime_type = prediction.get("mimeType", result.mime_type)
        logger.debug(f"Imagen image: {len(result.image_data)} bytes, {result.mime_type}")
        return result
