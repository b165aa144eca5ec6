"""Scene illustration: Imagen visual, uploaded to blob storage."""

import logging
from typing import Optional

from ..errors import ImageGenerationError, InputValidationError
from ..models import Brief
from ..services.imagen import ImagenClient, PORTRAIT_ASPECT_RATIO
from ..services.storage import BlobStore

logger = logging.getLogger(__name__)


def build_image_prompt(brief: Brief, scene_number: int) -> str:
    """Compose an image prompt for one scene of a brief."""
    scene = brief.scene(scene_number)
    if scene is None:
        raise InputValidationError(f"Brief has no scene {scene_number}")

    subject = scene.visual.description or scene.script
    if not subject.strip():
        raise InputValidationError(
            f"Scene {scene_number} has no visual description or script to illustrate"
        )

    parts = [
        "Vertical smartphone photo for a UGC video ad, authentic and natural lighting.",
        f"Scene: {subject.strip()}",
    ]
    if scene.scene_title:
        parts.append(f"Moment: {scene.scene_title}")
    if brief.title:
        parts.append(f"Campaign: {brief.title}")
    parts.append("No text, captions or logos in the image.")
    return "\n".join(parts)


class SceneImager:
    """Generate portrait visuals for brief scenes."""

    def __init__(
        self,
        imagen: Optional[ImagenClient] = None,
        store: Optional[BlobStore] = None,
    ) -> None:
        self._imagen = imagen or ImagenClient()
        self._store = store or BlobStore()

    def illustrate(self, brief: Brief, scene_number: int) -> str:
        """Generate and upload an image for a scene and attach its URL.

        The brief is updated in place.

        Returns:
            Public URL of the uploaded image.

        Raises:
            InputValidationError: If the scene does not exist or has nothing to draw.
            ImageGenerationError: If Imagen returns no image.
            StorageError: If the upload fails.
        """
        prompt = build_image_prompt(brief, scene_number)
        logger.info(f"Illustrating scene {scene_number} of '{brief.title}'")

        result = self._imagen.generate_image(prompt, aspect_ratio=PORTRAIT_ASPECT_RATIO)
        if not result.ok:
            raise ImageGenerationError(
                f"Image generation failed: {result.error_message or 'no image returned'}"
            )

        url = self._store.put(
            result.image_data,
            result.mime_type,
            prefix="scenes",
            filename=f"scene-{scene_number}.png",
        )
        brief.scene(scene_number).visual.image_url = url
        return url
