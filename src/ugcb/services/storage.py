"""Google Cloud Storage blob store."""

import logging
import mimetypes
import uuid
from pathlib import Path
from typing import Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import storage

from ..config import config
from ..errors import InputValidationError, StorageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")
MAX_IMAGE_BYTES = 5 * 1024 * 1024


class BlobStore:
    """Public blob storage for headshots, logos and scene images."""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        project_id: Optional[str] = None,
        client: Optional[storage.Client] = None,
    ) -> None:
        """Initialize the blob store.

        Args:
            bucket_name: GCS bucket name. Defaults to UGCB_BLOB_BUCKET env var.
            project_id: Google Cloud project ID. Defaults to GOOGLE_CLOUD_PROJECT.
            client: Preconfigured storage client, mainly for tests.
        """
        self._bucket_name = bucket_name or config.blob_bucket
        if not self._bucket_name:
            raise ValueError("UGCB_BLOB_BUCKET not set")

        self._client = client or storage.Client(
            project=project_id or config.google_cloud_project or None
        )
        self._bucket = self._client.bucket(self._bucket_name)
        logger.info(f"Initialized blob store for bucket {self._bucket_name}")

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def put(
        self,
        data: bytes,
        content_type: str,
        prefix: str = "uploads",
        filename: Optional[str] = None,
    ) -> str:
        """Upload bytes and return their public URL.

        Raises:
            StorageError: If the upload fails.
        """
        if not filename:
            extension = mimetypes.guess_extension(content_type) or ""
            filename = f"file{extension}"
        blob_name = f"{prefix}/{uuid.uuid4()}-{filename}"

        try:
            blob = self._bucket.blob(blob_name)
            blob.upload_from_string(data, content_type=content_type)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(f"Blob upload failed for {blob_name}: {e}")
            raise StorageError(f"Failed to upload {filename}: {e}") from e

        logger.info(f"Uploaded {len(data)} bytes to {blob_name}")
        return blob.public_url

    def upload_image(self, path: Path, prefix: str = "uploads") -> tuple[str, str, int]:
        """Validate and upload a local image file.

        Returns:
            Tuple of (public URL, MIME type, size in bytes).

        Raises:
            InputValidationError: If the file is missing, not an allowed image
                type, or larger than 5MB.
        """
        if not path.is_file():
            raise InputValidationError(f"File not found: {path}")

        content_type, _ = mimetypes.guess_type(path.name)
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise InputValidationError(
                "Invalid file type. Only JPG, PNG, GIF, WEBP allowed."
            )

        size = path.stat().st_size
        if size > MAX_IMAGE_BYTES:
            raise InputValidationError(
                f"File size exceeds {MAX_IMAGE_BYTES // (1024 * 1024)}MB limit."
            )

        url = self.put(path.read_bytes(), content_type, prefix=prefix, filename=path.name)
        return url, content_type, size
