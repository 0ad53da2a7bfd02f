# =============================================================================
# core/services/image_service.py - Image Field Handling
# =============================================================================
# Resolves the value of an image field (services.photo_url, gallery.photo_url)
# from either a URL typed into the form or an uploaded file, and removes the
# stored file again when its row is deleted.
#
# The two directions fail differently:
# - upload before use is blocking: UploadError aborts the enclosing submit
# - cleanup after use is best-effort: failures are logged and swallowed
# =============================================================================

import logging
import mimetypes
import random
from dataclasses import dataclass
from typing import Literal
from urllib.parse import unquote, urlsplit

from core.errors import CleanupFailure, UploadError
from lib.backend import ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageInput:
    """
    Where an image field's value comes from.

    Example:
        ImageInput.url("https://images.example.com/facial.jpg")
        ImageInput.file(content=b"...", filename="facial.jpg")
    """

    kind: Literal["url", "file"]
    value: str | bytes
    filename: str | None = None
    content_type: str | None = None

    @classmethod
    def url(cls, value: str) -> "ImageInput":
        return cls(kind="url", value=value)

    @classmethod
    def file(
        cls,
        content: bytes,
        filename: str,
        content_type: str | None = None,
    ) -> "ImageInput":
        return cls(kind="file", value=content, filename=filename, content_type=content_type)


def file_extension(filename: str | None) -> str:
    """Lower-case extension without the dot, or "" when there is none."""
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class ImageService:
    """
    Stores uploaded images and releases them again.

    Args:
        store: Object store of the image bucket
        public_prefix: Public URL prefix every stored object starts with,
            e.g. "https://xxx.supabase.co/storage/v1/object/public/site-images/"
        allowed_extensions: Accepted extensions (".jpg", ...); None accepts any
        max_bytes: Largest accepted upload; None means unlimited
    """

    def __init__(
        self,
        store: ObjectStore,
        public_prefix: str,
        allowed_extensions: list[str] | None = None,
        max_bytes: int | None = None,
    ):
        self.store = store
        self.public_prefix = public_prefix if public_prefix.endswith("/") else public_prefix + "/"
        self.allowed_extensions = allowed_extensions
        self.max_bytes = max_bytes

    @staticmethod
    def build_storage_path(category: str, filename: str | None) -> str:
        """
        Randomized storage path that keeps the original extension.

        Example:
            build_storage_path("gallery", "bride.JPG")  # "gallery/0.7308.jpg"
        """
        ext = file_extension(filename)
        name = str(random.random())
        return f"{category}/{name}.{ext}" if ext else f"{category}/{name}"

    def _validate_file(self, image: ImageInput) -> None:
        filename = image.filename or ""
        content = image.value

        if not isinstance(content, (bytes, bytearray)) or not content:
            raise UploadError(filename, "File is empty")

        if self.allowed_extensions is not None:
            ext = "." + file_extension(filename)
            if ext not in self.allowed_extensions:
                raise UploadError(
                    filename,
                    f"Only these file types are supported: {', '.join(self.allowed_extensions)}",
                )

        if self.max_bytes is not None and len(content) > self.max_bytes:
            size_mb = len(content) / (1024 * 1024)
            max_mb = self.max_bytes / (1024 * 1024)
            raise UploadError(filename, f"File too large: {size_mb:.1f}MB (max: {max_mb:.0f}MB)")

    async def resolve_image(self, image: ImageInput, category: str) -> str:
        """
        Turn an image input into the URL stored in the row.

        URLs pass through unchanged. Files are uploaded under `category/`
        and their public URL is returned.

        Raises:
            UploadError: If the file is rejected or the storage write fails
        """
        if image.kind == "url":
            return image.value

        self._validate_file(image)
        path = self.build_storage_path(category, image.filename)
        content_type = image.content_type or mimetypes.guess_type(image.filename or "")[0]

        try:
            await self.store.upload(path, bytes(image.value), content_type)
        except Exception as e:
            logger.error(f"Image upload failed for {image.filename}: {e}")
            raise UploadError(image.filename or path, str(e))

        public_url = self.store.public_url(path)
        logger.info(f"Uploaded image {image.filename} to {path}")
        return public_url

    def storage_path_for(self, public_url: str | None) -> str | None:
        """
        Recover the storage path of a URL pointing into the image bucket.

        Returns None for URLs on any other host or bucket (demo and fallback
        images, links pasted by hand).
        """
        if not public_url:
            return None
        url = urlsplit(public_url)
        bare = f"{url.scheme}://{url.netloc}{url.path}"
        if not bare.startswith(self.public_prefix):
            return None
        path = unquote(bare[len(self.public_prefix):])
        return path or None

    async def release_image(self, public_url: str | None) -> bool:
        """
        Best-effort removal of a stored image.

        Never raises. Returns True only when an object was removed.
        """
        path = self.storage_path_for(public_url)
        if path is None:
            logger.debug(f"Not a stored image, nothing to release: {public_url}")
            return False

        try:
            await self.store.remove([path])
        except Exception as e:
            failure = CleanupFailure(path, str(e))
            logger.warning(f"{failure.message} (left orphaned): {e}")
            return False

        logger.info(f"Released stored image {path}")
        return True
