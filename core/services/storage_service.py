# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles avatar and wallpaper uploads to Supabase Storage.
#
# Each user has one active image per kind. Instead of remembering the old
# object key, an upload first clears the user's whole prefix:
#   list avatars/{user_id}/ -> remove all (best-effort) -> upload -> public URL
# A failed cleanup only leaves an orphaned object behind; a failed upload
# raises StorageUploadError and nothing is committed.
# =============================================================================

import logging
import time
from dataclasses import dataclass
from enum import Enum

from app.config import settings
from app.exceptions import ImageTooLargeError, InvalidImageError, StorageUploadError
from lib.supabase_client import SupabaseClient
from lib.utils import file_extension

logger = logging.getLogger(__name__)

CACHE_CONTROL_SECONDS = "3600"


class ImageKind(str, Enum):
    """Kinds of user images; the value is the top-level storage folder."""
    AVATAR = "avatars"
    WALLPAPER = "wallpapers"


@dataclass
class ImageUpload:
    """An image file received from a form."""
    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles validating, replacing and resolving user images.
    """

    @staticmethod
    def user_prefix(kind: ImageKind, user_id: str) -> str:
        """Folder holding every object of one kind for one user."""
        return f"{kind.value}/{user_id}"

    @staticmethod
    def build_object_path(kind: ImageKind, user_id: str, filename: str, now_ms: int | None = None) -> str:
        """
        Build a fresh, unique object path.

        Examples:
            avatars/42/42-1700000000000.png
            wallpapers/42/wallpaper-42-1700000000000.jpg
        """
        timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
        ext = file_extension(filename)
        if kind == ImageKind.WALLPAPER:
            name = f"wallpaper-{user_id}-{timestamp}.{ext}"
        else:
            name = f"{user_id}-{timestamp}.{ext}"
        return f"{StorageService.user_prefix(kind, user_id)}/{name}"

    @staticmethod
    def max_size_bytes(kind: ImageKind) -> int:
        if kind == ImageKind.WALLPAPER:
            return settings.max_wallpaper_size_bytes
        return settings.max_avatar_size_bytes

    @staticmethod
    def validate_image(kind: ImageKind, upload: ImageUpload) -> None:
        """
        Check type and size before touching storage.

        Raises:
            InvalidImageError: Content type is not image/*
            ImageTooLargeError: File exceeds the limit for its kind
        """
        if not (upload.content_type or "").startswith("image/"):
            raise InvalidImageError(upload.filename, upload.content_type)

        limit = StorageService.max_size_bytes(kind)
        if upload.size > limit:
            raise ImageTooLargeError(upload.size / (1024 * 1024), limit // (1024 * 1024))

    @staticmethod
    def list_files(prefix: str) -> list[dict]:
        """
        List all objects directly under a prefix.

        Returns:
            List of file info dicts (each has a "name")
        """
        try:
            response = SupabaseClient.bucket().list(prefix)
            return response or []
        except Exception as e:
            logger.error(f"Failed to list files under {prefix}: {e}")
            return []

    @staticmethod
    def delete_prefix(prefix: str) -> int:
        """
        Remove every object under a prefix.

        Best-effort: failures are logged, never raised.

        Returns:
            Number of objects removed
        """
        files = StorageService.list_files(prefix)
        if not files:
            return 0

        paths = [f"{prefix}/{f['name']}" for f in files if f.get("name")]
        try:
            SupabaseClient.bucket().remove(paths)
            logger.info(f"Deleted {len(paths)} old object(s) under {prefix}")
            return len(paths)
        except Exception as e:
            logger.error(f"Failed to delete old objects under {prefix}: {e}")
            return 0

    @staticmethod
    def get_public_url(storage_path: str) -> str:
        """
        Get a public URL for a storage file.

        Args:
            storage_path: Path in storage bucket

        Returns:
            Public URL string
        """
        try:
            return SupabaseClient.bucket().get_public_url(storage_path)
        except Exception as e:
            logger.error(f"Failed to get public URL: {e}")
            raise

    @staticmethod
    def upload_image(kind: ImageKind, user_id: str, upload: ImageUpload) -> str:
        """
        Replace a user's image of one kind.

        Args:
            kind: Avatar or wallpaper
            user_id: Owner (used in the prefix and the object name)
            upload: The new file

        Returns:
            Public URL of the uploaded object

        Raises:
            InvalidImageError / ImageTooLargeError: Validation failed
            StorageUploadError: Upload or URL resolution failed
        """
        StorageService.validate_image(kind, upload)

        StorageService.delete_prefix(StorageService.user_prefix(kind, user_id))

        path = StorageService.build_object_path(kind, user_id, upload.filename)
        try:
            response = SupabaseClient.bucket().upload(
                path=path,
                file=upload.content,
                file_options={
                    "content-type": upload.content_type,
                    "cache-control": CACHE_CONTROL_SECONDS,
                    "upsert": "true",
                }
            )
            uploaded_path = getattr(response, "path", None) or path
            url = SupabaseClient.bucket().get_public_url(uploaded_path)
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            raise StorageUploadError(str(e))

        if not url:
            raise StorageUploadError("Upload succeeded but no public URL was returned")

        logger.info(f"Uploaded {kind.value} for user {user_id}: {uploaded_path}")
        return url

    @staticmethod
    def upload_avatar(user_id: str, upload: ImageUpload) -> str:
        return StorageService.upload_image(ImageKind.AVATAR, user_id, upload)

    @staticmethod
    def upload_wallpaper(user_id: str, upload: ImageUpload) -> str:
        return StorageService.upload_image(ImageKind.WALLPAPER, user_id, upload)
