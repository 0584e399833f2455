"""
Blob store for uploaded event images on the local filesystem
"""
import logging
import os
import uuid
from pathlib import Path
from typing import Union

from ..config.uploads import UPLOAD_URL_PREFIX
from ..errors import BlobStoreError

logger = logging.getLogger(__name__)


class BlobStore:
    """Local filesystem directory addressed by URL paths like /uploads/<name>"""

    def __init__(self, directory: Union[str, Path], url_prefix: str = UPLOAD_URL_PREFIX):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip('/')
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, data: bytes, filename: str) -> str:
        """
        Write an image under a generated, collision-resistant name

        Args:
            data: File content
            filename: Original filename; only its extension is kept

        Returns:
            URL path of the stored file (e.g. /uploads/3f2a...9c.png)

        Raises:
            BlobStoreError: If the file cannot be written
        """
        file_ext = os.path.splitext(filename)[1].lower()
        unique_filename = f"{uuid.uuid4().hex}{file_ext}"
        local_path = self.directory / unique_filename

        try:
            # 'xb' refuses to overwrite an existing file
            with open(local_path, 'xb') as f:
                f.write(data)
        except OSError as e:
            raise BlobStoreError(f"Failed to store image: {e}") from e

        logger.info(f"Stored image {unique_filename} ({len(data)} bytes)")
        return f"{self.url_prefix}/{unique_filename}"

    def path_for(self, image_path: str) -> Path:
        """
        Map a stored URL path back to its file on disk

        Only the final path component is used, so a crafted path cannot
        point outside the upload directory.
        """
        name = os.path.basename(image_path.rstrip('/'))
        if not name or name in ('.', '..'):
            raise BlobStoreError(f"Invalid image path: {image_path!r}")
        return self.directory / name

    def exists(self, image_path: str) -> bool:
        if not image_path:
            return False
        return self.path_for(image_path).is_file()

    def delete(self, image_path: str) -> bool:
        """
        Delete a stored image

        Args:
            image_path: URL path as returned by save()

        Returns:
            True if a file was deleted, False if there was nothing to delete

        Raises:
            BlobStoreError: If the file exists but cannot be removed
        """
        if not image_path:
            return False
        local_path = self.path_for(image_path)
        try:
            local_path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BlobStoreError(f"Failed to delete image: {e}") from e

        logger.info(f"Deleted image {local_path.name}")
        return True

    def list_files(self) -> list:
        """URL paths of every file currently in the store"""
        return sorted(
            f"{self.url_prefix}/{path.name}"
            for path in self.directory.iterdir()
            if path.is_file()
        )
