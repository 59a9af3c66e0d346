"""
Filesystem storage for uploaded car images.

Each user gets a directory named after their numeric id under the upload
root. Files are named ``<epoch millis>-<original name>``.
"""

import logging
import os
import shutil
import time
from dataclasses import dataclass
from typing import BinaryIO, Optional
from urllib.parse import quote

from carlens.core.errors import NoFileProvidedError

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class StoredFile:
    filename: str
    path: str
    url: str

class UploadStorage:
    def __init__(self, root: str, url_prefix: str = "/cars"):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip("/")

    def owner_dir(self, owner_id: int) -> str:
        return os.path.join(self.root, str(owner_id))

    def path_for(self, owner_id: int, filename: str) -> str:
        return os.path.join(self.owner_dir(owner_id), os.path.basename(filename))

    def url_for(self, owner_id: int, filename: str) -> str:
        return f"{self.url_prefix}/{owner_id}/{quote(filename)}"

    def store(self, owner_id: int, stream: Optional[BinaryIO], original_name: Optional[str]) -> StoredFile:
        """Write an uploaded file into the owner's directory and return where it landed."""
        # Browsers may send a full client path
        name = os.path.basename((original_name or "").replace("\\", "/"))
        if stream is None or not name:
            raise NoFileProvidedError()

        directory = self.owner_dir(owner_id)
        # Two first uploads from the same user may race here
        os.makedirs(directory, exist_ok=True)

        millis = int(time.time() * 1000)
        while True:
            filename = f"{millis}-{name}"
            path = os.path.join(directory, filename)
            try:
                out = open(path, "xb")
            except FileExistsError:
                # Same name within the same millisecond
                millis += 1
                continue
            break

        try:
            with out:
                shutil.copyfileobj(stream, out)
        except Exception:
            # No partial files in the owner directory
            self.remove(owner_id, filename)
            raise

        logger.info(f"Stored upload for user {owner_id} at {path}")
        return StoredFile(filename=filename, path=path, url=self.url_for(owner_id, filename))

    def remove(self, owner_id: int, filename: str) -> bool:
        """Best-effort delete; failures are logged and reported as False."""
        path = self.path_for(owner_id, filename)
        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Failed to delete image file {path}: {e}")
            return False
        return True
