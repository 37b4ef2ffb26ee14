# fotospots/services/photos.py
"""
Photo upload handling for one submission folder.

Checks, in order:
  1. a file is present            -> BadRequest
  2. allowed media type           -> InvalidFileType
  3. size <= 10 MiB               -> FileTooLarge
  4. folder holds < 5 objects     -> QuotaExceeded

The quota check and the write are not one transaction: concurrent uploads
into the same folder may overrun the quota by the number of racing requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import Optional

from fotospots.core.errors import (
    BadRequest,
    FileTooLarge,
    InvalidFileType,
    QuotaExceeded,
)
from fotospots.core.ids import IdentifierService
from fotospots.core.limits import (
    ALLOWED_MIME_TYPES,
    DEFAULT_EXTENSION,
    MAX_FILE_SIZE_BYTES,
    MAX_PHOTOS_PER_SPOT,
)
from fotospots.services.storage import BlobStorage

log = logging.getLogger(__name__)


@dataclass
class StoredPhoto:
    url: str
    path: str
    spot_folder: str

    def to_body(self) -> dict:
        return {"url": self.url, "path": self.path, "spotFolder": self.spot_folder}


def file_extension(filename: Optional[str]) -> str:
    """Lower-cased extension of `filename` without the dot, `jpg` if absent."""
    suffix = PurePath(filename or "").suffix
    return suffix[1:].lower() if len(suffix) > 1 else DEFAULT_EXTENSION


def store_spot_photo(
    storage: BlobStorage,
    ids: IdentifierService,
    *,
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    spot_folder: Optional[str] = None,
) -> StoredPhoto:
    """Validate and store one photo; returns its public URL and storage path."""
    folder = (spot_folder or "").strip() or ids.new_id()

    if data is None:
        raise BadRequest()

    if content_type not in ALLOWED_MIME_TYPES:
        raise InvalidFileType()

    if len(data) > MAX_FILE_SIZE_BYTES:
        raise FileTooLarge(
            f"Datei zu groß. Maximum: {MAX_FILE_SIZE_BYTES // 1024 // 1024} MB."
        )

    existing = storage.count(folder)
    if existing >= MAX_PHOTOS_PER_SPOT:
        log.info("Upload quota reached for folder %s (%s objects)", folder, existing)
        raise QuotaExceeded(f"Maximum {MAX_PHOTOS_PER_SPOT} Fotos pro Spot erlaubt.")

    path = f"{folder}/{ids.new_id()}.{file_extension(filename)}"
    storage.upload(path, data, content_type)
    log.info("Stored photo %s (%d bytes)", path, len(data))

    return StoredPhoto(url=storage.public_url(path), path=path, spot_folder=folder)
