# fotospots/client/uploader.py
"""
Photo upload orchestration for one submission.

Keeps two collections:
  - `photos`     committed uploads, in commit order (first = cover candidate)
  - `uploading`  files in flight or failed, keyed by an ephemeral id

Committed + uploading never exceeds MAX_PHOTOS_PER_SPOT. All state changes
happen on the event loop and are keyed by the ephemeral id, so concurrent
completions can finish in any order.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol

from fotospots.client.models import (
    DropResult,
    LocalFile,
    SpotApiError,
    UploadedPhoto,
    UploadResult,
)
from fotospots.core.ids import IdentifierService
from fotospots.core.limits import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE_BYTES,
    MAX_PHOTOS_PER_SPOT,
)

log = logging.getLogger(__name__)

UPLOAD_FAILED_MESSAGE = "Upload fehlgeschlagen"
UPLOAD_TIMEOUT_MESSAGE = "Zeitüberschreitung beim Hochladen."

PROGRESS_STARTED = 30
PROGRESS_DONE = 100


def _discard_late_result(task: asyncio.Future[UploadResult]) -> None:
    """Done-callback for uploads that outlived their timeout."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        log.info("Late upload failed after timeout: %s", error)
    else:
        log.info("Late upload finished after timeout: %s", task.result().path)


class Uploader(Protocol):
    async def upload(self, file: LocalFile, spot_folder: str) -> UploadResult: ...


class LocalPreview:
    """Handle to a local preview of a file; must be released once unused."""

    def __init__(self, handle: str, file: LocalFile) -> None:
        self.handle = handle
        self._file: Optional[LocalFile] = file

    @property
    def released(self) -> bool:
        return self._file is None

    def release(self) -> None:
        self._file = None


def default_preview_factory(file: LocalFile, item_id: str) -> LocalPreview:
    return LocalPreview(f"preview:{item_id}", file)


@dataclass
class UploadingFile:
    id: str
    file: LocalFile
    preview: LocalPreview
    progress: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class PhotoUploader:
    def __init__(
        self,
        uploader: Uploader,
        spot_folder: str,
        *,
        ids: Optional[IdentifierService] = None,
        preview_factory: Callable[[LocalFile, str], LocalPreview] = default_preview_factory,
        upload_timeout: Optional[float] = None,
        max_files: int = MAX_PHOTOS_PER_SPOT,
    ) -> None:
        self.uploader = uploader
        self.spot_folder = spot_folder
        self.ids = ids or IdentifierService()
        self.preview_factory = preview_factory
        self.upload_timeout = upload_timeout
        self.max_files = max_files

        self.photos: List[UploadedPhoto] = []
        self.uploading: List[UploadingFile] = []

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def remaining_slots(self) -> int:
        return max(0, self.max_files - len(self.photos) - len(self.uploading))

    @property
    def is_full(self) -> bool:
        return len(self.photos) >= self.max_files

    @property
    def in_flight(self) -> List[UploadingFile]:
        return [item for item in self.uploading if not item.failed]

    @staticmethod
    def accepts(file: LocalFile) -> bool:
        return file.content_type in ALLOWED_MIME_TYPES and file.size <= MAX_FILE_SIZE_BYTES

    def photo_urls(self) -> List[str]:
        return [photo.url for photo in self.photos]

    def cover_photo(self) -> Optional[str]:
        return self.photos[0].url if self.photos else None

    def get(self, item_id: str) -> Optional[UploadingFile]:
        for item in self.uploading:
            if item.id == item_id:
                return item
        return None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    async def add_files(self, files: Iterable[LocalFile]) -> DropResult:
        """
        Queue a batch of files and upload the accepted ones concurrently.

        Wrong type / too large files are counted as rejected. Valid files
        beyond the remaining slots are dropped without an error.
        """
        files = list(files)
        valid = [f for f in files if self.accepts(f)]
        accepted = valid[: self.remaining_slots]

        items = []
        for file in accepted:
            item_id = self.ids.new_id()
            items.append(
                UploadingFile(
                    id=item_id, file=file, preview=self.preview_factory(file, item_id)
                )
            )
        self.uploading.extend(items)

        result = DropResult(
            accepted=len(items),
            rejected=len(files) - len(valid),
            truncated=len(valid) - len(accepted),
            item_ids=[item.id for item in items],
        )

        await asyncio.gather(*(self._run(item.id) for item in items))
        return result

    async def retry(self, item_id: str) -> None:
        """Re-issue the upload of a failed item. Nothing is retried automatically."""
        item = self.get(item_id)
        if item is None or not item.failed:
            return
        item.error = None
        await self._run(item_id)

    def remove_photo(self, index: int) -> UploadedPhoto:
        return self.photos.pop(index)

    def remove_uploading(self, item_id: str) -> None:
        """
        Forget an in-flight or failed item and release its preview.

        A transfer still running is not aborted; its result is just not
        committed.
        """
        item = self.get(item_id)
        if item is None:
            return
        self.uploading.remove(item)
        item.preview.release()

    def reset(self, spot_folder: Optional[str] = None) -> None:
        for item in self.uploading:
            item.preview.release()
        self.uploading = []
        self.photos = []
        if spot_folder is not None:
            self.spot_folder = spot_folder

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _run(self, item_id: str) -> None:
        item = self.get(item_id)
        if item is None:
            return
        self._advance(item, PROGRESS_STARTED)

        try:
            upload = asyncio.ensure_future(
                self.uploader.upload(item.file, self.spot_folder)
            )
            if self.upload_timeout is not None:
                # The transfer keeps running after a timeout; only the wait ends.
                result = await asyncio.wait_for(
                    asyncio.shield(upload), self.upload_timeout
                )
            else:
                result = await upload
        except asyncio.TimeoutError:
            upload.add_done_callback(_discard_late_result)
            self._fail(item_id, UPLOAD_TIMEOUT_MESSAGE)
            return
        except SpotApiError as e:
            self._fail(item_id, e.message or UPLOAD_FAILED_MESSAGE)
            return
        except Exception as e:
            log.exception("Unexpected error uploading %s: %s", item.file.name, e)
            self._fail(item_id, UPLOAD_FAILED_MESSAGE)
            return

        self._commit(item_id, result)

    def _advance(self, item: UploadingFile, progress: int) -> None:
        item.progress = max(item.progress, progress)

    def _fail(self, item_id: str, message: str) -> None:
        item = self.get(item_id)
        if item is None:
            return
        log.info("Upload of %s failed: %s", item.file.name, message)
        item.error = message

    def _commit(self, item_id: str, result: UploadResult) -> None:
        item = self.get(item_id)
        if item is None:
            # Removed while in flight
            log.debug("Dropping result of removed upload %s", result.path)
            return

        self._advance(item, PROGRESS_DONE)
        self.uploading.remove(item)
        item.preview.release()
        self.photos.append(UploadedPhoto(url=result.url, storage_path=result.path))
