# fotospots/services/storage.py
"""
Blob storage accessor backed by the `storage_objects` table.

Objects are addressed by `{folder}/{filename}` inside a bucket and are
served publicly by `GET /storage/{bucket}/{path}`.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from fotospots.core.config import get_settings
from fotospots.core.errors import StorageWriteError
from fotospots.db.models.stored_object import StoredObject
from fotospots.db.session import get_session

log = logging.getLogger(__name__)


class BlobStorage:
    def __init__(self, session: Session, bucket: str, public_base_url: str) -> None:
        self.session = session
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")

    def count(self, folder: str) -> int:
        stmt = select(func.count(StoredObject.id)).where(
            StoredObject.bucket == self.bucket, StoredObject.folder == folder
        )
        return self.session.exec(stmt).one()

    def upload(self, path: str, data: bytes, content_type: str) -> StoredObject:
        """
        Write one object. Never overwrites: an existing path is a write error.

        Raises StorageWriteError on any backend failure.
        """
        folder = path.rsplit("/", 1)[0] if "/" in path else ""

        try:
            if self.download(path) is not None:
                raise StorageWriteError()

            obj = StoredObject(
                bucket=self.bucket,
                folder=folder,
                path=path,
                content_type=content_type,
                size_bytes=len(data),
                data=data,
            )
            self.session.add(obj)
            self.session.commit()
            self.session.refresh(obj)
        except StorageWriteError:
            log.error("Refusing to overwrite existing object %s/%s", self.bucket, path)
            raise
        except SQLAlchemyError as e:
            self.session.rollback()
            log.exception("Storage write failed for %s/%s: %s", self.bucket, path, e)
            raise StorageWriteError() from e

        return obj

    def download(self, path: str) -> Optional[StoredObject]:
        stmt = select(StoredObject).where(
            StoredObject.bucket == self.bucket, StoredObject.path == path
        )
        return self.session.exec(stmt).first()

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/storage/{self.bucket}/{path}"


def get_storage(session: Session = Depends(get_session)) -> BlobStorage:
    """FastAPI dependency: storage bound to the request's DB session."""
    settings = get_settings()
    return BlobStorage(
        session,
        bucket=settings.STORAGE_BUCKET,
        public_base_url=settings.PUBLIC_BASE_URL,
    )
