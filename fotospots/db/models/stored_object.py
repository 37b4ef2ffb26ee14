from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, LargeBinary, UniqueConstraint
from sqlmodel import Field, SQLModel

# fotospots/db/models/stored_object.py


class StoredObject(SQLModel, table=True):
    """
    One object in the blob store (an uploaded spot photo).

    - `path` is `{folder}/{filename}` and unique per bucket; objects are
      written once and never overwritten.
    - `folder` is the submission folder, indexed for the per-folder quota.
    - Binary data is stored in the DB and served by the public storage route.
    """

    __tablename__ = "storage_objects"
    __table_args__ = (
        UniqueConstraint("bucket", "path", name="uq_storage_objects_bucket_path"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    bucket: str = Field(index=True, max_length=63)
    folder: str = Field(index=True, max_length=255)
    path: str = Field(max_length=512)

    content_type: str = Field(max_length=100)
    size_bytes: int = 0
    data: bytes = Field(sa_column=Column(LargeBinary, nullable=False))

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
    )
