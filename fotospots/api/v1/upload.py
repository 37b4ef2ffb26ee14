# fotospots/api/v1/upload.py
"""
Photo upload route.

Multipart form:
  - file        the image (JPEG/PNG/WebP, max. 10 MB)
  - spotFolder  submission folder; generated when absent
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from fotospots.core.deps import get_identifier_service, get_storage
from fotospots.core.ids import IdentifierService
from fotospots.services.photos import store_spot_photo
from fotospots.services.storage import BlobStorage

router = APIRouter()


@router.post("/upload", status_code=201)
async def upload_photo(
    file: Optional[UploadFile] = File(None),
    spotFolder: Optional[str] = Form(None),
    storage: BlobStorage = Depends(get_storage),
    ids: IdentifierService = Depends(get_identifier_service),
):
    """Store one photo of a submission and return its public URL."""
    data = await file.read() if file is not None else None

    stored = store_spot_photo(
        storage,
        ids,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        data=data,
        spot_folder=spotFolder,
    )
    return JSONResponse({"data": stored.to_body()}, status_code=201)
