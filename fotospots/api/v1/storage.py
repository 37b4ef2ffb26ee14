from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from fotospots.core.deps import get_storage
from fotospots.core.errors import NotFound
from fotospots.services.storage import BlobStorage

router = APIRouter()


# ---------------------------------------------------------------------
# GET: public photo URL
# ---------------------------------------------------------------------
@router.get("/storage/{bucket}/{path:path}")
def get_stored_object(
    bucket: str,
    path: str,
    storage: BlobStorage = Depends(get_storage),
):
    """Serve a stored photo. Objects are public; there is no access control."""
    obj = storage.download(path) if bucket == storage.bucket else None
    if obj is None:
        raise NotFound("Datei nicht gefunden.")

    return Response(content=obj.data, media_type=obj.content_type)
