"""
JSON routes for spots.

- GET  /api/spots        paginated listing of approved spots
- POST /api/spots        anonymous submission (validated, honeypot-filtered)
- GET  /api/spots/{id}   single approved spot
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session

from fotospots.core.deps import get_session
from fotospots.core.errors import ValidationFailed
from fotospots.db.models.spot import Spot
from fotospots.schemas.spot import BODY_FIELD, BODY_MESSAGE, validate_spot
from fotospots.services.spots import (
    create_spot,
    get_spot,
    list_spots,
    resolve_limit,
    resolve_offset,
)

log = logging.getLogger(__name__)

router = APIRouter()

# Returned instead of a real id when the honeypot was filled in
SPAM_SENTINEL_ID = "ignored"


def spot_to_json(spot: Spot) -> dict:
    return spot.model_dump(mode="json")


@router.get("/spots")
def list_spots_endpoint(
    # Raw strings so "abc" or "" fall back to defaults instead of a 422
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    session: Session = Depends(get_session),
):
    """Approved spots, newest first. `limit` defaults to 50 and is capped at 100."""
    spots, total = list_spots(
        session, limit=resolve_limit(limit), offset=resolve_offset(offset)
    )
    return {"data": [spot_to_json(s) for s in spots], "total": total}


@router.post("/spots", status_code=201)
async def create_spot_endpoint(
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Create a spot from a JSON body. No authentication (anonymous submissions).

    Behaviour:
    - Body is re-validated with the shared schema -> 400 with per-field details.
    - Filled-in honeypot -> fake 201 with id "ignored", nothing stored.
    - Otherwise the spot is stored auto-approved and returned with 201.
    """
    try:
        body = await request.json()
    except ValueError:
        raise ValidationFailed({BODY_FIELD: BODY_MESSAGE})

    result = validate_spot(body)
    if not result.ok:
        raise ValidationFailed(result.field_errors)

    data = result.value
    if data.is_spam:
        # Answer like a success so the filter is not revealed.
        log.warning("Honeypot triggered, submission %r discarded", data.name)
        return JSONResponse({"data": {"id": SPAM_SENTINEL_ID}}, status_code=201)

    spot = create_spot(session, data)
    return JSONResponse({"data": spot_to_json(spot)}, status_code=201)


@router.get("/spots/{spot_id}")
def get_spot_endpoint(spot_id: str, session: Session = Depends(get_session)):
    """Single approved spot; malformed ids are rejected before the DB lookup."""
    return {"data": spot_to_json(get_spot(session, spot_id))}
