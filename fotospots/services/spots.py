# fotospots/services/spots.py
"""Database access for spots: create, paginated listing, single fetch."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from fotospots.core.errors import (
    FotospotError,
    InvalidIdentifier,
    ListingError,
    NotFound,
    PersistenceError,
)
from fotospots.core.limits import DEFAULT_LIMIT, MAX_LIMIT
from fotospots.db.models.spot import Spot
from fotospots.schemas.spot import SpotCreate

log = logging.getLogger(__name__)

# Hyphenated 8-4-4-4-12 form only
_UUID_RE = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
)


def _parse_int(val: Optional[str]) -> Optional[int]:
    """Return int(val) or None if val is None/empty/invalid."""
    if val is None or val == "":
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


def resolve_limit(raw: Optional[str]) -> int:
    """Default 50; non-positive or invalid -> default; capped at 100."""
    limit = _parse_int(raw)
    if not limit or limit <= 0:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def resolve_offset(raw: Optional[str]) -> int:
    offset = _parse_int(raw)
    if offset is None or offset < 0:
        return 0
    return offset


def parse_spot_id(raw: str) -> UUID:
    """Raise InvalidIdentifier for anything but a hyphenated UUID string."""
    if not isinstance(raw, str) or not _UUID_RE.fullmatch(raw):
        raise InvalidIdentifier()
    return UUID(raw)


def create_spot(session: Session, data: SpotCreate) -> Spot:
    """
    Persist a validated submission.

    The honeypot is dropped, the cover photo derived, and the spot
    auto-approved (there is no moderation step).
    """
    spot = Spot(
        name=data.name,
        region=data.region.value,
        latitude=data.latitude,
        longitude=data.longitude,
        description=data.description,
        best_time=data.best_time.value if data.best_time else None,
        equipment=data.equipment,
        photo_tips=data.photo_tips,
        categories=[c.value for c in data.categories],
        photos=data.photo_urls(),
        cover_photo=data.resolved_cover_photo(),
        is_approved=True,
    )

    try:
        session.add(spot)
        session.commit()
        session.refresh(spot)
    except SQLAlchemyError as e:
        session.rollback()
        log.exception("Error creating spot: %s", e)
        raise PersistenceError() from e

    log.info("Spot %s created (%d photos)", spot.id, len(spot.photos))
    return spot


def list_spots(
    session: Session,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> Tuple[List[Spot], int]:
    """Approved spots, newest first, plus the total approved count."""
    try:
        total = session.exec(
            select(func.count(Spot.id)).where(Spot.is_approved == True)  # noqa: E712
        ).one()
        stmt = (
            select(Spot)
            .where(Spot.is_approved == True)  # noqa: E712
            .order_by(Spot.created_at.desc(), Spot.id)
            .offset(offset)
            .limit(limit)
        )
        spots = list(session.exec(stmt).all())
    except SQLAlchemyError as e:
        log.exception("Error fetching spots: %s", e)
        raise ListingError() from e

    return spots, total


def get_spot(session: Session, raw_id: str) -> Spot:
    """Fetch one approved spot; the id is checked before touching the DB."""
    spot_id = parse_spot_id(raw_id)

    try:
        spot = session.exec(
            select(Spot).where(
                Spot.id == spot_id,
                Spot.is_approved == True,  # noqa: E712
            )
        ).first()
    except SQLAlchemyError as e:
        log.exception("Error fetching spot %s: %s", spot_id, e)
        raise FotospotError() from e

    if spot is None:
        raise NotFound()
    return spot
