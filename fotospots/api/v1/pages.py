"""
Frontend page routes for Fotospots Norddeutschland.
Renders templates: spot overview, spot detail, not-found page.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlmodel import Session

from fotospots.core.deps import get_session, templates
from fotospots.core.errors import InvalidIdentifier, NotFound
from fotospots.db.models.spot import BEST_TIME_LABELS
from fotospots.services.spots import get_spot, list_spots

router = APIRouter()


# ------------------------------ Overview ------------------------------
@router.get("/", response_class=HTMLResponse)
def index_page(request: Request, session: Session = Depends(get_session)):
    """Newest approved spots as cards."""
    spots, total = list_spots(session)
    return templates.TemplateResponse(
        request,
        "index.html",
        {"spots": spots, "total": total},
    )


# ------------------------------ Detail ------------------------------
@router.get("/spots/{spot_id}", response_class=HTMLResponse)
def spot_page(
    request: Request,
    spot_id: str,
    session: Session = Depends(get_session),
):
    """Spot detail with photo gallery; unknown or malformed ids get the 404 page."""
    try:
        spot = get_spot(session, spot_id)
    except (InvalidIdentifier, NotFound):
        return templates.TemplateResponse(
            request,
            "404.html",
            {"path": request.url.path},
            status_code=404,
        )

    return templates.TemplateResponse(
        request,
        "spot_detail.html",
        {
            "spot": spot,
            "best_time_label": BEST_TIME_LABELS.get(spot.best_time or ""),
        },
    )
