# fotospots/core/deps.py
"""
Common FastAPI dependencies:

- DB session (`get_session`)
- Identifier service (`get_identifier_service`)
- Blob storage (`get_storage`)
- Jinja2 templates helper (`templates`)
"""

from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates

from fotospots.core.ids import get_identifier_service
from fotospots.db.session import get_session
from fotospots.services.storage import get_storage

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

__all__ = ["get_identifier_service", "get_session", "get_storage", "templates"]
