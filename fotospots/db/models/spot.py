from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, String, Text
from sqlmodel import Field, SQLModel


class Region(str, Enum):
    """The five northern German regions a spot can belong to."""

    schleswig_holstein = "Schleswig-Holstein"
    hamburg = "Hamburg"
    bremen = "Bremen"
    niedersachsen = "Niedersachsen"
    mecklenburg_vorpommern = "Mecklenburg-Vorpommern"


class BestTime(str, Enum):
    morning = "morning"
    midday = "midday"
    evening = "evening"
    night = "night"


class Category(str, Enum):
    kueste = "Küste"
    wattenmeer = "Wattenmeer"
    wald = "Wald"
    see_teich = "See/Teich"
    stadtansicht = "Stadtansicht"
    leuchtturm = "Leuchtturm"
    sonnenuntergang = "Sonnenuntergang"
    sonstiges = "Sonstiges"


# Labels used by the HTML pages
BEST_TIME_LABELS = {
    BestTime.morning.value: "Morgens / Goldene Stunde",
    BestTime.midday.value: "Mittags",
    BestTime.evening.value: "Abends / Blaue Stunde",
    BestTime.night.value: "Nacht",
}


class Spot(SQLModel, table=True):
    """
    A photography location ("Fotospot").

    Notes:
    - Enum-typed values are stored as plain strings; the closed value sets
      are enforced by `fotospots.schemas.spot.SpotCreate` before insert.
    - `categories` and `photos` are JSON lists. `photos` keeps upload order,
      its first entry is the default cover photo.
    - Spots are created once and never updated; there is no moderation, so
      `is_approved` is always True at creation.
    """

    __tablename__ = "fotospots"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    name: str = Field(max_length=200)
    region: str = Field(sa_column=Column(String(40), nullable=False, index=True))

    latitude: float
    longitude: float

    description: str = Field(sa_column=Column(Text, nullable=False))

    best_time: Optional[str] = Field(default=None, max_length=20)
    equipment: Optional[str] = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )
    photo_tips: Optional[str] = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )

    categories: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    photos: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    cover_photo: Optional[str] = Field(
        default=None, sa_column=Column(Text, nullable=True)
    )

    is_approved: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        index=True,
        description="UTC timestamp when the spot was submitted.",
    )
