# fotospots/schemas/spot.py
"""
Shared validation schema for spot submissions.

Used both by the submission form (`fotospots.client.form`) before anything
is sent and by `POST /api/spots`, which never trusts the client and runs the
exact same rules again. Keep this the only place the constraints live.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from fotospots.core.limits import MAX_PHOTOS_PER_SPOT
from fotospots.db.models.spot import BestTime, Category, Region

# Per-field messages. Key None is the field's fallback message.
_FIELD_MESSAGES: Dict[str, Dict[Optional[str], str]] = {
    "name": {
        "string_too_long": "Name darf max. 200 Zeichen lang sein",
        None: "Name ist erforderlich",
    },
    "region": {
        "missing": "Bitte eine Region auswählen",
        None: "Ungültige Region",
    },
    "latitude": {
        "missing": "Breitengrad ist erforderlich",
        None: "Breitengrad muss zwischen -90 und 90 liegen",
    },
    "longitude": {
        "missing": "Längengrad ist erforderlich",
        None: "Längengrad muss zwischen -180 und 180 liegen",
    },
    "description": {
        "string_too_long": "Beschreibung darf max. 2000 Zeichen lang sein",
        None: "Beschreibung ist erforderlich",
    },
    "best_time": {None: "Ungültige Tageszeit"},
    "equipment": {None: "Ausrüstung darf max. 500 Zeichen lang sein"},
    "photo_tips": {None: "Foto-Tipps dürfen max. 1000 Zeichen lang sein"},
    "categories": {None: "Ungültige Kategorie"},
    "photos": {
        "too_long": f"Max. {MAX_PHOTOS_PER_SPOT} Fotos erlaubt",
        None: "Ungültige Foto-URL",
    },
    "cover_photo": {
        "cover_not_in_photos": "Titelbild muss eines der Fotos sein",
        None: "Ungültige Titelbild-URL",
    },
    "website": {None: "Ungültiger Wert"},
}

BODY_FIELD = "body"
BODY_MESSAGE = "Ungültige Anfrage"

_http_url = TypeAdapter(AnyHttpUrl)


def _check_http_url(value: str) -> str:
    """Accept only http(s) URLs, but keep the string exactly as submitted."""
    try:
        _http_url.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "Input should be a valid URL") from None
    return value


HttpUrlStr = Annotated[str, AfterValidator(_check_http_url)]


class SpotCreate(BaseModel):
    """A spot submission as accepted by the API."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1, max_length=200)
    region: Region
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    description: str = Field(min_length=1, max_length=2000)

    best_time: Optional[BestTime] = None
    equipment: Optional[str] = Field(default=None, max_length=500)
    photo_tips: Optional[str] = Field(default=None, max_length=1000)

    categories: List[Category] = Field(default_factory=list)
    photos: List[HttpUrlStr] = Field(
        default_factory=list, max_length=MAX_PHOTOS_PER_SPOT
    )
    cover_photo: Optional[HttpUrlStr] = None

    # Honeypot: invisible to humans, bots tend to fill it in.
    website: str = ""

    @field_validator(
        "best_time", "equipment", "photo_tips", "cover_photo", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("categories", "photos", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("website", mode="before")
    @classmethod
    def _website_none(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("categories")
    @classmethod
    def _unique_categories(cls, value: List[Category]) -> List[Category]:
        # A category is either selected or not; duplicates carry no meaning.
        return list(dict.fromkeys(value))

    @field_validator("cover_photo")
    @classmethod
    def _cover_among_photos(
        cls, value: Optional[str], info: ValidationInfo
    ) -> Optional[str]:
        photos = info.data.get("photos")
        # photos failed validation on its own; nothing to compare against
        if value is None or photos is None:
            return value
        if value not in photos:
            raise PydanticCustomError(
                "cover_not_in_photos", "Cover photo must be one of the photos"
            )
        return value

    @property
    def is_spam(self) -> bool:
        return bool(self.website)

    def photo_urls(self) -> List[str]:
        return list(self.photos)

    def resolved_cover_photo(self) -> Optional[str]:
        """Explicit cover photo, else the first photo, else None."""
        if self.cover_photo is not None:
            return self.cover_photo
        urls = self.photo_urls()
        return urls[0] if urls else None


@dataclass
class ValidationResult:
    ok: bool
    value: Optional[SpotCreate] = None
    field_errors: Dict[str, str] = field(default_factory=dict)


def _message_for(field_name: str, error_type: str, fallback: str) -> str:
    messages = _FIELD_MESSAGES.get(field_name)
    if not messages:
        return fallback
    return messages.get(error_type) or messages.get(None) or fallback


def field_errors_from(exc: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic ValidationError to {dotted path: message}, one per path."""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        if not loc:
            errors.setdefault(BODY_FIELD, BODY_MESSAGE)
            continue
        path = ".".join(str(part) for part in loc)
        errors.setdefault(
            path, _message_for(str(loc[0]), err.get("type", ""), err.get("msg", ""))
        )
    return errors


def validate_spot(candidate: Any) -> ValidationResult:
    """
    Validate a candidate submission. Never raises for bad input.

    A filled-in honeypot is not a validation error: the result is ok and
    `value.is_spam` is True, so the caller can absorb it silently.
    """
    try:
        value = SpotCreate.model_validate(candidate)
    except ValidationError as exc:
        return ValidationResult(ok=False, field_errors=field_errors_from(exc))
    return ValidationResult(ok=True, value=value)
