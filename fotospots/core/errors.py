# fotospots/core/errors.py
"""
Error taxonomy for the spot pipeline.

Every error carries a German, user-facing message and the HTTP status the
API answers with. The exception handlers in `fotospots.main` render them as
`{"error": message}` (plus `details` for validation failures).
"""

from __future__ import annotations

from typing import Dict, List, Optional

GENERIC_ERROR_MESSAGE = "Ein unerwarteter Fehler ist aufgetreten."


class FotospotError(Exception):
    status_code: int = 500
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        return {"error": self.message}


class ValidationFailed(FotospotError):
    """Client-correctable, field-scoped."""

    status_code = 400
    default_message = "Validierungsfehler"

    def __init__(
        self,
        field_errors: Dict[str, str],
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.field_errors = dict(field_errors)

    @property
    def details(self) -> List[Dict[str, str]]:
        return [
            {"field": field, "message": msg}
            for field, msg in self.field_errors.items()
        ]

    def to_body(self) -> dict:
        return {"error": self.message, "details": self.details}


class BadRequest(FotospotError):
    status_code = 400
    default_message = "Keine Datei hochgeladen."


class InvalidFileType(FotospotError):
    status_code = 400
    default_message = "Ungültiges Dateiformat. Erlaubt: JPG, PNG, WebP."


class FileTooLarge(FotospotError):
    status_code = 400
    default_message = "Datei zu groß. Maximum: 10 MB."


class QuotaExceeded(FotospotError):
    status_code = 400
    default_message = "Maximum 5 Fotos pro Spot erlaubt."


class InvalidIdentifier(FotospotError):
    status_code = 400
    default_message = "Ungültige Spot-ID."


class NotFound(FotospotError):
    status_code = 404
    default_message = "Fotospot nicht gefunden."


class PersistenceError(FotospotError):
    status_code = 500
    default_message = "Fehler beim Speichern des Fotospots."


class StorageWriteError(FotospotError):
    status_code = 500
    default_message = "Fehler beim Hochladen der Datei."


class ListingError(FotospotError):
    status_code = 500
    default_message = "Fehler beim Laden der Fotospots."
