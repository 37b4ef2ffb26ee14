# fotospots/client/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class LocalFile:
    """A file picked or dropped by the user, not uploaded yet."""

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class UploadResult:
    url: str
    path: str
    spot_folder: str


@dataclass
class UploadedPhoto:
    """A committed photo of the current submission."""

    url: str
    storage_path: str


class SpotApiError(Exception):
    """
    Non-2xx answer (or transport failure, status 0) from the Fotospots API.

    `message` is the server's user-facing `error` text; `details` carries the
    per-field list of validation failures when present.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        details: Optional[List[Dict[str, str]]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or []

    @property
    def field_errors(self) -> Dict[str, str]:
        return {d.get("field", ""): d.get("message", "") for d in self.details}


@dataclass
class DropResult:
    """Outcome of handing a batch of files to the uploader."""

    accepted: int = 0
    rejected: int = 0  # wrong type or too large
    truncated: int = 0  # valid, but over the photo limit
    item_ids: List[str] = field(default_factory=list)

    @property
    def rejection_message(self) -> Optional[str]:
        if not self.rejected:
            return None
        head = (
            "Eine Datei wurde abgelehnt."
            if self.rejected == 1
            else f"{self.rejected} Dateien wurden abgelehnt."
        )
        return f"{head} Erlaubt: JPG, PNG, WebP (max. 10 MB)."
