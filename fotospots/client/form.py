# fotospots/client/form.py
"""
Submission form controller.

States:
    editing ──submit()──> submitting ──ok──> success ──start_over()──> editing
                              └──error──> editing (submit_error set, data kept)

Validation runs the shared schema (`fotospots.schemas.spot`) before any
network call; on failure the form stays in `editing` with `field_errors`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Set

from fotospots.client.models import SpotApiError
from fotospots.client.uploader import PhotoUploader, Uploader
from fotospots.core.ids import IdentifierService
from fotospots.db.models.spot import Category
from fotospots.schemas.spot import SpotCreate, validate_spot

log = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE = "Einreichung fehlgeschlagen"

FIELD_NAMES = (
    "name",
    "region",
    "latitude",
    "longitude",
    "description",
    "best_time",
    "equipment",
    "photo_tips",
    "website",  # honeypot
)


class FormState(str, Enum):
    editing = "editing"
    submitting = "submitting"
    success = "success"


class SpotBackend(Uploader, Protocol):
    async def create_spot(self, payload: Dict[str, Any]) -> Dict[str, Any]: ...


class SubmissionForm:
    def __init__(
        self,
        backend: SpotBackend,
        *,
        ids: Optional[IdentifierService] = None,
        upload_timeout: Optional[float] = None,
    ) -> None:
        self.backend = backend
        self.ids = ids or IdentifierService()

        self.spot_folder = self.ids.new_id()
        self.photos = PhotoUploader(
            backend,
            self.spot_folder,
            ids=self.ids,
            upload_timeout=upload_timeout,
        )

        self.state = FormState.editing
        self.submit_error: Optional[str] = None
        self.created: Optional[Dict[str, Any]] = None
        self._clear_inputs()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def _clear_inputs(self) -> None:
        self.values: Dict[str, Any] = {name: "" for name in FIELD_NAMES}
        self.categories: Set[Category] = set()
        self.field_errors: Dict[str, str] = {}

    def set_field(self, name: str, value: Any) -> None:
        if name not in FIELD_NAMES:
            raise KeyError(name)
        self.values[name] = value
        self.field_errors.pop(name, None)

    def toggle_category(self, category: str) -> None:
        cat = Category(category)
        if cat in self.categories:
            self.categories.remove(cat)
        else:
            self.categories.add(cat)

    def candidate(self) -> Dict[str, Any]:
        """Raw form input as a schema candidate; blank inputs count as not given."""
        data = {
            name: value
            for name, value in self.values.items()
            if name != "website" and value not in ("", None)
        }
        data["website"] = self.values["website"] or ""
        data["categories"] = [c.value for c in self.categories]
        data["photos"] = self.photos.photo_urls()
        return data

    def validate(self) -> Optional[SpotCreate]:
        result = validate_spot(self.candidate())
        self.field_errors = result.field_errors
        return result.value

    def build_payload(self, value: SpotCreate) -> Dict[str, Any]:
        payload = value.model_dump(
            mode="json",
            exclude={"categories", "photos", "cover_photo", "website"},
        )
        # Category order carries no meaning; send them in declaration order.
        payload["categories"] = [c.value for c in Category if c in self.categories]
        payload["photos"] = self.photos.photo_urls()
        payload["cover_photo"] = self.photos.cover_photo()
        payload["website"] = self.values["website"] or ""
        return payload

    # ------------------------------------------------------------------
    # Submitting
    # ------------------------------------------------------------------
    async def submit(self) -> bool:
        """
        Validate and send the submission. Returns True on success.

        Ignored unless the form is in `editing` (no double submit).
        """
        if self.state is not FormState.editing:
            return False

        value = self.validate()
        if value is None:
            return False

        self.state = FormState.submitting
        self.submit_error = None
        try:
            self.created = await self.backend.create_spot(self.build_payload(value))
        except SpotApiError as e:
            log.info("Submission failed (%s): %s", e.status_code, e.message)
            self.submit_error = e.message or SUBMIT_FAILED_MESSAGE
            self.state = FormState.editing
            return False
        except Exception as e:
            log.exception("Submission failed unexpectedly: %s", e)
            self.submit_error = SUBMIT_FAILED_MESSAGE
            self.state = FormState.editing
            return False

        self._clear_inputs()
        self.photos.reset()
        self.state = FormState.success
        return True

    def start_over(self) -> None:
        """From `success` back to a fresh form with a new submission folder."""
        if self.state is not FormState.success:
            return
        self.spot_folder = self.ids.new_id()
        self.photos.reset(spot_folder=self.spot_folder)
        self._clear_inputs()
        self.submit_error = None
        self.created = None
        self.state = FormState.editing
