# fotospots/client/api.py
"""
Async HTTP client for the Fotospots API (httpx).

Used by the submission form and the photo uploader; pass an
`httpx.ASGITransport` to talk to an in-process app.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from fotospots.client.models import LocalFile, SpotApiError, UploadResult

log = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Der Server ist nicht erreichbar."
DEFAULT_ERROR_MESSAGE = "Ein unerwarteter Fehler ist aufgetreten."
INVALID_RESPONSE_MESSAGE = "Ungültige Antwort vom Server."


def _has_data(body: Any, required: Tuple[str, ...]) -> bool:
    if not isinstance(body, dict) or "data" not in body:
        return False
    data = body["data"]
    return not required or (
        isinstance(data, dict) and all(key in data for key in required)
    )


class SpotApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=timeout
        )

    async def __aenter__(self) -> "SpotApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Spots
    # ------------------------------------------------------------------
    async def list_spots(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> Dict[str, Any]:
        params = {}
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        return await self._request("GET", "/api/spots", params=params)

    async def get_spot(self, spot_id: str) -> Dict[str, Any]:
        body = await self._request("GET", f"/api/spots/{spot_id}")
        return body["data"]

    async def create_spot(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._request("POST", "/api/spots", json=payload)
        return body["data"]

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------
    async def upload(self, file: LocalFile, spot_folder: str) -> UploadResult:
        """Upload one photo into `spot_folder`."""
        body = await self._request(
            "POST",
            "/api/upload",
            files={"file": (file.name, file.data, file.content_type)},
            data={"spotFolder": spot_folder},
            required=("url", "path", "spotFolder"),
        )
        data = body["data"]
        return UploadResult(
            url=data["url"], path=data["path"], spot_folder=data["spotFolder"]
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _request(
        self,
        method: str,
        url: str,
        *,
        required: Tuple[str, ...] = (),
        **kwargs,
    ) -> Dict[str, Any]:
        """
        Send one request and return the JSON body.

        Raises SpotApiError for transport failures, error statuses and success
        answers without a usable `data` member (`required` keys included).
        """
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, url, e)
            raise SpotApiError(0, NETWORK_ERROR_MESSAGE) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            body = body if isinstance(body, dict) else {}
            raise SpotApiError(
                response.status_code,
                body.get("error") or DEFAULT_ERROR_MESSAGE,
                body.get("details"),
            )

        if not _has_data(body, required):
            log.warning("%s %s: unusable %s response", method, url, response.status_code)
            raise SpotApiError(response.status_code, INVALID_RESPONSE_MESSAGE)
        return body
