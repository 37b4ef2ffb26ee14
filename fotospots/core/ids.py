from __future__ import annotations

from typing import Iterator, Optional
from uuid import uuid4


class IdentifierService:
    """
    Single source of random identifiers.

    Used for submission folders, stored file names and the ephemeral ids of
    in-flight uploads. Pass a different instance (or `SequentialIds`) where
    deterministic ids are needed.
    """

    def new_id(self) -> str:
        return str(uuid4())


class SequentialIds(IdentifierService):
    """Predictable ids: `<prefix>-1`, `<prefix>-2`, ..."""

    def __init__(self, prefix: str = "id") -> None:
        self.prefix = prefix
        self._counter: Iterator[int] = iter(range(1, 1_000_000_000))

    def new_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


_default: Optional[IdentifierService] = None


def get_identifier_service() -> IdentifierService:
    """FastAPI dependency returning the process-wide identifier service."""
    global _default
    if _default is None:
        _default = IdentifierService()
    return _default
