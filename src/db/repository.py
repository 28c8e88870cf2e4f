"""Protocol repository (durable storage lives outside the engine, and only needs to implement these four methods)"""

from typing import Protocol
from uuid import UUID

from src.core.models import MatchModel


class MatchRepository(Protocol):
    """
    Where match records live between service calls.

    The service holds the match's lock around every call, so an implementation never sees two calls for one match at once.
    Records are stored as given: consistency is checked when the service rebuilds a Match from them.
    """

    def get_match(self, match_id: UUID) -> MatchModel | None:
        """The stored record, or None for an id that was never created (or was deleted)."""
        ...

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        """Store a freshly created match under a new id. Returns the stored record and that id."""
        ...

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        """Replace the record after an accepted action. Returns None, and stores nothing, for an unknown id."""
        ...

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        """Drop the record. Returns what was stored, or None if there was nothing to drop."""
        ...
