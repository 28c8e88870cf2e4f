"""
MatchRepository keeping the records in a dictionary.

Records live as long as the process, which is all the tests and a single-process host need.
Anything durable (a database, a cache shared between workers) implements MatchRepository itself.
"""

from uuid import UUID, uuid4

from src.core.models import MatchModel


class InMemoryMatchRepository:
    def __init__(self) -> None:
        self._matches: dict[UUID, MatchModel] = {}

    def get_match(self, match_id: UUID) -> MatchModel | None:
        return self._matches.get(match_id)

    def create_match(self, match: MatchModel) -> tuple[MatchModel, UUID]:
        new_id = uuid4()
        self._matches[new_id] = match
        return match, new_id

    def update_match(self, match_id: UUID, match: MatchModel) -> MatchModel | None:
        if match_id not in self._matches:
            return None
        self._matches[match_id] = match
        return match

    def delete_match(self, match_id: UUID) -> MatchModel | None:
        return self._matches.pop(match_id, None)

    def clear(self) -> None:
        """Forget every match (useful in between tests)"""
        self._matches.clear()
