"""
Base class for Supabase-backed repositories.
"""

from typing import Any, Generic, Optional, TypeVar

from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    A repository bound to one table.

    Subclasses map rows to their model in `_map_row`. Business policy
    belongs to the services.
    """

    def __init__(self, db: Client, table: str) -> None:
        self._db = db
        self._table_name = table

    @property
    def table_name(self) -> str:
        return self._table_name

    def _query(self):
        return self._db.table(self._table_name)

    def _first(self, rows: Optional[list[dict[str, Any]]]) -> Optional[T]:
        """Map the first row of a result, or None when it is empty."""
        if not rows:
            return None
        return self._map_row(rows[0])

    def _map_row(self, row: dict[str, Any]) -> T:
        raise NotImplementedError
