from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jobsphere.errors import BackendError

Row = dict[str, Any]


class Backend(ABC):
    """Query surface of the hosted data service.

    Filters are equality (``eq``) and membership (``in_``) on plain columns;
    ``order`` names one column. Inserts and updates return the stored rows
    as the service sees them (ids, defaults and timestamps filled in).
    """

    name: str = "backend"

    @abstractmethod
    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, list[Any]] | None = None,
        order: str | None = None,
        ascending: bool = True,
    ) -> list[Row]:
        pass

    @abstractmethod
    def insert(self, table: str, row: Row) -> Row:
        pass

    @abstractmethod
    def update(self, table: str, values: Row, *, eq: dict[str, Any]) -> list[Row]:
        pass

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Row:
        pass

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Row:
        pass

    @abstractmethod
    def sign_out(self) -> None:
        pass

    def select_one(self, table: str, columns: str = "*", **filters: Any) -> Row | None:
        """Zero or one row; more than one is an error."""
        rows = self.select(table, columns, **filters)
        if len(rows) > 1:
            raise BackendError(
                f"Expected at most one row from {table}, got {len(rows)}",
                code="PGRST116",
            )
        return rows[0] if rows else None
