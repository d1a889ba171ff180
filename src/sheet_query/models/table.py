from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RawTable:
    """Untyped grid as read from the backing store (header is sheet row 1)."""

    id: int
    header_row: tuple[Any, ...]
    body_rows: tuple[tuple[Any, ...], ...]

    def __post_init__(self) -> None:
        header = tuple(self.header_row)
        body = tuple(tuple(row) for row in self.body_rows)
        width = len(header)
        for offset, row in enumerate(body):
            if len(row) != width:
                raise ValueError(
                    f"Table {self.id} row {offset + 2} has {len(row)} cells; header has {width}."
                )
        object.__setattr__(self, "header_row", header)
        object.__setattr__(self, "body_rows", body)

    @property
    def width(self) -> int:
        return len(self.header_row)

    @property
    def row_count(self) -> int:
        return len(self.body_rows)


__all__ = ["RawTable"]
