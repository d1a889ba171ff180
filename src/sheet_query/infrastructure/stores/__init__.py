from sheet_query.infrastructure.stores.base import FIRST_BODY_ROW, HEADER_ROW, TableStore
from sheet_query.infrastructure.stores.memory import MemoryStore
from sheet_query.infrastructure.stores.workbook import WorkbookStore

__all__ = ["FIRST_BODY_ROW", "HEADER_ROW", "MemoryStore", "TableStore", "WorkbookStore"]
