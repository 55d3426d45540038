"""
In-memory record store.

Loaded once at startup from CSV and read-only afterwards.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

import pandas as pd

logger = logging.getLogger(__name__)

ID_FIELDS = ("id", "ID")


class DataSourceError(Exception):
    """Raised when the companies dataset cannot be loaded."""


class RecordStore:
    """Immutable sequence of company records with lookup helpers."""

    def __init__(self, records: Iterable[Dict[str, Any]], name_field: str = "company_name") -> None:
        self._records: Tuple[Dict[str, Any], ...] = tuple(dict(r) for r in records)
        self.name_field = name_field

    @classmethod
    def from_csv(cls, path: Union[str, Path], name_field: str = "company_name") -> "RecordStore":
        """
        Load records from a CSV file.

        Every column is read as a string and empty cells stay empty strings.

        Raises:
            DataSourceError: If the file is missing or cannot be parsed
        """
        csv_path = Path(path)
        if not csv_path.is_file():
            raise DataSourceError(f"CSV file not found: {csv_path}")

        try:
            df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            logger.warning(f"CSV file is empty: {csv_path}")
            return cls([], name_field=name_field)
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            raise DataSourceError(f"Failed to parse {csv_path}: {e}") from e

        store = cls(df.to_dict(orient="records"), name_field=name_field)
        logger.info(f"Loaded {len(store)} rows from {csv_path}")
        return store

    @property
    def records(self) -> Tuple[Dict[str, Any], ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Case-insensitive, whitespace-trimmed exact match on the name field."""
        wanted = (name or "").strip().lower()
        if not wanted:
            return None
        for record in self._records:
            value = record.get(self.name_field) or ""
            if str(value).strip().lower() == wanted:
                return record
        return None

    def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Exact match on the id (or ID) column."""
        if not record_id:
            return None
        for record in self._records:
            if any(record.get(f) == record_id for f in ID_FIELDS):
                return record
        return None

    def lookup(self, name: Optional[str] = None, record_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Find a record by id when given, otherwise by name. Never raises."""
        if record_id:
            return self.find_by_id(record_id)
        if name:
            return self.find_by_name(name)
        return None
