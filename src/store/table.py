"""File-backed table handle.

This module owns one table file and implements primary-key CRUD on top
of whole-file read-modify-write cycles. No records are cached between
calls; every operation re-reads the file from disk.
"""

from __future__ import annotations

import os
import tempfile
import threading
from collections.abc import Sized
from pathlib import Path
from typing import Any, Iterable, Sequence

from core.constants import TABLE_FILE_SUFFIX, TEMP_FILE_SUFFIX
from core.errors import DecodeError, InvalidTableDataError, MissingPrimaryKeyError
from core.logging_config import get_logger
from core.types import Record, RecordPredicate, TableLogger, TableOptions
from store.codec import decode, encode

_LOGGER = get_logger(__name__)


class YoloDbTable:
    """Primary-key table persisted as a single codec document.

    Each public operation runs one full cycle under a per-handle lock:
    read the file, validate it, mutate an in-memory copy, and for
    mutating operations write the file back. Cycles on one handle never
    interleave. Separate handles on the same file are not coordinated.
    """

    def __init__(
        self,
        file_path: str | Path,
        primary_key: str,
        seed: Sequence[Record] | None = None,
        options: TableOptions | None = None,
    ) -> None:
        """Open a table file, creating it from ``seed`` when missing.

        Args:
            file_path: Table file path.
            primary_key: Field holding each record's key.
            seed: Records written when the file does not exist yet.
            options: Optional logger and formatting options.
        """
        self._file_path = Path(file_path).expanduser().resolve()
        self._primary_key = primary_key
        self._options = options or TableOptions()
        self._table_name = _table_name_from_path(self._file_path)
        self._lock = threading.RLock()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self._file_path.exists():
            self.save_file(list(seed or []))

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def primary_key(self) -> str:
        return self._primary_key

    @property
    def table_name(self) -> str:
        return self._table_name

    def all(self) -> list[Record]:
        """Return every persisted record in insertion order."""
        with self._lock:
            return self._load_records()

    def count(self) -> int:
        """Return the number of persisted records."""
        with self._lock:
            return len(self._load_records())

    def read_file(self) -> Any:
        """Read and decode the table file.

        A missing file is recreated empty and an empty list is returned.

        Returns:
            Decoded file content.

        Raises:
            DecodeError: If the file content cannot be decoded.
        """
        with self._lock:
            self._log("table_read")
            if not self._file_path.exists():
                self.save_file([])
                return []
            raw = self._file_path.read_bytes()
            try:
                return decode(raw)
            except DecodeError as error:
                raise DecodeError(
                    f"Failed to decode table '{self._table_name}' at {self._file_path}: {error} "
                    "Restore the file from a backup or truncate the table."
                ) from error

    def save_file(self, records: list[Record]) -> None:
        """Replace the table file with ``records``.

        The document is written to a sibling temporary file first and then
        moved into place, so the table file is never left half-written.

        Raises:
            EncodeError: If a record holds an unsupported value type.
        """
        with self._lock:
            payload = encode(records, indent=self._options.indent)
            self._log("table_write", record_count=len(records))
            # unique per write: other handles or processes may be writing the same table
            descriptor, temp_name = tempfile.mkstemp(
                dir=self._file_path.parent,
                prefix=self._file_path.name + ".",
                suffix=TEMP_FILE_SUFFIX,
            )
            temp_path = Path(temp_name)
            try:
                with os.fdopen(descriptor, "wb") as temp_file:
                    temp_file.write(payload)
                os.replace(temp_path, self._file_path)
            finally:
                temp_path.unlink(missing_ok=True)

    def find_by_id(self, key: Any) -> Record | None:
        """Return the first record whose primary key equals ``key``."""
        return self.find_first_by(self._primary_key, key)

    def find_by(self, field: str, value: Any) -> list[Record]:
        """Return all records whose ``field`` equals ``value``."""
        return [record for record in self.all() if _field_matches(record, field, value)]

    def find_first_by(self, field: str, value: Any) -> Record | None:
        """Return the first record whose ``field`` equals ``value``."""
        for record in self.all():
            if _field_matches(record, field, value):
                return record
        return None

    def search(self, predicate: RecordPredicate) -> list[Record]:
        """Return all records for which ``predicate`` is truthy."""
        return [record for record in self.all() if predicate(record)]

    def insert(self, record: Record) -> None:
        """Append one record.

        Raises:
            MissingPrimaryKeyError: If the record has no primary-key value.
        """
        self._require_primary_key(record)
        with self._lock:
            records = self._load_records()
            records.append(record)
            self.save_file(records)

    def insert_many(self, records: Iterable[Record]) -> None:
        """Append several records with a single write.

        Every record is validated before any is appended.

        Raises:
            MissingPrimaryKeyError: If any record has no primary-key value.
        """
        new_records = list(records)
        for record in new_records:
            self._require_primary_key(record)
        with self._lock:
            current = self._load_records()
            current.extend(new_records)
            self.save_file(current)

    def update(self, record: Record) -> None:
        """Merge ``record`` fields into the stored record with the same key.

        Only the first matching record is updated. When no record matches,
        nothing is written and no error is raised.

        Raises:
            MissingPrimaryKeyError: If ``record`` has no primary-key value.
        """
        key = self._require_primary_key(record)
        with self._lock:
            records = self._load_records()
            for current in records:
                if _field_matches(current, self._primary_key, key):
                    current.update(record)
                    self.save_file(records)
                    return

    def update_many(self, records: Iterable[Record]) -> None:
        """Apply :meth:`update` to each record in order."""
        with self._lock:
            for record in records:
                self.update(record)

    def delete(self, key: Any) -> None:
        """Remove every record whose primary key equals ``key``."""
        self.delete_many([key])

    def delete_many(self, keys: Iterable[Any]) -> None:
        """Remove every record whose primary key is in ``keys``."""
        targets = list(keys)
        with self._lock:
            self._log("records_deleted", key_count=len(targets))
            records = self._load_records()
            kept = [
                record
                for record in records
                if not any(_field_matches(record, self._primary_key, key) for key in targets)
            ]
            if len(kept) != len(records):
                self.save_file(kept)

    def truncate(self) -> None:
        """Remove all records from the table."""
        self.save_file([])

    def _load_records(self) -> list[Record]:
        """Read the file and validate its shape.

        Raises:
            InvalidTableDataError: If content is not a list of mappings.
        """
        content = self.read_file()
        if not isinstance(content, list):
            raise InvalidTableDataError(
                f"Invalid data in {self._file_path}: expected a list of records, "
                f"got {type(content).__name__}. Fix the file or truncate the table."
            )
        for index, record in enumerate(content):
            if not isinstance(record, dict):
                raise InvalidTableDataError(
                    f"Invalid data in {self._file_path}: record {index} is "
                    f"{type(record).__name__}, expected an object. Fix the file or truncate the table."
                )
        return content

    def _require_primary_key(self, record: Record) -> Any:
        key = record.get(self._primary_key)
        if key is None or (isinstance(key, Sized) and len(key) == 0):
            raise MissingPrimaryKeyError(
                f"Record does not have a primary key: {self._table_name}.{self._primary_key}. "
                f"Set a non-empty '{self._primary_key}' value before writing."
            )
        return key

    def _log(self, event: str, **fields: object) -> None:
        logger: TableLogger = self._options.logger or self._default_log
        logger(event, **fields)

    def _default_log(self, event: str, **fields: object) -> None:
        _LOGGER.debug(event, table=self._table_name, path=str(self._file_path), **fields)


def _table_name_from_path(file_path: Path) -> str:
    if file_path.suffix == TABLE_FILE_SUFFIX:
        return file_path.stem
    return file_path.name


def _field_matches(record: Record, field: str, value: Any) -> bool:
    return field in record and record[field] == value
