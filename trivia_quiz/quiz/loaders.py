"""
Async loaders that hand question sources to the ingestion pipeline.

``load_structured`` yields a :class:`Table` (header row removed) and
``load_raw_lines`` yields the file's lines untouched. Both report failure
by raising :class:`SourceLoadError`; file access runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import csv
import logging
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook import Workbook

from .. import config

logger = logging.getLogger(__name__)

WORKBOOK_EXTENSIONS = {".xlsx", ".xlsm"}


class SourceLoadError(Exception):
    """Raised when a question source cannot be read at all."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path.name}: {reason}")
        self.path = path
        self.reason = reason


class TableRow:
    def __init__(self, values: Sequence[object]) -> None:
        self._values = tuple(values)

    def get(self, index: int) -> object:
        """Value at ``index``, or None past the end of a short row."""
        if 0 <= index < len(self._values):
            return self._values[index]
        return None


class Table:
    """Rows of a structured source, header excluded."""

    def __init__(self, rows: Sequence[Sequence[object]], header: Sequence[object] = ()) -> None:
        self.header = tuple(header)
        self._rows = [TableRow(row) for row in rows]

    def row_count(self) -> int:
        return len(self._rows)

    def get_row(self, index: int) -> TableRow:
        return self._rows[index]


def _is_blank_row(row: Sequence[object]) -> bool:
    return all(value is None or not str(value).strip() for value in row)


def _split_header(rows: List[Sequence[object]]) -> Table:
    if not rows:
        return Table([])
    header, body = rows[0], rows[1:]
    return Table([row for row in body if not _is_blank_row(row)], header=header)


@contextmanager
def open_workbook(path: Path) -> Iterator[Workbook]:
    wb = load_workbook(path, read_only=True, data_only=True)
    try:
        yield wb
    finally:
        wb.close()


def _read_workbook_rows(path: Path) -> List[Sequence[object]]:
    with open_workbook(path) as wb:
        ws = wb.worksheets[0]
        return [tuple(row) for row in ws.iter_rows(values_only=True)]


def _read_csv_rows(path: Path, delimiter: str) -> List[Sequence[object]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return [row for row in csv.reader(handle, delimiter=delimiter)]


def _read_structured(path: Path, delimiter: str) -> Table:
    if not path.exists():
        raise SourceLoadError(path, "file not found")

    suffix = path.suffix.lower()
    if suffix not in config.STRUCTURED_EXTENSIONS:
        raise SourceLoadError(path, f"unsupported structured format {suffix or '(none)'}")

    try:
        if suffix in WORKBOOK_EXTENSIONS:
            rows = _read_workbook_rows(path)
        else:
            rows = _read_csv_rows(path, delimiter)
    except (InvalidFileException, zipfile.BadZipFile, KeyError) as exc:
        raise SourceLoadError(path, f"unreadable workbook ({exc})") from exc
    except UnicodeDecodeError as exc:
        raise SourceLoadError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except (OSError, csv.Error) as exc:
        raise SourceLoadError(path, str(exc)) from exc

    return _split_header(rows)


def _read_lines(path: Path) -> List[str]:
    if not path.exists():
        raise SourceLoadError(path, "file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SourceLoadError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise SourceLoadError(path, str(exc)) from exc
    return text.splitlines()


async def load_structured(path: Path, delimiter: str = config.FIELD_DELIMITER) -> Table:
    table = await asyncio.to_thread(_read_structured, Path(path), delimiter)
    logger.info("Structured load of %s: %d rows", path, table.row_count())
    return table


async def load_raw_lines(path: Path) -> List[str]:
    lines = await asyncio.to_thread(_read_lines, Path(path))
    logger.info("Raw load of %s: %d lines", path, len(lines))
    return lines
