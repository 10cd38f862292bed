from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from .. import config
from .loaders import SourceLoadError, load_raw_lines, load_structured
from .parser import ParseResult, Question, TableSource, parse_lines, parse_table

logger = logging.getLogger(__name__)

StructuredLoader = Callable[[Path], Awaitable[TableSource]]
RawLoader = Callable[[Path], Awaitable[Sequence[str]]]

EMPTY_BANK_MESSAGE = (
    "The question bank is empty. Check that {name} exists, that its first "
    "valid line is the header, that comment lines and the BOM are removed "
    "and that it is saved as UTF-8."
)


@dataclass(frozen=True)
class IngestionFault:
    """Unexpected failure while loading; blocks the quiz until reloaded."""

    message: str
    detail: str


class QuestionBank:
    """Loads questions from a source and keeps the operator diagnostics.

    A structured load with at least one row always wins; the raw-line
    fallback only runs when that path fails or comes back empty.
    """

    def __init__(
        self,
        source: Path,
        structured_loader: Optional[StructuredLoader] = None,
        raw_loader: Optional[RawLoader] = None,
        delimiter: str = config.FIELD_DELIMITER,
        strict_answers: bool = False,
    ) -> None:
        self.source = Path(source)
        self.delimiter = delimiter
        self.strict_answers = strict_answers
        self._structured_loader = structured_loader or partial(load_structured, delimiter=delimiter)
        self._raw_loader = raw_loader or load_raw_lines

        self._questions: Tuple[Question, ...] = ()
        self._logs: List[str] = []
        self._table: Optional[TableSource] = None
        self._fault: Optional[IngestionFault] = None
        self._pending: Optional[asyncio.Future] = None

    @classmethod
    def from_settings(cls, settings: config.Settings) -> "QuestionBank":
        return cls(
            settings.questions_path,
            delimiter=settings.delimiter,
            strict_answers=settings.strict_answers,
        )

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def logs(self) -> Tuple[str, ...]:
        return tuple(self._logs)

    @property
    def fault(self) -> Optional[IngestionFault]:
        return self._fault

    @property
    def is_empty(self) -> bool:
        return not self._questions

    def __len__(self) -> int:
        return len(self._questions)

    def log(self, message: str) -> None:
        self._logs.append(message)

    async def load(self) -> bool:
        """Run ingestion, turning any unexpected error into ``fault``.

        Returns True when questions are available.
        """

        self._fault = None
        try:
            await self.ingest()
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Question ingestion failed for %s", self.source)
            self._questions = ()
            self._fault = IngestionFault(
                message="Something went wrong while loading the questions.",
                detail=f"{type(exc).__name__}: {exc}",
            )
            self.log(f"Ingestion failed: {self._fault.detail}")
            return False
        return not self.is_empty

    def load_sync(self) -> bool:
        return asyncio.run(self.load())

    async def ingest(self) -> Tuple[Question, ...]:
        # Concurrent callers share the in-flight attempt instead of starting another fallback.
        task = self._pending
        if task is None:
            task = self._pending = asyncio.ensure_future(self._ingest())
            task.add_done_callback(self._forget_pending)
        return await task

    def _forget_pending(self, task: asyncio.Future) -> None:
        if self._pending is task:
            self._pending = None

    async def _ingest(self) -> Tuple[Question, ...]:
        self._questions = ()
        self._table = None
        try:
            table = await self._structured_loader(self.source)
        except SourceLoadError as exc:
            self.log(f"Structured load failed, falling back to raw lines: {exc}")
            table = None
        else:
            self._table = table
            self.log(f"Structured load of {self.source.name} finished, rows: {table.row_count()}")

        if table is not None and table.row_count() > 0:
            questions = self._accept_table(table)
        else:
            questions = await self._load_fallback()

        self._questions = tuple(questions)
        self._report()
        return self._questions

    def _accept_table(self, table: TableSource) -> List[Question]:
        result = parse_table(table, strict_answers=self.strict_answers)
        self._logs.extend(result.errors)
        self.log(result.summary)
        return result.questions

    async def _load_fallback(self) -> List[Question]:
        try:
            lines = await self._raw_loader(self.source)
        except SourceLoadError as exc:
            self.log(f"Raw line load failed: {exc}")
            logger.error("Raw line load failed for %s: %s", self.source, exc)
            return []

        result: ParseResult = parse_lines(
            lines, delimiter=self.delimiter, strict_answers=self.strict_answers
        )
        if result.errors:
            for number, error in enumerate(result.errors, 1):
                self.log(f"parse error {number}: {error}")
        else:
            self.log(f"Raw lines parsed, questions: {len(result.questions)}")
        return result.questions

    def _report(self) -> None:
        if self._questions:
            self.log(f"Question bank loaded, questions: {len(self._questions)}")
            return
        self.log(EMPTY_BANK_MESSAGE.format(name=self.source.name))
        logger.warning("Question bank is empty after loading %s", self.source)

    def recover(self) -> bool:
        """Re-parse a held table when the bank came up empty.

        Returns True if questions were recovered.
        """

        if self._questions or self._table is None or self._table.row_count() == 0:
            return False
        result = parse_table(self._table, strict_answers=self.strict_answers)
        self._logs.extend(result.errors)
        self.log(result.summary)
        self._questions = tuple(result.questions)
        return bool(self._questions)
