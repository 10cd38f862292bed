from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .. import config
from .utils import clean_field, is_skippable, normalise_answer

logger = logging.getLogger(__name__)

HEADER_HINT = (
    "CSV header not found (question,A,B,C,D,answer). Make the header the "
    "first valid line and remove leading comments."
)


class TableRow(Protocol):
    def get(self, index: int) -> object: ...


class TableSource(Protocol):
    """Tabular data as handed over by a structured loader."""

    def row_count(self) -> int: ...

    def get_row(self, index: int) -> TableRow: ...


@dataclass(frozen=True)
class Question:
    """A single four-option question."""

    text: str
    options: Tuple[str, str, str, str]
    answer: str
    source_line: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "text": self.text,
            "options": list(self.options),
            "answer": self.answer,
            "source_line": self.source_line,
        }


@dataclass
class ParseResult:
    questions: List[Question] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    summary: str = ""


def _build_question(
    fields: Sequence[object],
    answer: str,
    placeholder: str,
    source_line: Optional[str] = None,
) -> Question:
    text = clean_field(fields[0]) or placeholder
    options = tuple(
        clean_field(value) or config.OPTION_PLACEHOLDER for value in fields[1:5]
    )
    return Question(text=text, options=options, answer=answer, source_line=source_line)


def parse_table(table: TableSource, strict_answers: bool = False) -> ParseResult:
    """Turn every row of a loaded table into a Question.

    Answer defaults are applied silently on this path. In strict mode rows
    without a usable answer are dropped and reported instead.
    """

    result = ParseResult()
    for index in range(table.row_count()):
        row = table.get_row(index)
        fields = [row.get(position) for position in range(config.MIN_ROW_FIELDS)]
        answer = normalise_answer(fields[5])
        if answer is None:
            if strict_answers:
                result.errors.append(
                    f"Row {index + 1}: answer {clean_field(fields[5])!r} is not one of A-D, row skipped"
                )
                continue
            answer = config.DEFAULT_ANSWER
        result.questions.append(
            _build_question(fields, answer, config.TABLE_QUESTION_PLACEHOLDER)
        )

    result.summary = f"parse_table finished, questions: {len(result.questions)}"
    logger.info("Parsed %d questions from table", len(result.questions))
    return result


def find_header(lines: Sequence[str]) -> int:
    """Index of the first non-comment line naming both question and answer, or -1."""
    for index, line in enumerate(lines):
        if is_skippable(line):
            continue
        lowered = clean_field(line).lower()
        if "question" in lowered and "answer" in lowered:
            return index
    return -1


def parse_lines(
    lines: Optional[Sequence[str]],
    delimiter: str = config.FIELD_DELIMITER,
    strict_answers: bool = False,
) -> ParseResult:
    """Parse raw delimited lines into questions.

    Never raises: malformed rows are reported in ``errors`` and left out of
    ``questions``. Line numbers in messages are 1-based.
    """

    result = ParseResult()
    if not lines:
        result.errors.append("Source is empty or has no readable lines")
        return result

    header_index = find_header(lines)
    if header_index == -1:
        result.errors.append(HEADER_HINT)
        logger.warning("No header line in %d raw lines", len(lines))
        return result

    for index in range(header_index + 1, len(lines)):
        raw = lines[index]
        if is_skippable(raw):
            continue

        line_no = index + 1
        parts = clean_field(raw).split(delimiter)
        if len(parts) < config.MIN_ROW_FIELDS:
            result.errors.append(
                f"Line {line_no} has too few fields (expected >= {config.MIN_ROW_FIELDS}): {raw}"
            )
            continue

        answer_field = clean_field(parts[5])
        answer = normalise_answer(answer_field)
        if answer is None:
            if strict_answers:
                result.errors.append(
                    f"Line {line_no} has no valid answer, row skipped: {raw}"
                )
                continue
            if answer_field:
                result.errors.append(
                    f"Line {line_no} answer {answer_field!r} is not one of A-D, defaulting to A: {raw}"
                )
            else:
                result.errors.append(f"Line {line_no} answer missing, defaulting to A: {raw}")
            answer = config.DEFAULT_ANSWER

        result.questions.append(
            _build_question(parts, answer, config.QUESTION_PLACEHOLDER, source_line=raw)
        )

    if result.errors:
        logger.warning("Raw parse produced %d diagnostics", len(result.errors))
    return result
