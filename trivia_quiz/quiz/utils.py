from __future__ import annotations

from typing import Optional

from .. import config

BOM = "\ufeff"


def clean_field(value: object) -> str:
    """Strip a leading BOM and surrounding whitespace; ``None`` becomes ``""``."""
    if value is None:
        return ""
    text = str(value)
    if text.startswith(BOM):
        text = text[1:]
    return text.strip()


def is_skippable(line: Optional[str]) -> bool:
    """Blank lines and ``//`` comments carry no question data."""
    cleaned = clean_field(line)
    return not cleaned or cleaned.startswith(config.COMMENT_PREFIX)


def option_letter(index: int) -> str:
    return config.ANSWER_LETTERS[index]


def normalise_answer(value: object) -> Optional[str]:
    """Return the upper-cased answer letter, or None when blank/unrecognised."""
    letter = clean_field(value).upper()
    if letter in config.ANSWER_LETTERS:
        return letter
    return None
