from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
QUESTIONS_PATH = DATA_DIR / "questions.csv"

ADVANCE_DELAY_SECONDS = 0.8
FIELD_DELIMITER = ","
COMMENT_PREFIX = "//"
MIN_ROW_FIELDS = 6

ANSWER_LETTERS = ("A", "B", "C", "D")
DEFAULT_ANSWER = "A"

QUESTION_PLACEHOLDER = "(question missing)"
TABLE_QUESTION_PLACEHOLDER = "(question missing - check CSV encoding or header)"
OPTION_PLACEHOLDER = "(option missing)"

TOP_TIER_RATIO = 0.8
MID_TIER_RATIO = 0.5

STRUCTURED_EXTENSIONS = {".csv", ".xlsx", ".xlsm"}

REMEDIATION_STEPS = (
    "Make sure questions.csv exists next to the app.",
    "The first valid line must be the header: question,A,B,C,D,answer",
    "Remove leading comment lines and the BOM, and save the file as UTF-8.",
)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_delay(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, using %s seconds", name, raw, default)
        return default
    if value < 0:
        logger.warning("Ignoring negative %s=%r, using %s seconds", name, raw, default)
        return default
    return value


class Settings:
    """Runtime configuration, overridable from the environment."""

    def __init__(self) -> None:
        path = os.environ.get("TRIVIA_QUESTIONS_PATH", "").strip()
        self.questions_path = Path(path).expanduser() if path else QUESTIONS_PATH

        self.advance_delay = _env_delay("TRIVIA_ADVANCE_DELAY", ADVANCE_DELAY_SECONDS)

        self.strict_answers = _env_flag("TRIVIA_STRICT_ANSWERS")
        self.delimiter = FIELD_DELIMITER


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
