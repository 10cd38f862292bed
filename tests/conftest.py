from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from trivia_quiz.quiz import QuestionBank, QuizSession, SourceLoadError, Table, TickScheduler

HEADER = ("question", "A", "B", "C", "D", "answer")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class RecordingLoaders:
    """Stand-in loaders that count calls and return canned data."""

    def __init__(
        self,
        rows: Optional[Sequence[Sequence[object]]] = None,
        lines: Optional[List[str]] = None,
        structured_error: Optional[BaseException] = None,
        raw_error: Optional[BaseException] = None,
    ) -> None:
        self.rows = rows
        self.lines = lines
        self.structured_error = structured_error
        self.raw_error = raw_error
        self.structured_calls = 0
        self.raw_calls = 0

    async def structured(self, path: Path) -> Table:
        self.structured_calls += 1
        await asyncio.sleep(0)
        if self.structured_error is not None:
            raise self.structured_error
        if self.rows is None:
            raise SourceLoadError(path, "file not found")
        return Table(self.rows, header=HEADER)

    async def raw(self, path: Path) -> List[str]:
        self.raw_calls += 1
        await asyncio.sleep(0)
        if self.raw_error is not None:
            raise self.raw_error
        if self.lines is None:
            raise SourceLoadError(path, "file not found")
        return list(self.lines)

    def bank(self, **kwargs) -> QuestionBank:
        return QuestionBank(
            Path("questions.csv"),
            structured_loader=self.structured,
            raw_loader=self.raw,
            **kwargs,
        )


THREE_ROWS = [
    ("Q1", "a1", "b1", "c1", "d1", "A"),
    ("Q2", "a2", "b2", "c2", "d2", "B"),
    ("Q3", "a3", "b3", "c3", "d3", "C"),
]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def loaded_bank() -> QuestionBank:
    bank = RecordingLoaders(rows=THREE_ROWS).bank()
    assert asyncio.run(bank.load())
    return bank


@pytest.fixture
def empty_bank() -> QuestionBank:
    bank = RecordingLoaders().bank()
    assert not asyncio.run(bank.load())
    return bank


@pytest.fixture
def session(loaded_bank: QuestionBank, clock: FakeClock) -> QuizSession:
    return QuizSession(loaded_bank, scheduler=TickScheduler(clock=clock), advance_delay=0.8)
