"""Tests for the file loaders: csv, xlsx workbooks and raw lines."""

import asyncio

import pytest
from openpyxl import Workbook

from trivia_quiz.quiz import SourceLoadError, load_raw_lines, load_structured


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "questions.csv"
    path.write_text(
        "question,A,B,C,D,answer\n"
        "Q1,a,b,c,d,B\n"
        "\n"
        "Q2,a,b,c,d,D\n",
        encoding="utf-8",
    )
    return path


class TestLoadStructured:
    def test_csv_header_is_excluded(self, csv_file):
        table = asyncio.run(load_structured(csv_file))

        assert table.row_count() == 2
        assert table.header[0] == "question"
        assert table.get_row(1).get(0) == "Q2"
        assert table.get_row(1).get(5) == "D"

    def test_short_row_returns_none_past_end(self, tmp_path):
        path = tmp_path / "q.csv"
        path.write_text("question,answer\nonly,two\n", encoding="utf-8")

        table = asyncio.run(load_structured(path))

        assert table.get_row(0).get(5) is None

    def test_xlsx_workbook(self, tmp_path):
        path = tmp_path / "questions.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.append(["question", "A", "B", "C", "D", "answer"])
        ws.append(["Year of the first Olympics?", 1896, 1900, 1912, 1920, "A"])
        wb.save(path)

        table = asyncio.run(load_structured(path))

        assert table.row_count() == 1
        assert table.get_row(0).get(1) == 1896

    def test_header_only_gives_zero_rows(self, tmp_path):
        path = tmp_path / "q.csv"
        path.write_text("question,A,B,C,D,answer\n", encoding="utf-8")

        assert asyncio.run(load_structured(path)).row_count() == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceLoadError, match="file not found"):
            asyncio.run(load_structured(tmp_path / "missing.csv"))

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "questions.txt"
        path.write_text("question,A,B,C,D,answer\n", encoding="utf-8")

        with pytest.raises(SourceLoadError, match="unsupported"):
            asyncio.run(load_structured(path))

    def test_broken_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a zip archive")

        with pytest.raises(SourceLoadError, match="unreadable workbook"):
            asyncio.run(load_structured(path))

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin.csv"
        path.write_bytes("question,A,B,C,D,answer\nCaf\xe9,a,b,c,d,A\n".encode("latin-1"))

        with pytest.raises(SourceLoadError, match="UTF-8"):
            asyncio.run(load_structured(path))


class TestLoadRawLines:
    def test_lines_are_returned_untouched(self, tmp_path):
        path = tmp_path / "questions.txt"
        path.write_text("\ufeff// note\nquestion,A,B,C,D,answer\r\n  Q1,a,b,c,d,A  \n", encoding="utf-8")

        lines = asyncio.run(load_raw_lines(path))

        assert lines == ["\ufeff// note", "question,A,B,C,D,answer", "  Q1,a,b,c,d,A  "]

    def test_missing_file(self, tmp_path):
        with pytest.raises(SourceLoadError) as excinfo:
            asyncio.run(load_raw_lines(tmp_path / "missing.csv"))

        assert excinfo.value.reason == "file not found"
