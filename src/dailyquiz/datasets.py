"""Loaders for candidate batches and recent-question corpora.

Example:
    >>> from dailyquiz.datasets import load_candidates, load_corpus
    >>>
    >>> candidates = load_candidates("batch.json")
    >>> corpus = load_corpus("recent.txt")
    >>>
    >>> # From raw generator output (may be wrapped in a ```json fence)
    >>> questions = parse_question_batch(llm_text, expected_count=12)
"""

from __future__ import annotations

import csv
import json
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic_core import ErrorDetails

from dailyquiz.models import Question

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n?(.*?)\n?```$", re.DOTALL)

CSV_OPTION_COLUMNS = ("a", "b", "c", "d")


class QuestionBatchError(Exception):
    """Raised when a question batch fails to parse or validate."""

    def __init__(self, message: str, index: int | None = None, line: int | None = None):
        self.index = index
        self.line = line
        super().__init__(message)


def _format_validation_errors(errors: list[ErrorDetails]) -> str:
    """Format Pydantic validation errors into a human-readable string."""
    lines = []
    for error in errors:
        loc = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Unknown error")
        if loc:
            lines.append(f"  - '{loc}': {msg}")
        else:
            lines.append(f"  - {msg}")
    return "\n".join(lines)


def _validate_question(
    data: Any, index: int | None = None, line: int | None = None
) -> Question:
    """Validate one item as a Question.

    Raises:
        QuestionBatchError: If validation fails.
    """
    if isinstance(data, Question):
        return data

    try:
        return Question.model_validate(data)
    except ValidationError as e:
        location = ""
        if line is not None:
            location = f" at line {line}"
        elif index is not None:
            location = f" at index {index}"

        raise QuestionBatchError(
            f"Question{location} is invalid:\n{_format_validation_errors(e.errors())}",
            index=index,
            line=line,
        ) from e


def _check_count(questions: list[Question], expected_count: int | None) -> None:
    if expected_count is not None and len(questions) != expected_count:
        raise QuestionBatchError(
            f"Expected {expected_count} questions, got {len(questions)}"
        )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1).strip() if match else text


def parse_question_batch(text: str, expected_count: int | None = None) -> list[Question]:
    """Parse a generator's JSON output into validated questions.

    Args:
        text: JSON array of questions, optionally inside a code fence.
        expected_count: If set, the batch must contain exactly this many.

    Returns:
        List of validated Question objects.

    Raises:
        QuestionBatchError: If the text is not a valid question array.
    """
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise QuestionBatchError(f"Invalid JSON: {e.msg}") from e

    if not isinstance(data, list):
        raise QuestionBatchError(
            f"Expected a JSON array of questions, got {type(data).__name__}"
        )

    questions = [_validate_question(item, index=i) for i, item in enumerate(data)]
    _check_count(questions, expected_count)
    return questions


def _read_jsonl(path: Path) -> list[tuple[int, Any]]:
    """Read (line number, parsed object) pairs, skipping blank lines."""
    rows = []
    with open(path, encoding="utf-8") as f:
        for line_num, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                rows.append((line_num, json.loads(line)))
            except json.JSONDecodeError as e:
                raise QuestionBatchError(
                    f"Invalid JSON at line {line_num}: {e.msg}", line=line_num
                ) from e
    return rows


def _csv_row_to_dict(row: dict[str, str]) -> dict[str, Any]:
    """Fold option columns a-d into a nested ``options`` mapping."""
    data: dict[str, Any] = {}
    options: dict[str, str] = {}
    for key, value in row.items():
        if key is None:
            continue
        key = key.strip()
        if key in CSV_OPTION_COLUMNS:
            options[key] = value
        elif value is not None and value.strip():
            data[key] = value
    if options:
        data["options"] = options
    return data


def _check_exists(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")


def load_candidates(path: str | Path, expected_count: int | None = None) -> list[Question]:
    """Load candidate questions from a ``.json``, ``.jsonl`` or ``.csv`` file.

    CSV files use the columns ``content, a, b, c, d, correct_option,
    explanation, category``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file extension is not supported.
        QuestionBatchError: If any question fails to parse or validate.
    """
    path = Path(path)
    _check_exists(path)
    ext = path.suffix.lower()

    if ext == ".json":
        return parse_question_batch(path.read_text(encoding="utf-8"), expected_count)

    if ext == ".jsonl":
        questions = [_validate_question(obj, line=n) for n, obj in _read_jsonl(path)]
    elif ext == ".csv":
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            # Header is line 1, so data starts at line 2
            questions = [
                _validate_question(_csv_row_to_dict(row), line=n)
                for n, row in enumerate(reader, start=2)
            ]
    else:
        raise ValueError(f"Unsupported file extension: '{ext}'. Supported: .json, .jsonl, .csv")

    _check_count(questions, expected_count)
    return questions


def _corpus_entry(item: Any, where: str) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, dict) and isinstance(item.get("content"), str):
        return item["content"]
    raise QuestionBatchError(f"Corpus entry {where} must be a string or have a 'content' string")


def load_corpus(path: str | Path) -> list[str]:
    """Load recently published question texts.

    Supports ``.txt`` (one question per non-blank line), ``.json`` (array
    of strings or of objects with ``content``) and ``.jsonl``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file extension is not supported.
        QuestionBatchError: If an entry has no question text.
    """
    path = Path(path)
    _check_exists(path)
    ext = path.suffix.lower()

    if ext == ".txt":
        lines = path.read_text(encoding="utf-8").splitlines()
        return [line.strip() for line in lines if line.strip()]

    if ext == ".json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise QuestionBatchError(f"Invalid JSON: {e.msg}") from e
        if not isinstance(data, list):
            raise QuestionBatchError(f"Expected a JSON array, got {type(data).__name__}")
        return [_corpus_entry(item, f"at index {i}") for i, item in enumerate(data)]

    if ext == ".jsonl":
        return [_corpus_entry(obj, f"at line {n}") for n, obj in _read_jsonl(path)]

    raise ValueError(f"Unsupported file extension: '{ext}'. Supported: .txt, .json, .jsonl")
