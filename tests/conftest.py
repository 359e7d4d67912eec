"""Pytest configuration and shared fixtures."""

import pytest


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "requires_llm: marks tests that require an actual LLM (deselect with '-m \"not requires_llm\"')",
    )


def make_question(content: str, category: str = "General", **extra) -> dict:
    """Build a valid question record around ``content``."""
    data = {
        "content": content,
        "options": {"a": "Option A", "b": "Option B", "c": "Option C", "d": "Option D"},
        "correct_option": "a",
        "explanation": "Explanation for this question.",
        "category": category,
    }
    data.update(extra)
    return data


@pytest.fixture
def planet_corpus() -> list[str]:
    """One recently published question."""
    return ["Which planet is known as the Red Planet?"]


@pytest.fixture
def planet_candidates() -> list[dict]:
    """Candidates scoring 1.0, 0.375, 0.1 and 1/9 against planet_corpus."""
    return [
        make_question("Which planet is known as the Red Planet?"),
        make_question("Which planet has the most moons?"),
        make_question("Who wrote the national anthem of India?"),
        make_question("Name the longest river in Africa"),
    ]
