"""Helper functions for assembling the recent-question corpus and prompts."""

from collections.abc import Mapping, Sequence
from datetime import date, datetime, timedelta
from typing import Any
from zoneinfo import ZoneInfo

from dailyquiz.selector import candidate_content

DEFAULT_TIMEZONE = "Asia/Kolkata"


def today_in(tz: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> str:
    """Today's date in ``tz`` as ``YYYY-MM-DD``."""
    return date_days_ago(0, tz, now=now)


def date_days_ago(days: int, tz: str = DEFAULT_TIMEZONE, now: datetime | None = None) -> str:
    """Date ``days`` before today in ``tz`` as ``YYYY-MM-DD``.

    ``date_days_ago(0)`` is today and ``date_days_ago(1)`` is yesterday.
    Naive ``now`` values are treated as UTC.
    """
    zone = ZoneInfo(tz)
    if now is None:
        current = datetime.now(zone)
    elif now.tzinfo is None:
        current = now.replace(tzinfo=ZoneInfo("UTC")).astimezone(zone)
    else:
        current = now.astimezone(zone)
    return (current - timedelta(days=days)).date().isoformat()


def recent_corpus(
    sets_by_date: Mapping[str, Sequence[Any]],
    today: str,
    window_days: int = 3,
) -> list[str]:
    """Collect question texts published in the days before ``today``.

    Today's own set is left out since it is the one being regenerated.

    Args:
        sets_by_date: ``YYYY-MM-DD`` -> published questions (strings, or
            records exposing ``content``).
        today: The date being generated, ``YYYY-MM-DD``.
        window_days: How many preceding days to include.

    Returns:
        Question texts, oldest date first.

    Raises:
        ValueError: If a date key is not ``YYYY-MM-DD``.

    Example:
        >>> recent_corpus(
        ...     {"2026-01-14": ["Q1"], "2026-01-15": ["Q2"], "2026-01-10": ["Old"]},
        ...     today="2026-01-15",
        ... )
        ['Q1']
    """
    end = date.fromisoformat(today)
    start = end - timedelta(days=window_days)

    corpus: list[str] = []
    for key in sorted(sets_by_date):
        day = date.fromisoformat(key)
        if not start <= day < end:
            continue
        for item in sets_by_date[key]:
            corpus.append(item if isinstance(item, str) else candidate_content(item))
    return corpus


def get_exclusion_instruction(
    contents: Sequence[str],
    *,
    limit: int = 30,
    max_chars: int = 150,
    window_days: int = 3,
) -> str:
    """Build the prompt section asking the generator to avoid recent questions.

    Args:
        contents: Recently published question texts.
        limit: Maximum number of questions to list.
        max_chars: Each listed question is cut to this many characters.
        window_days: Window length mentioned in the instruction.

    Returns:
        Instruction text, or empty string if there is nothing to avoid.
    """
    if not contents or limit <= 0:
        return ""

    lines = [
        f"AVOID DUPLICATES - These questions or very similar topics were already asked "
        f"in the last {window_days} days. Do NOT create questions that are similar to "
        f"or about the same topic as:"
    ]
    for i, text in enumerate(contents[:limit], 1):
        suffix = "..." if len(text) > max_chars else ""
        lines.append(f"{i}. {text[:max_chars]}{suffix}")
    lines.append(
        "Generate completely different questions on other recent news or static GK topics."
    )

    return "\n".join(lines)


def format_questions_for_display(
    questions: Sequence[Any],
    *,
    numbered: bool = False,
    prefix: str = "",
) -> str:
    """Format questions (texts or records with ``content``) one per line."""
    if not questions:
        return ""

    lines = []
    for i, question in enumerate(questions, 1):
        text = question if isinstance(question, str) else candidate_content(question)
        if numbered:
            lines.append(f"{prefix}{i}. {text}")
        else:
            lines.append(f"{prefix}{text}")

    return "\n".join(lines)
