"""Question selection with novelty filtering against recent questions."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

from dailyquiz.models import CandidateScore, SelectionMode, SelectionReport
from dailyquiz.similarity import (
    DEFAULT_MIN_WORD_LENGTH,
    best_match,
    word_set,
)

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_THRESHOLD = 0.45

T = TypeVar("T")


def candidate_content(candidate: Any, index: int | None = None) -> str:
    """Return the ``content`` text of a candidate.

    Candidates may be objects with a ``content`` attribute (such as
    :class:`~dailyquiz.models.Question`) or mappings with a ``"content"`` key.

    Raises:
        TypeError: If the candidate has no string content.
    """
    if isinstance(candidate, Mapping):
        content = candidate.get("content")
    else:
        content = getattr(candidate, "content", None)

    if not isinstance(content, str):
        where = f" at index {index}" if index is not None else ""
        raise TypeError(
            f"Candidate{where} has no 'content' string (got {type(content).__name__})"
        )
    return content


class QuestionSelector:
    """Selects the candidates least likely to repeat recent questions.

    Two decision rules share the same scoring. ``select`` keeps the N
    candidates with the lowest corpus-max similarity. ``filter`` rejects every
    candidate at or above a fixed threshold against any corpus entry.

    Example:
        >>> selector = QuestionSelector()
        >>> candidates = [
        ...     {"content": "Who won the 2024 election?"},
        ...     {"content": "What is the capital of France?"},
        ... ]
        >>> selector.select(candidates, ["Who won the 2024 election?"], 1)
        [{'content': 'What is the capital of France?'}]
    """

    def __init__(
        self,
        *,
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
        stop_words: Iterable[str] | None = None,
        threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
    ) -> None:
        """Initialize the selector.

        Args:
            min_word_length: Shortest word counted as significant.
            stop_words: Optional words to ignore on top of the length filter.
            threshold: Similarity at which ``filter`` treats a candidate as a duplicate.
        """
        self.min_word_length = min_word_length
        self.stop_words = frozenset(w.lower() for w in stop_words) if stop_words else frozenset()
        self.threshold = threshold

    def select(self, candidates: Sequence[T], corpus: Sequence[str], count: int) -> list[T]:
        """Keep the ``count`` candidates least similar to the corpus.

        Ties keep their original order. When there are no more candidates
        than requested, they are returned as-is without scoring.

        Args:
            candidates: Candidate questions exposing ``content``.
            corpus: Recently published question texts.
            count: Number of candidates to keep.

        Returns:
            At most ``count`` candidates, most novel first.
        """
        if count <= 0:
            return []
        if len(candidates) <= count:
            return list(candidates)

        scored = self._score_all(candidates, corpus)
        # sorted() is stable, so equal scores keep candidate order
        ranked = sorted(scored, key=lambda s: s.max_similarity)
        kept = ranked[:count]

        logger.info(
            "Selected %d of %d candidates against %d recent questions (dropped max score %.3f)",
            len(kept),
            len(candidates),
            len(corpus),
            ranked[-1].max_similarity,
        )
        return [candidates[s.index] for s in kept]

    def filter(
        self,
        candidates: Sequence[T],
        corpus: Sequence[str],
        threshold: float | None = None,
    ) -> list[T]:
        """Drop candidates similar to any corpus entry.

        Args:
            candidates: Candidate questions exposing ``content``.
            corpus: Recently published question texts.
            threshold: Overrides the selector's threshold for this call.

        Returns:
            Candidates below the threshold against every corpus entry, in order.
        """
        limit = self.threshold if threshold is None else threshold
        scored = self._score_all(candidates, corpus)
        kept = [candidates[s.index] for s in scored if s.max_similarity < limit]

        logger.info(
            "Kept %d of %d candidates below similarity %.2f",
            len(kept),
            len(candidates),
            limit,
        )
        return kept

    def score(self, candidates: Sequence[Any], corpus: Sequence[str]) -> list[CandidateScore]:
        """Score every candidate against the corpus, in candidate order."""
        return self._score_all(candidates, corpus)

    def report(
        self,
        candidates: Sequence[Any],
        corpus: Sequence[str],
        *,
        mode: SelectionMode = "least_similar",
        count: int | None = None,
        threshold: float | None = None,
    ) -> SelectionReport:
        """Score all candidates and mark the ones the given mode would keep.

        Unlike ``select``, every candidate is scored even when no candidate
        would be dropped, so the report always carries full scores. In
        ``filter_duplicates`` mode a ``count`` caps the passing candidates.
        A negative ``count`` selects nothing and is recorded as 0.

        Raises:
            ValueError: If ``mode`` is ``least_similar`` and ``count`` is None.
        """
        if mode == "least_similar" and count is None:
            raise ValueError("least_similar mode requires a count")
        if count is not None:
            count = max(count, 0)

        scores = self._score_all(candidates, corpus)

        if mode == "least_similar":
            ranked = sorted(scores, key=lambda s: s.max_similarity)
            keep = {s.index for s in ranked[:count]}
            limit = None
        else:
            limit = self.threshold if threshold is None else threshold
            passing = [s.index for s in scores if s.max_similarity < limit]
            keep = set(passing if count is None else passing[:count])

        for s in scores:
            s.selected = s.index in keep

        return SelectionReport(
            mode=mode,
            target_count=count,
            threshold=limit,
            corpus_size=len(corpus),
            candidate_count=len(candidates),
            scores=scores,
        )

    def _score_all(self, candidates: Sequence[Any], corpus: Sequence[str]) -> list[CandidateScore]:
        """Compute the corpus-max similarity for each candidate."""
        corpus_sets = [self._words(text) for text in corpus]
        scores: list[CandidateScore] = []

        for i, candidate in enumerate(candidates):
            content = candidate_content(candidate, i)
            words = self._words(content)

            best, match = best_match(words, corpus, corpus_sets)

            logger.debug("Candidate %d scored %.3f: %s", i, best, content[:80])
            scores.append(
                CandidateScore(index=i, content=content, max_similarity=best, closest_match=match)
            )

        return scores

    def _words(self, text: str) -> set[str]:
        return word_set(text, min_length=self.min_word_length, stop_words=self.stop_words)


_default_selector = QuestionSelector()


def select_least_similar(
    candidates: Sequence[T],
    corpus_texts: Sequence[str],
    target_count: int,
) -> list[T]:
    """Keep the ``target_count`` candidates least similar to recent questions.

    Example:
        >>> select_least_similar(
        ...     [{"content": "Who won the 2024 election?"},
        ...      {"content": "What is the capital of France?"}],
        ...     ["Who won the election in 2024?"],
        ...     1,
        ... )
        [{'content': 'What is the capital of France?'}]
    """
    return _default_selector.select(candidates, corpus_texts, target_count)


def filter_duplicates(
    candidates: Sequence[T],
    corpus_texts: Sequence[str],
    threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
) -> list[T]:
    """Keep only candidates below ``threshold`` similarity to every recent question."""
    return _default_selector.filter(candidates, corpus_texts, threshold)
