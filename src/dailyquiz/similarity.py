"""Word-set Jaccard similarity between question texts."""

import re
from collections.abc import Iterable, Sequence

DEFAULT_MIN_WORD_LENGTH = 3

_WHITESPACE = re.compile(r"\s+")
_PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_for_comparison(text: str) -> str:
    """Normalize question text for similarity comparison.

    Lowercases, trims, collapses whitespace and keeps only word characters
    and spaces.

    Example:
        >>> normalize_for_comparison("  Who WON the 2024   election? ")
        'who won the 2024 election'
    """
    text = _WHITESPACE.sub(" ", text.lower().strip())
    return _PUNCTUATION.sub("", text).strip()


def word_set(
    text: str,
    *,
    min_length: int = DEFAULT_MIN_WORD_LENGTH,
    stop_words: Iterable[str] | None = None,
) -> set[str]:
    """Extract the set of significant words from text.

    Words shorter than ``min_length`` are dropped, which filters most
    articles and prepositions without needing a stop-word list.

    Args:
        text: Raw question text.
        min_length: Shortest word length kept.
        stop_words: Optional extra words to discard (compared lowercase).

    Returns:
        Set of normalized words.
    """
    words = {w for w in normalize_for_comparison(text).split() if len(w) >= min_length}
    if stop_words:
        words -= {w.lower() for w in stop_words}
    return words


def jaccard_similarity(set_a: set[str], set_b: set[str]) -> float:
    """Return |A & B| / |A | B|, or 0.0 when both sets are empty."""
    if not set_a and not set_b:
        return 0.0
    return len(set_a & set_b) / len(set_a | set_b)


def closest_match(
    content: str,
    corpus: Sequence[str],
    *,
    min_length: int = DEFAULT_MIN_WORD_LENGTH,
    stop_words: Iterable[str] | None = None,
) -> tuple[float, str | None]:
    """Find the corpus entry most similar to ``content``.

    Returns:
        Tuple of (max similarity, matching corpus text). The first entry wins
        on ties; the match is None when no entry shares a word.
    """
    words = word_set(content, min_length=min_length, stop_words=stop_words)
    corpus_sets = [word_set(t, min_length=min_length, stop_words=stop_words) for t in corpus]
    return best_match(words, corpus, corpus_sets)


def best_match(
    words: set[str],
    corpus: Sequence[str],
    corpus_sets: Sequence[set[str]],
) -> tuple[float, str | None]:
    """Running maximum of ``words`` against precomputed corpus word sets.

    ``corpus_sets[i]`` must be the word set of ``corpus[i]``.
    """
    best, match = 0.0, None
    for text, other in zip(corpus, corpus_sets):
        score = jaccard_similarity(words, other)
        if score > best:
            best, match = score, text
    return best, match


def max_similarity(
    content: str,
    corpus: Sequence[str],
    *,
    min_length: int = DEFAULT_MIN_WORD_LENGTH,
    stop_words: Iterable[str] | None = None,
) -> float:
    """Highest similarity of ``content`` to any corpus entry (0.0 if empty)."""
    score, _ = closest_match(content, corpus, min_length=min_length, stop_words=stop_words)
    return score


def are_questions_similar(content_a: str, content_b: str, threshold: float = 0.45) -> bool:
    """Check if two question texts are at least ``threshold`` similar."""
    return jaccard_similarity(word_set(content_a), word_set(content_b)) >= threshold
