"""dailyquiz: Daily question selection with similarity-based deduplication."""

from dailyquiz.config import SelectorSettings
from dailyquiz.helpers import (
    format_questions_for_display,
    get_exclusion_instruction,
    recent_corpus,
)
from dailyquiz.models import CandidateScore, Question, QuestionOptions, SelectionReport
from dailyquiz.node import CorpusProvider, QuestionSelectorNode
from dailyquiz.selector import QuestionSelector, filter_duplicates, select_least_similar
from dailyquiz.similarity import are_questions_similar, jaccard_similarity, word_set

__all__ = [
    "QuestionSelectorNode",
    "CorpusProvider",
    "QuestionSelector",
    "select_least_similar",
    "filter_duplicates",
    "are_questions_similar",
    "jaccard_similarity",
    "word_set",
    "Question",
    "QuestionOptions",
    "CandidateScore",
    "SelectionReport",
    "SelectorSettings",
    "get_exclusion_instruction",
    "recent_corpus",
    "format_questions_for_display",
]

__version__ = "1.0.0"
