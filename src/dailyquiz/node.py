"""QuestionSelectorNode: LangGraph node that picks the daily question set."""

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from langchain_core.runnables import RunnableConfig
from pydantic import ValidationError

from dailyquiz.config import SelectorSettings
from dailyquiz.models import Question, SelectionMode
from dailyquiz.selector import DEFAULT_DUPLICATE_THRESHOLD, QuestionSelector, candidate_content

logger = logging.getLogger(__name__)


@runtime_checkable
class CorpusProvider(Protocol):
    """Protocol for fetching recently published question texts.

    Implement this against your data store, e.g. a query for the
    contents of the last few days' question sets.
    """

    def recent_contents(self) -> list[str]:
        """Return the question texts to compare new candidates against."""
        ...


class QuestionSelectorNode:
    """LangGraph node that screens generated questions against recent ones.

    Place it after the node that generates candidate questions. It reads
    the candidates and the recent corpus from state and writes the selected
    questions back under ``output_key``.

    Example:
        >>> from langgraph.graph import StateGraph, START, END
        >>>
        >>> selector = QuestionSelectorNode(target_count=10)
        >>>
        >>> builder = StateGraph(DailyQuizState)
        >>> builder.add_node("generate", generate_candidates)
        >>> builder.add_node("select", selector)
        >>> builder.add_edge(START, "generate")
        >>> builder.add_edge("generate", "select")
        >>> builder.add_edge("select", END)
        >>>
        >>> graph = builder.compile()
        >>> result = graph.invoke({"recent_questions": recent})
        >>> print(result["daily_questions"])
    """

    def __init__(
        self,
        *,
        mode: SelectionMode = "least_similar",
        target_count: int = 10,
        threshold: float = DEFAULT_DUPLICATE_THRESHOLD,
        # State field mapping
        candidates_key: str = "candidate_questions",
        corpus_key: str = "recent_questions",
        output_key: str = "daily_questions",
        report_key: str | None = None,
        # Advanced
        corpus_provider: CorpusProvider | None = None,
        validate_candidates: bool = False,
        selector: QuestionSelector | None = None,
    ) -> None:
        """Initialize the QuestionSelectorNode.

        Args:
            mode: "least_similar" keeps the most novel ``target_count``;
                "filter_duplicates" drops anything at or above ``threshold``.
            target_count: Maximum questions to output.
            threshold: Duplicate threshold for "filter_duplicates" mode.
            candidates_key: State key holding generated candidates.
            corpus_key: State key holding recent question texts.
            output_key: State key for the selected questions.
            report_key: If set, also store a SelectionReport under this key.
            corpus_provider: Fallback source for the corpus when state has none.
            validate_candidates: Drop candidates that are not valid Questions.
            selector: Custom selector (e.g. with stop words).
        """
        self.mode = mode
        self.target_count = target_count
        self.threshold = threshold
        self.candidates_key = candidates_key
        self.corpus_key = corpus_key
        self.output_key = output_key
        self.report_key = report_key
        self.corpus_provider = corpus_provider
        self.validate_candidates = validate_candidates
        self._selector = selector or QuestionSelector(threshold=threshold)

    @classmethod
    def from_settings(cls, settings: SelectorSettings, **kwargs: Any) -> "QuestionSelectorNode":
        """Create a node using counts and thresholds from settings."""
        kwargs.setdefault("target_count", settings.target_count)
        kwargs.setdefault("threshold", settings.duplicate_threshold)
        kwargs.setdefault(
            "selector",
            QuestionSelector(
                min_word_length=settings.min_word_length,
                threshold=kwargs["threshold"],
            ),
        )
        return cls(**kwargs)

    def __call__(
        self,
        state: dict[str, Any],
        config: RunnableConfig | None = None,
    ) -> dict[str, Any]:
        """Invoke the node - follows LangGraph node protocol.

        Args:
            state: Current graph state.
            config: LangGraph runnable config (unused, accepted for tracing).

        Returns:
            State update with the selected questions.
        """
        candidates = list(state.get(self.candidates_key) or [])
        if self.validate_candidates:
            candidates = self._valid_candidates(candidates)

        if not candidates:
            return self._result([], None)

        corpus = self._get_corpus(state)

        if self.mode == "least_similar":
            selected = self._selector.select(candidates, corpus, self.target_count)
        else:
            selected = self._selector.filter(candidates, corpus, self.threshold)
            selected = selected[: self.target_count]

        report = None
        if self.report_key:
            report = self._selector.report(
                candidates,
                corpus,
                mode=self.mode,
                count=self.target_count,
                threshold=self.threshold,
            )

        return self._result(selected, report)

    def _get_corpus(self, state: dict[str, Any]) -> list[str]:
        """Read recent question texts from state or the provider.

        Entries may be plain texts or records exposing ``content``.

        Raises:
            TypeError: If an entry is neither a string nor has string content.
        """
        corpus = state.get(self.corpus_key)
        if corpus is None and self.corpus_provider is not None:
            corpus = self.corpus_provider.recent_contents()
        return [
            text if isinstance(text, str) else candidate_content(text, i)
            for i, text in enumerate(corpus or [])
        ]

    def _valid_candidates(self, candidates: list[Any]) -> list[Any]:
        """Keep candidates that validate as Question, logging the rest."""
        valid = []
        for i, candidate in enumerate(candidates):
            if isinstance(candidate, Question):
                valid.append(candidate)
                continue
            try:
                Question.model_validate(
                    candidate, from_attributes=not isinstance(candidate, Mapping)
                )
            except ValidationError as e:
                logger.warning(
                    "Dropping invalid candidate at index %d: %d validation error(s)",
                    i,
                    e.error_count(),
                )
                continue
            valid.append(candidate)
        return valid

    def _result(self, selected: list[Any], report: Any) -> dict[str, Any]:
        result: dict[str, Any] = {self.output_key: selected}
        if self.report_key:
            result[self.report_key] = report
        return result
