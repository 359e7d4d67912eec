"""Tests for QuestionSelectorNode."""

from typing import TypedDict

import pytest
from langgraph.graph import END, START, StateGraph

from dailyquiz.config import SelectorSettings
from dailyquiz.models import SelectionReport
from dailyquiz.node import CorpusProvider, QuestionSelectorNode

from conftest import make_question


class MockCorpusProvider:
    """Mock corpus provider for testing."""

    def __init__(self, contents: list[str]):
        self.contents = contents
        self.calls = 0

    def recent_contents(self) -> list[str]:
        self.calls += 1
        return list(self.contents)


class DailyQuizState(TypedDict, total=False):
    recent_questions: list[str]
    candidate_questions: list[dict]
    daily_questions: list[dict]


class TestQuestionSelectorNode:
    """Tests for QuestionSelectorNode."""

    def test_initialization_defaults(self):
        node = QuestionSelectorNode()
        assert node.mode == "least_similar"
        assert node.target_count == 10
        assert node.threshold == 0.45
        assert node.output_key == "daily_questions"

    def test_selects_least_similar(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(target_count=2)
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        assert result["daily_questions"] == [planet_candidates[2], planet_candidates[3]]

    def test_returns_empty_without_candidates(self, planet_corpus):
        node = QuestionSelectorNode()
        assert node({"recent_questions": planet_corpus}) == {"daily_questions": []}
        assert node({"candidate_questions": []})["daily_questions"] == []

    def test_missing_corpus_keeps_first_candidates(self, planet_candidates):
        node = QuestionSelectorNode(target_count=2)
        result = node({"candidate_questions": planet_candidates})
        assert result["daily_questions"] == planet_candidates[:2]

    def test_filter_mode_caps_at_target(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(mode="filter_duplicates", target_count=2)
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        assert result["daily_questions"] == [planet_candidates[1], planet_candidates[2]]

    def test_filter_mode_threshold(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(mode="filter_duplicates", threshold=0.3)
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        assert result["daily_questions"] == planet_candidates[2:]

    def test_custom_state_keys(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(
            target_count=1,
            candidates_key="generated",
            corpus_key="history",
            output_key="published",
        )
        result = node({"generated": planet_candidates, "history": planet_corpus})
        assert result == {"published": [planet_candidates[2]]}

    def test_uses_corpus_provider_when_state_has_none(self, planet_candidates, planet_corpus):
        provider = MockCorpusProvider(planet_corpus)
        node = QuestionSelectorNode(target_count=1, corpus_provider=provider)
        result = node({"candidate_questions": planet_candidates})
        assert provider.calls == 1
        assert result["daily_questions"] == [planet_candidates[2]]

    def test_state_corpus_wins_over_provider(self, planet_candidates):
        provider = MockCorpusProvider(["Which planet is known as the Red Planet?"])
        node = QuestionSelectorNode(target_count=1, corpus_provider=provider)
        result = node({"candidate_questions": planet_candidates, "recent_questions": []})
        assert provider.calls == 0
        assert result["daily_questions"] == [planet_candidates[0]]

    def test_report_key(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(target_count=2, report_key="selection_report")
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        report = result["selection_report"]
        assert isinstance(report, SelectionReport)
        assert report.selected_indices() == [2, 3]

    def test_report_key_without_candidates(self):
        node = QuestionSelectorNode(report_key="selection_report")
        assert node({}) == {"daily_questions": [], "selection_report": None}

    def test_validate_candidates_drops_invalid(self, planet_corpus):
        valid = make_question("What is the capital of France?")
        invalid = {"content": "Missing everything else"}
        node = QuestionSelectorNode(validate_candidates=True)
        result = node({"candidate_questions": [invalid, valid], "recent_questions": planet_corpus})
        assert result["daily_questions"] == [valid]

    def test_validate_candidates_logs_warning(self, caplog, planet_corpus):
        node = QuestionSelectorNode(validate_candidates=True)
        with caplog.at_level("WARNING", logger="dailyquiz.node"):
            node({"candidate_questions": [{"content": "x"}], "recent_questions": planet_corpus})
        assert "index 0" in caplog.text

    def test_from_settings(self):
        settings = SelectorSettings(target_count=5, generate_count=6, duplicate_threshold=0.6)
        node = QuestionSelectorNode.from_settings(settings, mode="filter_duplicates")
        assert node.target_count == 5
        assert node.threshold == 0.6
        assert node.mode == "filter_duplicates"

    def test_callable_with_config(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(target_count=1)
        config = {"configurable": {"thread_id": "test"}}
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus},
            config=config,
        )
        assert len(result["daily_questions"]) == 1

    def test_negative_target_count_with_report(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(target_count=-1, report_key="selection_report")
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        assert result["daily_questions"] == []
        assert result["selection_report"].target_count == 0
        assert result["selection_report"].selected_count == 0

    def test_threshold_above_one_with_report(self, planet_candidates, planet_corpus):
        node = QuestionSelectorNode(
            mode="filter_duplicates", threshold=1.01, report_key="selection_report"
        )
        result = node(
            {"candidate_questions": planet_candidates, "recent_questions": planet_corpus}
        )
        assert result["daily_questions"] == planet_candidates
        assert result["selection_report"].threshold == 1.01
        assert result["selection_report"].selected_count == 4

    def test_corpus_records_use_content(self, planet_candidates):
        node = QuestionSelectorNode(target_count=1)
        result = node(
            {
                "candidate_questions": planet_candidates,
                "recent_questions": [make_question("Which planet is known as the Red Planet?")],
            }
        )
        assert result["daily_questions"] == [planet_candidates[2]]

    def test_corpus_entry_without_content_raises(self, planet_candidates):
        node = QuestionSelectorNode(target_count=1)
        with pytest.raises(TypeError, match="index 0"):
            node({"candidate_questions": planet_candidates, "recent_questions": [{"id": 1}]})


class TestCorpusProviderProtocol:
    """Tests for CorpusProvider protocol."""

    def test_mock_provider_implements_protocol(self):
        assert isinstance(MockCorpusProvider([]), CorpusProvider)


class TestGraphWiring:
    """Tests running the node inside a compiled LangGraph graph."""

    def test_runs_after_generator_node(self, planet_candidates, planet_corpus):
        def generate(state: DailyQuizState) -> dict:
            return {"candidate_questions": planet_candidates}

        builder = StateGraph(DailyQuizState)
        builder.add_node("generate", generate)
        builder.add_node("select", QuestionSelectorNode(target_count=3))
        builder.add_edge(START, "generate")
        builder.add_edge("generate", "select")
        builder.add_edge("select", END)
        graph = builder.compile()

        result = graph.invoke({"recent_questions": planet_corpus})

        contents = [q["content"] for q in result["daily_questions"]]
        assert len(contents) == 3
        assert "Which planet is known as the Red Planet?" not in contents
