"""Quickstart example: Generate a batch of quiz questions and keep the freshest.

This example wires an LLM generator in front of QuestionSelectorNode so the
daily set avoids anything asked in the last few days.
Run with: python examples/quickstart.py
"""

from typing import Any, TypedDict

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from langgraph.graph import END, START, StateGraph
from pydantic import BaseModel, Field

from dailyquiz import (
    Question,
    QuestionSelectorNode,
    SelectorSettings,
    format_questions_for_display,
    get_exclusion_instruction,
)


class DailyQuizState(TypedDict, total=False):
    recent_questions: list[str]
    candidate_questions: list[Question]
    daily_questions: list[Question]
    selection_report: Any


class GeneratedBatch(BaseModel):
    """Structured output for one generated batch."""

    questions: list[Question] = Field(description="Multiple-choice quiz questions")


# Pretend these came from the last three days' published sets
RECENT = [
    "Which planet is known as the Red Planet?",
    "Who is known as the Father of the Indian Constitution?",
    "Which river is the longest in India?",
]


def make_generator(model: ChatOpenAI, settings: SelectorSettings):
    """Build a graph node that asks the model for a batch of candidates."""
    structured_model = model.with_structured_output(GeneratedBatch)

    def generate(state: DailyQuizState) -> dict:
        exclusion = get_exclusion_instruction(
            state.get("recent_questions", []),
            limit=settings.exclusion_limit,
            max_chars=settings.exclusion_max_chars,
            window_days=settings.corpus_window_days,
        )
        messages = [
            SystemMessage(
                content=(
                    "You write general-knowledge multiple-choice questions. Each question "
                    "has four options a-d, one correct option, a short explanation and a "
                    "category."
                )
            ),
            HumanMessage(
                content=f"Generate exactly {settings.generate_count} questions.\n\n{exclusion}"
            ),
        ]
        batch = structured_model.invoke(messages)
        return {"candidate_questions": batch.questions}

    return generate


def main():
    settings = SelectorSettings.from_env()

    # 1. Create the nodes
    model = ChatOpenAI(model="gpt-5-nano", temperature=0.7)
    selector = QuestionSelectorNode.from_settings(
        settings,
        report_key="selection_report",
    )

    # 2. Build the graph
    builder = StateGraph(DailyQuizState)
    builder.add_node("generate", make_generator(model, settings))
    builder.add_node("select", selector)

    builder.add_edge(START, "generate")
    builder.add_edge("generate", "select")
    builder.add_edge("select", END)

    graph = builder.compile()

    # 3. Run it
    result = graph.invoke({"recent_questions": RECENT})

    # 4. Inspect the daily set
    print(f"Today's questions ({len(result['daily_questions'])}):")
    print(format_questions_for_display(result["daily_questions"], numbered=True, prefix="  "))

    report = result["selection_report"]
    print(f"\nDropped: {report.candidate_count - report.selected_count}")


if __name__ == "__main__":
    main()
