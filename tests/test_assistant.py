# tests/test_assistant.py

from __future__ import annotations

import json

import pytest

from taskflow.core.errors import CollaboratorError
from taskflow.llm.assistant import TaskAssistant
from taskflow.llm.offline import OfflineLLMClient
from taskflow.tasks.task_models import Priority

from .fakes import FakeLLMClient


def test_generate_subtasks_parses_json_array() -> None:
    llm = FakeLLMClient(json.dumps([{"title": "Outline", "description": "d1"}, {"title": "Draft", "description": ""}]))
    out = TaskAssistant(llm).generate_subtasks("Write post", "blog")

    assert [s.title for s in out] == ["Outline", "Draft"]
    messages, system_prompt = llm.calls[0]
    assert '"Write post"' in messages[0]["content"]
    assert "3 to 5" in system_prompt


def test_generate_subtasks_extracts_json_from_prose_and_truncates() -> None:
    items = [{"title": f"Step {i}", "description": ""} for i in range(7)]
    llm = FakeLLMClient("Sure! Here you go:\n```json\n" + json.dumps(items) + "\n```")
    out = TaskAssistant(llm).generate_subtasks("t", "")
    assert [s.title for s in out] == [f"Step {i}" for i in range(5)]


def test_generate_subtasks_accepts_wrapped_list() -> None:
    llm = FakeLLMClient(json.dumps({"subtasks": [{"title": "A"}, {"title": ""}, "junk"]}))
    assert [s.title for s in TaskAssistant(llm).generate_subtasks("t", "")] == ["A"]


def test_generate_subtasks_empty_output_is_empty_list() -> None:
    assert TaskAssistant(FakeLLMClient("  ")).generate_subtasks("t", "") == []


@pytest.mark.parametrize("text", ["no json here", '"just a string"'])
def test_generate_subtasks_bad_output_raises(text: str) -> None:
    with pytest.raises(CollaboratorError):
        TaskAssistant(FakeLLMClient(text)).generate_subtasks("t", "")


def test_transport_failure_becomes_collaborator_error() -> None:
    llm = FakeLLMClient(error=RuntimeError("LLM is rate-limited. Try again later."))
    with pytest.raises(CollaboratorError):
        TaskAssistant(llm).generate_subtasks("t", "")
    with pytest.raises(CollaboratorError):
        TaskAssistant(llm).suggest_priority("t", None)


def test_suggest_priority() -> None:
    llm = FakeLLMClient('{"priority": "urgent", "reason": "due tomorrow"}')
    result = TaskAssistant(llm).suggest_priority("Pay rent", "2024-01-11")

    assert result.priority is Priority.URGENT
    assert result.reason == "due tomorrow"
    assert "due on 2024-01-11" in llm.calls[0][0][0]["content"]


def test_suggest_priority_without_due_date_mentions_it() -> None:
    llm = FakeLLMClient('{"priority": "LOW", "reason": ""}')
    TaskAssistant(llm).suggest_priority("Someday", None)
    assert "no specific date" in llm.calls[0][0][0]["content"]


def test_suggest_priority_unknown_value_raises() -> None:
    with pytest.raises(CollaboratorError):
        TaskAssistant(FakeLLMClient('{"priority": "CRITICAL"}')).suggest_priority("t", None)


def test_offline_client_produces_usable_suggestions() -> None:
    assistant = TaskAssistant(OfflineLLMClient())

    steps = assistant.generate_subtasks("Plan trip", "")
    assert len(steps) == 3
    assert "Plan trip" in steps[0].title

    assert assistant.suggest_priority("Plan trip", None).priority is Priority.MEDIUM
