# src/taskflow/llm/offline.py

from __future__ import annotations

import json
from collections.abc import Iterable

from ..core.ports import ChatMessage


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Behavior:
    - Breakdown prompts -> three generic steps built from the task title
    - Prioritization prompts -> {"priority": "MEDIUM", ...}
    """

    def stream_chat(self, messages: list[ChatMessage], system_prompt: str) -> Iterable[str]:
        sp = (system_prompt or "").lower()

        user_text = ""
        for m in reversed(messages):
            if m["role"] == "user":
                user_text = m["content"]
                break

        if "task breakdown" in sp:
            title = user_text.split('"')[1] if user_text.count('"') >= 2 else "the task"
            steps = [
                {"title": f"Clarify the scope of {title}", "description": "Write down what done looks like."},
                {"title": f"Do the main work for {title}", "description": "Work through the core of the task."},
                {"title": f"Review {title}", "description": "Check the result before marking it done."},
            ]
            yield json.dumps(steps)
            return

        if "task prioritization" in sp:
            yield json.dumps({"priority": "MEDIUM", "reason": "Offline mode: no external AI is configured."})
            return

        yield "Offline demo mode: no external LLM is configured."
