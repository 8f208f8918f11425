"""FakeTranscriptRecorder — keeps transcript entries in memory."""

from typing import Any

from app_weaver.conversation.domain.blocks import ContentBlock
from app_weaver.model.domain.response import ModelResponse


class FakeTranscriptRecorder:
    def __init__(self) -> None:
        self.entries: list[tuple[str, Any]] = []

    def start(self, user_message: str) -> None:
        self.entries.append(("start", user_message))

    def record_response(self, model: str, response: ModelResponse) -> None:
        self.entries.append(("response", model))

    def record_tool_results(self, blocks: list[ContentBlock]) -> None:
        self.entries.append(("tool_results", len(blocks)))

    def finish(self, final_response: str) -> None:
        self.entries.append(("finish", final_response))
