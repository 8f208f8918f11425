"""TranscriptRecorder port — optional capture of one request's full exchange."""

from typing import Protocol

from app_weaver.conversation.domain.blocks import ContentBlock
from app_weaver.model.domain.response import ModelResponse


class TranscriptRecorder(Protocol):
    def start(self, user_message: str) -> None: ...

    def record_response(self, model: str, response: ModelResponse) -> None: ...

    def record_tool_results(self, blocks: list[ContentBlock]) -> None: ...

    def finish(self, final_response: str) -> None: ...


class NullTranscriptRecorder:
    """Records nothing."""

    def start(self, user_message: str) -> None:
        pass

    def record_response(self, model: str, response: ModelResponse) -> None:
        pass

    def record_tool_results(self, blocks: list[ContentBlock]) -> None:
        pass

    def finish(self, final_response: str) -> None:
        pass
