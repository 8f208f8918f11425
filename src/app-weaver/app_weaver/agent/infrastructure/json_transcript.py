"""JsonTranscriptRecorder — writes one JSON transcript file per request."""

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from app_weaver.conversation.domain.blocks import ContentBlock
from app_weaver.model.domain.response import ModelResponse

_BLOCKS = TypeAdapter(list[ContentBlock])


class JsonTranscriptRecorder:
    """Buffers transcript entries in memory and writes them on finish().

    Files are named transcript-<id>.json inside directory.
    Satisfies the TranscriptRecorder protocol structurally.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory
        self._transcript_id: str | None = None
        self._started_at: str | None = None
        self._entries: list[dict[str, Any]] = []

    @property
    def transcript_id(self) -> str | None:
        return self._transcript_id

    def start(self, user_message: str) -> None:
        self._transcript_id = uuid.uuid4().hex
        self._started_at = _now()
        self._entries = [
            {"timestamp": self._started_at, "role": "user", "content": user_message}
        ]

    def record_response(self, model: str, response: ModelResponse) -> None:
        self._entries.append(
            {
                "timestamp": _now(),
                "role": "assistant",
                "content": _BLOCKS.dump_python(response.content, mode="json"),
                "metadata": {
                    "model": model,
                    "token_usage": response.usage.model_dump(),
                    "stop_reason": response.stop_reason,
                },
            }
        )

    def record_tool_results(self, blocks: list[ContentBlock]) -> None:
        self._entries.append(
            {
                "timestamp": _now(),
                "role": "user",
                "content": _BLOCKS.dump_python(blocks, mode="json"),
            }
        )

    def finish(self, final_response: str) -> None:
        """Write the transcript to disk. Does nothing if start() was never called."""
        if self._transcript_id is None:
            return
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / f"transcript-{self._transcript_id}.json"
        path.write_text(
            json.dumps(
                {
                    "id": self._transcript_id,
                    "started_at": self._started_at,
                    "ended_at": _now(),
                    "entries": self._entries,
                    "final_response": final_response,
                },
                indent=2,
            ),
            encoding="utf-8",
        )
        self._transcript_id = None


def _now() -> str:
    return datetime.now(UTC).isoformat()
