"""Tests for JsonTranscriptRecorder."""

import json
from pathlib import Path

from app_weaver.agent.infrastructure.json_transcript import JsonTranscriptRecorder
from app_weaver.conversation.domain.blocks import (
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from app_weaver.model.domain.response import ModelResponse, TokenUsage


def _response() -> ModelResponse:
    return ModelResponse(
        content=[
            TextBlock(text="Creating."),
            ToolUseBlock(id="t1", name="write_file", input={"path": "a.js"}),
        ],
        usage=TokenUsage(input_tokens=12, output_tokens=4),
        stop_reason="tool_use",
    )


class TestJsonTranscriptRecorder:
    def test_writes_one_file_per_request(self, tmp_path: Path) -> None:
        recorder = JsonTranscriptRecorder(directory=tmp_path / "transcripts")

        recorder.start(user_message="Build a counter")
        transcript_id = recorder.transcript_id
        recorder.record_response(model="gpt-4o", response=_response())
        recorder.record_tool_results(
            blocks=[ToolResultBlock(tool_use_id="t1", content="Created a.js")]
        )
        recorder.finish(final_response="Done.")

        path = tmp_path / "transcripts" / f"transcript-{transcript_id}.json"
        data = json.loads(path.read_text())
        assert data["id"] == transcript_id
        assert data["final_response"] == "Done."
        assert [entry["role"] for entry in data["entries"]] == [
            "user",
            "assistant",
            "user",
        ]
        assert data["entries"][0]["content"] == "Build a counter"

    def test_assistant_entry_carries_blocks_and_usage(self, tmp_path: Path) -> None:
        recorder = JsonTranscriptRecorder(directory=tmp_path)

        recorder.start(user_message="hi")
        transcript_id = recorder.transcript_id
        recorder.record_response(model="gpt-4o", response=_response())
        recorder.finish(final_response="")

        data = json.loads((tmp_path / f"transcript-{transcript_id}.json").read_text())
        entry = data["entries"][1]
        assert entry["content"][1] == {
            "type": "tool_use",
            "id": "t1",
            "name": "write_file",
            "input": {"path": "a.js"},
        }
        assert entry["metadata"] == {
            "model": "gpt-4o",
            "token_usage": {"input_tokens": 12, "output_tokens": 4},
            "stop_reason": "tool_use",
        }

    def test_finish_without_start_writes_nothing(self, tmp_path: Path) -> None:
        recorder = JsonTranscriptRecorder(directory=tmp_path)

        recorder.finish(final_response="Done.")

        assert list(tmp_path.iterdir()) == []

    def test_each_request_gets_a_new_id(self, tmp_path: Path) -> None:
        recorder = JsonTranscriptRecorder(directory=tmp_path)

        recorder.start(user_message="one")
        first = recorder.transcript_id
        recorder.finish(final_response="1")
        recorder.start(user_message="two")
        second = recorder.transcript_id
        recorder.finish(final_response="2")

        assert first != second
        assert recorder.transcript_id is None
        assert len(list(tmp_path.glob("transcript-*.json"))) == 2
