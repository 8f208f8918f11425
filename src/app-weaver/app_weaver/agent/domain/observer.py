"""AgentObserver port — domain events emitted by the turn loop."""

from typing import Protocol


class AgentObserver(Protocol):
    def agent_request_started(self, history_turns: int, dry_run: bool) -> None: ...

    def agent_iteration_started(self, iteration: int) -> None: ...

    def agent_empty_response(self, iteration: int) -> None: ...

    def agent_tools_dispatched(
        self, iteration: int, tools: list[str], dry_run: bool
    ) -> None: ...

    def agent_dangling_references(
        self, iteration: int, references: list[str]
    ) -> None: ...

    def agent_token_limit_exceeded(
        self, input_tokens: int, output_tokens: int, limit: int
    ) -> None: ...

    def agent_turn_limit_reached(self, max_turns: int) -> None: ...

    def agent_request_completed(
        self,
        iterations: int,
        input_tokens: int,
        output_tokens: int,
        changed_files: list[str],
    ) -> None: ...
