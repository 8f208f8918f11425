"""FakeAgentObserver — records agent domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestStartedEvent:
    history_turns: int
    dry_run: bool


@dataclass(frozen=True)
class ToolsDispatchedEvent:
    iteration: int
    tools: list[str]
    dry_run: bool


@dataclass(frozen=True)
class DanglingReferencesEvent:
    iteration: int
    references: list[str]


@dataclass(frozen=True)
class TokenLimitExceededEvent:
    input_tokens: int
    output_tokens: int
    limit: int


@dataclass(frozen=True)
class RequestCompletedEvent:
    iterations: int
    input_tokens: int
    output_tokens: int
    changed_files: list[str]


class FakeAgentObserver:
    """Records all emitted agent events as typed frozen dataclasses."""

    def __init__(self) -> None:
        self.started: list[RequestStartedEvent] = []
        self.iterations: list[int] = []
        self.empty_responses: list[int] = []
        self.dispatched: list[ToolsDispatchedEvent] = []
        self.dangling: list[DanglingReferencesEvent] = []
        self.token_limits: list[TokenLimitExceededEvent] = []
        self.turn_limits: list[int] = []
        self.completed: list[RequestCompletedEvent] = []

    def agent_request_started(self, history_turns: int, dry_run: bool) -> None:
        self.started.append(
            RequestStartedEvent(history_turns=history_turns, dry_run=dry_run)
        )

    def agent_iteration_started(self, iteration: int) -> None:
        self.iterations.append(iteration)

    def agent_empty_response(self, iteration: int) -> None:
        self.empty_responses.append(iteration)

    def agent_tools_dispatched(
        self, iteration: int, tools: list[str], dry_run: bool
    ) -> None:
        self.dispatched.append(
            ToolsDispatchedEvent(iteration=iteration, tools=tools, dry_run=dry_run)
        )

    def agent_dangling_references(
        self, iteration: int, references: list[str]
    ) -> None:
        self.dangling.append(
            DanglingReferencesEvent(iteration=iteration, references=references)
        )

    def agent_token_limit_exceeded(
        self, input_tokens: int, output_tokens: int, limit: int
    ) -> None:
        self.token_limits.append(
            TokenLimitExceededEvent(
                input_tokens=input_tokens, output_tokens=output_tokens, limit=limit
            )
        )

    def agent_turn_limit_reached(self, max_turns: int) -> None:
        self.turn_limits.append(max_turns)

    def agent_request_completed(
        self,
        iterations: int,
        input_tokens: int,
        output_tokens: int,
        changed_files: list[str],
    ) -> None:
        self.completed.append(
            RequestCompletedEvent(
                iterations=iterations,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                changed_files=changed_files,
            )
        )
