"""Structlog implementation of the AgentObserver port."""

import structlog


class StructlogAgentObserver:
    """Delegates agent domain events to structlog.

    Satisfies the AgentObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def agent_request_started(self, history_turns: int, dry_run: bool) -> None:
        self._log.info(
            "agent.request_started", history_turns=history_turns, dry_run=dry_run
        )

    def agent_iteration_started(self, iteration: int) -> None:
        self._log.debug("agent.iteration_started", iteration=iteration)

    def agent_empty_response(self, iteration: int) -> None:
        self._log.warning(
            "agent.empty_response",
            iteration=iteration,
            message="Assistant response had no content blocks, adding placeholder",
        )

    def agent_tools_dispatched(
        self, iteration: int, tools: list[str], dry_run: bool
    ) -> None:
        self._log.info(
            "agent.tools_dispatched",
            iteration=iteration,
            tools=tools,
            num_tools=len(tools),
            dry_run=dry_run,
        )

    def agent_dangling_references(
        self, iteration: int, references: list[str]
    ) -> None:
        self._log.warning(
            "agent.dangling_references", iteration=iteration, references=references
        )

    def agent_token_limit_exceeded(
        self, input_tokens: int, output_tokens: int, limit: int
    ) -> None:
        self._log.warning(
            "agent.token_limit_exceeded",
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            limit=limit,
        )

    def agent_turn_limit_reached(self, max_turns: int) -> None:
        self._log.warning("agent.turn_limit_reached", max_turns=max_turns)

    def agent_request_completed(
        self,
        iterations: int,
        input_tokens: int,
        output_tokens: int,
        changed_files: list[str],
    ) -> None:
        self._log.info(
            "agent.request_completed",
            iterations=iterations,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            changed_files=changed_files,
        )
