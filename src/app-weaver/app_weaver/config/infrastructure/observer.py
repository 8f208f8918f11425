"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: str, model: str) -> None:
        self._log.info("config.loaded", path=path, model=model)

    def config_dry_run_warning(self) -> None:
        self._log.warning(
            "config.dry_run_warning",
            message="Dry run enabled: tool calls are described, not executed",
        )
