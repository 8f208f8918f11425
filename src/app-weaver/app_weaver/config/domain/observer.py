"""Observer port for the config domain — defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: str, model: str) -> None: ...

    def config_dry_run_warning(self) -> None: ...
