"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from app_weaver.config.domain.config import AppWeaverConfig
from app_weaver.config.domain.observer import ConfigObserver
from app_weaver.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from app_weaver.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an AppWeaverConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> AppWeaverConfig:
        """
        Load, interpolate, validate, and return an AppWeaverConfig.

        A relative workspace path is resolved against the config file's directory.

        Raises:
            ConfigLoadError: if the file does not exist.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset
                (all collected first).
            ConfigValidationError: if the file is not a mapping or the schema
                is violated.
            yaml.YAMLError: if the file is not valid YAML.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        cfg = _build_config(resolved=_resolve_workspace(interpolated, base=path.parent))
        if cfg.agent.dry_run:
            self._observer.config_dry_run_warning()
        self._observer.config_loaded(path=str(path), model=cfg.model.model)
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, dict):
        raise ConfigValidationError("top-level YAML value must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _resolve_workspace(interpolated: dict[str, Any], base: Path) -> dict[str, Any]:
    workspace = interpolated.get("workspace")
    if not isinstance(workspace, dict) or not isinstance(workspace.get("path"), str):
        return interpolated

    workspace_path = Path(workspace["path"])
    if not workspace_path.is_absolute():
        workspace_path = base / workspace_path
    return {**interpolated, "workspace": {**workspace, "path": workspace_path}}


def _build_config(resolved: Any) -> AppWeaverConfig:
    try:
        return AppWeaverConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
