"""Top-level AppWeaverConfig aggregate — the root configuration object."""

from pydantic import BaseModel

from app_weaver.config.domain.agent import AgentConfig
from app_weaver.config.domain.logging import LoggingConfig
from app_weaver.config.domain.model import ModelConfig
from app_weaver.config.domain.streaming import StreamingConfig
from app_weaver.config.domain.web_search import WebSearchConfig
from app_weaver.config.domain.workspace import WorkspaceConfig


class AppWeaverConfig(BaseModel, frozen=True):
    """Root configuration aggregate for an app-weaver agent."""

    model: ModelConfig
    workspace: WorkspaceConfig
    agent: AgentConfig = AgentConfig()
    streaming: StreamingConfig = StreamingConfig()
    web_search: WebSearchConfig = WebSearchConfig()
    logging: LoggingConfig = LoggingConfig()
