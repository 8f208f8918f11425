"""Wiring of a TurnLoopOrchestrator from an AppWeaverConfig."""

from app_weaver.agent.application.orchestrator import TurnLoopOrchestrator
from app_weaver.agent.domain.pacing import NoPacing, PacingPolicy, RealTimePacing
from app_weaver.agent.domain.prompt import DEFAULT_SYSTEM_PROMPT
from app_weaver.agent.domain.transcript import TranscriptRecorder
from app_weaver.agent.infrastructure.json_transcript import JsonTranscriptRecorder
from app_weaver.agent.infrastructure.observer import StructlogAgentObserver
from app_weaver.config.domain.config import AppWeaverConfig
from app_weaver.conversation.infrastructure.observer import (
    StructlogConversationObserver,
)
from app_weaver.model.infrastructure.litellm_client import LiteLLMModelClient
from app_weaver.model.infrastructure.observer import StructlogModelObserver
from app_weaver.tools.infrastructure.observer import StructlogToolObserver
from app_weaver.tools.infrastructure.pool import WorkspaceToolPool
from app_weaver.tools.infrastructure.workspace import Workspace
from app_weaver.verification.infrastructure.observer import (
    StructlogVerificationObserver,
)
from app_weaver.verification.infrastructure.workspace_runner import (
    WorkspaceVerificationRunner,
)


def create_orchestrator(
    config: AppWeaverConfig,
    paced: bool = True,
    system_prompt: str = DEFAULT_SYSTEM_PROMPT,
) -> TurnLoopOrchestrator:
    """Build an orchestrator backed by LiteLLM and the configured workspace.

    paced=False disables the streaming delays, for non-interactive output.
    """
    workspace = Workspace(
        root=config.workspace.path, max_file_size=config.workspace.max_file_size
    )
    pacing: PacingPolicy = (
        RealTimePacing(config=config.streaming)
        if paced
        else NoPacing(chunk_size=config.streaming.reasoning_chunk_size)
    )
    transcripts: TranscriptRecorder | None = None
    if config.logging.capture_transcripts:
        transcripts = JsonTranscriptRecorder(directory=config.logging.transcript_dir)

    return TurnLoopOrchestrator(
        model_client=LiteLLMModelClient(
            config=config.model, observer=StructlogModelObserver()
        ),
        tool_pool=WorkspaceToolPool(
            workspace=workspace,
            observer=StructlogToolObserver(),
            max_concurrent=config.workspace.max_concurrent_tools,
        ),
        verification_runner=WorkspaceVerificationRunner(
            workspace=workspace.root, observer=StructlogVerificationObserver()
        ),
        config=config.agent,
        pacing=pacing,
        observer=StructlogAgentObserver(),
        conversation_observer=StructlogConversationObserver(),
        system_prompt=system_prompt,
        model_name=config.model.model,
        web_search=config.web_search,
        transcripts=transcripts,
    )
