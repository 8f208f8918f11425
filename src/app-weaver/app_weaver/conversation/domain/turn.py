"""Turn value object — one role-tagged group of content blocks."""

from typing import Literal

from pydantic import BaseModel

from app_weaver.conversation.domain.blocks import ContentBlock

type Role = Literal["user", "assistant"]


class Turn(BaseModel, frozen=True):
    """One conversational turn.

    content may only be empty on the trailing assistant turn of a conversation;
    the invariant is enforced by validate_conversation_history, not here, so that
    restored histories can be loaded and then diagnosed.
    """

    role: Role
    content: list[ContentBlock]
