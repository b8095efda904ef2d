from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionState(str, Enum):
    BOOTSTRAPPING = "bootstrapping"
    AWAITING_COMMAND = "awaiting_command"
    PROCESSING = "processing"
    SAVING = "saving"
    LOADING = "loading"
    TERMINATED = "terminated"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=MessageRole.ASSISTANT, content=content)

    def as_chat(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class ModelProfile(BaseModel):
    """Request settings for one model role (narrator or compactor)."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(..., min_length=1)
    temperature: float = Field(..., ge=0.0, le=2.0)
    max_tokens: int = Field(..., gt=0)
    system_prompt: Optional[str] = None
