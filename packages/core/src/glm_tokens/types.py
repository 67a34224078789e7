"""Conversation message types."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

__all__ = ["Role", "ChatMessage"]

# Roles the bundled GLM template knows how to frame. ``ChatMessage`` accepts
# any string; the template decides what to do with the rest.
Role = Literal["system", "user", "assistant", "tool"]


class ChatMessage(BaseModel):
    """A message for tokenization with the chat template applied."""

    model_config = ConfigDict(frozen=True)

    role: str
    content: str

    @classmethod
    def system(cls, content: str) -> ChatMessage:
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> ChatMessage:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> ChatMessage:
        return cls(role="assistant", content=content)

    @classmethod
    def tool(cls, content: str) -> ChatMessage:
        return cls(role="tool", content=content)

    def to_template(self) -> dict[str, Any]:
        """Plain mapping handed to the template context."""
        return self.model_dump()
