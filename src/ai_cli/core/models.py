"""Core data models for ai-cli."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Conversation messages
# ---------------------------------------------------------------------------

class Role(Enum):
    """Author of a message in a conversation.

    Values are the lower-case names used on the wire by OpenAI-style APIs.
    """

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def parse(cls, token: str) -> Role:
        """Return the role named by *token*, ignoring case.

        Raises:
            ValueError: If *token* does not name a role.
        """
        try:
            return cls(token.strip().lower())
        except ValueError:
            known = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown role {token!r} (known: {known})") from None


@dataclass(frozen=True)
class Message:
    """A single role-tagged piece of conversation text.

    Attributes:
        role: Who authored the message.
        content: The raw message text.  May be empty, never ``None``.
    """

    role: Role
    content: str

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(Role.ASSISTANT, content)

    def to_dict(self) -> dict[str, str]:
        """Return the ``{"role", "content"}`` mapping used in API requests."""
        return {"role": self.role.value, "content": self.content}


# ---------------------------------------------------------------------------
# Provider accounting
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Usage:
    """Token counts reported by a provider for one call.

    Any count is ``None`` when the backend did not report it.
    """

    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None
