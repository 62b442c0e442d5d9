"""
Domain Models - conversation turns and provider attempts.

Both entities are transient: the gateway holds no session, and attempts
exist only within the lifetime of a single respond() call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class ConversationTurn(BaseModel):
    """
    One message exchanged in a chat, tagged with its speaker role.

    Frozen so the gateway cannot mutate caller-supplied history.
    """

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class AttemptOutcome(str, Enum):
    """Result of a single provider/model attempt."""

    SUCCESS = "success"
    SKIP = "skip"
    FATAL = "fatal"


@dataclass(frozen=True)
class ProviderAttempt:
    """
    Record of one provider call made while answering a request.

    Attributes:
        provider: Provider name ("deepseek", "gemini").
        model: Model identifier, when the provider takes one.
        outcome: success, skip (try next) or fatal (stop).
        detail: Reply text on success, failure reason otherwise.
        transport: True when the failure happened before any HTTP response.
    """

    provider: str
    model: Optional[str]
    outcome: AttemptOutcome
    detail: str = ""
    transport: bool = False
