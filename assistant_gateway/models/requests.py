"""
Request Models - inbound assistant payload.

The JSON shape is fixed by the kiosk UI:
    {"message": "...", "conversationHistory": [{"role": ..., "content": ...}]}

Anti-Patterns Avoided:
- Optional fields carry explicit defaults
- Validation errors have clear context messages
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assistant_gateway.models.domain import ConversationTurn


class HistoryMessage(BaseModel):
    """
    A prior turn as sent by the UI.

    The UI may send roles other than user/assistant; anything that is not
    "assistant" is treated as the user speaking.
    """

    role: str
    content: str

    def to_turn(self) -> ConversationTurn:
        role = "assistant" if self.role == "assistant" else "user"
        return ConversationTurn(role=role, content=self.content)


class AssistantRequest(BaseModel):
    """
    Assistant request model.

    Attributes:
        message: The new user message (non-empty string; whitespace is kept).
        conversation_history: Prior turns, oldest first.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str
    conversation_history: list[HistoryMessage] = Field(
        default_factory=list,
        alias="conversationHistory",
    )

    @field_validator("message", mode="before")
    @classmethod
    def validate_message(cls, v: Any) -> str:
        """Message must be a non-empty string; no coercion from other types."""
        if not isinstance(v, str) or v == "":
            raise ValueError("Message is required and must be a string")
        return v

    @field_validator("conversation_history", mode="before")
    @classmethod
    def validate_history(cls, v: Any) -> Any:
        """A null history is treated as empty."""
        return [] if v is None else v

    def history_turns(self, window: int) -> list[ConversationTurn]:
        """
        Convert the most recent ``window`` history entries to turns.

        Args:
            window: Maximum number of turns to keep (0 keeps none).

        Returns:
            Up to ``window`` turns, oldest first.
        """
        if window <= 0:
            return []
        return [m.to_turn() for m in self.conversation_history[-window:]]
