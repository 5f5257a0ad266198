from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from venue_assistant.core.config import settings

Role = Literal["user", "assistant"]
ProviderName = Literal["primary", "secondary", "fallback"]

class ChatMessage(BaseModel):
    role: Role
    content: str

class ChatQueryIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1, max_length=settings.MAX_MESSAGE_CHARS)
    chat_history: list[ChatMessage] = Field(default_factory=list, alias="chatHistory")

class AIResponse(BaseModel):
    success: bool = True
    message: str
    provider: ProviderName
    suggestions: list[str] | None = Field(default=None, max_length=3)

class ChatErrorOut(BaseModel):
    success: bool = False
    error: str
    message: str
    provider: Literal["error"] = "error"

class ChatStatusOut(BaseModel):
    configured: bool
    providers: dict[str, bool]      # "primary"/"secondary" -> key present and plausible
    knowledge_chunks: int
