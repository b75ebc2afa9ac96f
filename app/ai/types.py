from dataclasses import dataclass
from typing import Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class AIConfigError(RuntimeError):
    """The model provider is missing credentials or is unknown."""


class AIResponseError(RuntimeError):
    """The model answered, but not with something we can use."""


class AIClient(Protocol):
    async def complete(self, messages: Sequence[ChatMessage]) -> str: ...
