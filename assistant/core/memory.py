from __future__ import annotations

"""In-process conversation memory.

There is no server-side persistence: a transcript lives as long as the
session that owns it and is wiped whenever the active tool changes.
"""

import uuid
from typing import List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["user", "assistant"]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: Role
    content: str


class Transcript:
    """Append-only, insertion-ordered list of messages for one tool."""

    def __init__(self) -> None:
        self._messages: List[Message] = []

    def append(self, role: Role, content: str) -> Message:
        message = Message(role=role, content=content)
        self._messages.append(message)
        return message

    def clear(self) -> None:
        self._messages = []

    def snapshot(self) -> Tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(tuple(self._messages))
