from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple, Union

from assistant.conversation import ConversationManager
from assistant.core.prompt import SessionFlags
from assistant.core.tools import Tool
from assistant.generation import GenerationClient
from config.settings import get_settings


logger = logging.getLogger("tradedesk.sessions")


class SessionNotFoundError(KeyError):
    def __init__(self, session_id: str) -> None:
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class SessionRegistry:
    """Process-local map of session id to conversation manager.

    Holds at most ``max_sessions`` entries. When full, the least recently
    used session that has no generation in flight is evicted to make room.
    """

    def __init__(
        self,
        client_factory: Callable[[], GenerationClient] = GenerationClient,
        max_sessions: Optional[int] = None,
    ) -> None:
        if max_sessions is None:
            max_sessions = get_settings().max_sessions
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self._client_factory = client_factory
        self._max_sessions = max_sessions
        self._sessions: "OrderedDict[str, ConversationManager]" = OrderedDict()
        self._lock = threading.Lock()

    def _evict_one(self) -> None:
        victim = next(
            (sid for sid, manager in self._sessions.items() if not manager.in_flight),
            next(iter(self._sessions)),
        )
        del self._sessions[victim]
        logger.info("Session evicted: id=%s (limit=%s)", victim, self._max_sessions)

    def create(
        self, tool: Union[Tool, str, None] = None, pro: bool = False
    ) -> Tuple[str, ConversationManager]:
        manager = ConversationManager(
            client=self._client_factory(),
            tool=tool,
            flags=SessionFlags(pro=pro),
        )
        session_id = uuid.uuid4().hex
        with self._lock:
            while len(self._sessions) >= self._max_sessions:
                self._evict_one()
            self._sessions[session_id] = manager
        return session_id, manager

    def get(self, session_id: str) -> ConversationManager:
        with self._lock:
            manager = self._sessions.get(session_id)
            if manager is not None:
                self._sessions.move_to_end(session_id)
        if manager is None:
            raise SessionNotFoundError(session_id)
        return manager

    def drop(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
