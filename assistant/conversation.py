from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel

from assistant.core.memory import Message, Transcript
from assistant.core.prompt import (
    EMPTY_REPLY,
    FALLBACK_REPLY,
    SYSTEM_INSTRUCTION,
    SessionFlags,
    build_prompt,
)
from assistant.core.tools import Tool, get_tool
from assistant.generation import GenerationClient
from config.settings import get_settings


logger = logging.getLogger("tradedesk.conversation")


class SubmitStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_BUSY = "skipped_busy"
    ABANDONED = "abandoned"


class SubmitResult(BaseModel):
    status: SubmitStatus
    message: Optional[Message] = None

    @property
    def skipped(self) -> bool:
        return self.status in (SubmitStatus.SKIPPED_EMPTY, SubmitStatus.SKIPPED_BUSY)


class ConversationManager:
    """Owns the active tool and its transcript, and runs one turn at a time.

    At most one generation is in flight per manager. Switching tools clears
    the transcript and suppresses the reply of any generation still running
    for the previous selection.
    """

    def __init__(
        self,
        client: Optional[GenerationClient] = None,
        tool: Union[Tool, str, None] = None,
        flags: Optional[SessionFlags] = None,
        system_instruction: str = SYSTEM_INSTRUCTION,
    ) -> None:
        self._client = client or GenerationClient()
        self._system_instruction = system_instruction
        self._active_tool = get_tool(tool if tool is not None else get_settings().default_tool)
        self._flags = flags or SessionFlags()
        self._transcript = Transcript()
        self._send_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._epoch = 0

    @property
    def active_tool(self) -> Tool:
        return self._active_tool

    @property
    def flags(self) -> SessionFlags:
        return self._flags

    @property
    def transcript(self) -> Tuple[Message, ...]:
        with self._state_lock:
            return self._transcript.snapshot()

    @property
    def in_flight(self) -> bool:
        return self._send_lock.locked()

    def set_pro(self, pro: bool) -> None:
        self._flags = SessionFlags(pro=pro)

    def select_tool(self, tool: Union[Tool, str]) -> Tool:
        selected = get_tool(tool)
        with self._state_lock:
            self._active_tool = selected
            self._transcript.clear()
            self._epoch += 1
        logger.info("Tool selected: %s", selected.id)
        return selected

    def submit(self, user_text: str) -> SubmitResult:
        if not user_text or not user_text.strip():
            return SubmitResult(status=SubmitStatus.SKIPPED_EMPTY)
        if not self._send_lock.acquire(blocking=False):
            logger.info("Submission ignored: a generation is already in flight")
            return SubmitResult(status=SubmitStatus.SKIPPED_BUSY)

        try:
            with self._state_lock:
                tool = self._active_tool
                epoch = self._epoch
                self._transcript.append("user", user_text)
            prompt = build_prompt(tool, user_text, self._flags)

            try:
                reply = self._client.generate(prompt, self._system_instruction)
            except Exception as exc:
                logger.warning(
                    "Generation failed for tool=%s: %s: %s",
                    tool.id,
                    type(exc).__name__,
                    exc,
                )
                status, content = SubmitStatus.FAILED, FALLBACK_REPLY
            else:
                status = SubmitStatus.OK
                content = reply if reply and reply.strip() else EMPTY_REPLY

            with self._state_lock:
                if epoch != self._epoch:
                    logger.info("Discarding reply for abandoned tool=%s", tool.id)
                    return SubmitResult(status=SubmitStatus.ABANDONED)
                message = self._transcript.append("assistant", content)
            return SubmitResult(status=status, message=message)
        finally:
            self._send_lock.release()
