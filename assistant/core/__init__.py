from .memory import Message, Transcript
from .prompt import EMPTY_REPLY, FALLBACK_REPLY, SYSTEM_INSTRUCTION, SessionFlags, build_prompt
from .tools import TOOLS, Tool, UnknownToolError, get_tool

__all__ = [
    "EMPTY_REPLY",
    "FALLBACK_REPLY",
    "Message",
    "SYSTEM_INSTRUCTION",
    "SessionFlags",
    "TOOLS",
    "Tool",
    "Transcript",
    "UnknownToolError",
    "build_prompt",
    "get_tool",
]
