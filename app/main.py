from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
import logging
from pydantic import BaseModel, Field

from assistant.conversation import ConversationManager, SubmitStatus
from assistant.core.tools import TOOLS, UnknownToolError
from assistant.sessions import SessionNotFoundError, SessionRegistry
from config.settings import get_settings


settings = get_settings()

logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("tradedesk")

app = FastAPI(title="TradeDesk B2B Assistant", version="1.0.0")

# CORS: allow local frontend during development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

registry = SessionRegistry()


def get_registry() -> SessionRegistry:
    return registry


class CreateSessionRequest(BaseModel):
    tool_id: Optional[str] = Field(None, description="Initial tool; defaults to DEFAULT_TOOL")
    pro: bool = Field(False, description="Whether the session belongs to a PRO user")


class SelectToolRequest(BaseModel):
    tool_id: str


class PlanRequest(BaseModel):
    pro: bool


class SubmitRequest(BaseModel):
    content: str = Field(..., description="User's latest message")


def _snapshot(session_id: str, manager: ConversationManager) -> Dict[str, Any]:
    return {
        "session_id": session_id,
        "tool": manager.active_tool.model_dump(),
        "pro": manager.flags.pro,
        "in_flight": manager.in_flight,
        "messages": [m.model_dump() for m in manager.transcript],
    }


def _lookup(registry: SessionRegistry, session_id: str) -> ConversationManager:
    try:
        return registry.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def _unknown_tool(e: UnknownToolError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


@app.get("/tools")
def list_tools() -> List[Dict[str, Any]]:
    return [tool.model_dump() for tool in TOOLS]


@app.post("/sessions", status_code=201)
def create_session(
    req: CreateSessionRequest, registry: SessionRegistry = Depends(get_registry)
) -> Dict[str, Any]:
    try:
        session_id, manager = registry.create(tool=req.tool_id, pro=req.pro)
    except UnknownToolError as e:
        raise _unknown_tool(e)
    logger.info(
        "Session created: id=%s tool=%s pro=%s",
        session_id,
        manager.active_tool.id,
        manager.flags.pro,
    )
    return _snapshot(session_id, manager)


@app.get("/sessions/{session_id}")
def get_session(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
) -> Dict[str, Any]:
    return _snapshot(session_id, _lookup(registry, session_id))


@app.put("/sessions/{session_id}/tool")
def select_tool(
    session_id: str,
    req: SelectToolRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    manager = _lookup(registry, session_id)
    try:
        manager.select_tool(req.tool_id)
    except UnknownToolError as e:
        raise _unknown_tool(e)
    return _snapshot(session_id, manager)


@app.put("/sessions/{session_id}/plan")
def set_plan(
    session_id: str,
    req: PlanRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    manager = _lookup(registry, session_id)
    manager.set_pro(req.pro)
    logger.info("Session plan updated: id=%s pro=%s", session_id, req.pro)
    return _snapshot(session_id, manager)


@app.post("/sessions/{session_id}/messages")
def submit_message(
    session_id: str,
    req: SubmitRequest,
    registry: SessionRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    manager = _lookup(registry, session_id)
    logger.info(
        "Incoming message: session=%s tool=%s content_len=%s",
        session_id,
        manager.active_tool.id,
        len(req.content or ""),
    )
    result = manager.submit(req.content)
    if result.status == SubmitStatus.SKIPPED_BUSY:
        raise HTTPException(
            status_code=409,
            detail="A reply is still being generated for this session",
        )
    return {
        "status": result.status.value,
        "reply": result.message.model_dump() if result.message else None,
        "session": _snapshot(session_id, manager),
    }


@app.delete("/sessions/{session_id}", status_code=204)
def delete_session(
    session_id: str, registry: SessionRegistry = Depends(get_registry)
) -> Response:
    try:
        registry.drop(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@app.get("/health")
def health():
    return {"status": "ok"}
