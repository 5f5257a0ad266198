import asyncio
import threading

import structlog
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from venue_assistant.api.deps import get_assistant, get_store
from venue_assistant.core.config import settings
from venue_assistant.core.errors import RequestCancelled
from venue_assistant.schemas.chat import AIResponse, ChatErrorOut, ChatQueryIn, ChatStatusOut
from venue_assistant.services.knowledge.store import KnowledgeStore
from venue_assistant.services.rag import AnswerService

logger = structlog.get_logger(__name__)

router = APIRouter()

DISCONNECT_POLL_SECONDS = 0.5
CLIENT_CLOSED_REQUEST = 499


async def _watch_disconnect(request: Request, cancel: threading.Event) -> None:
    while not cancel.is_set():
        if await request.is_disconnected():
            cancel.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


@router.post("/query", response_model=AIResponse, responses={500: {"model": ChatErrorOut}})
async def chat_query(
    payload: ChatQueryIn,
    request: Request,
    assistant: AnswerService = Depends(get_assistant),
):
    history = payload.chat_history[-settings.MAX_HISTORY_MESSAGES:]

    # the answer chain blocks on HTTP calls, so it runs in the threadpool;
    # a client disconnect sets the event and stops any pending retry
    cancel = threading.Event()
    watcher = asyncio.create_task(_watch_disconnect(request, cancel))
    try:
        return await run_in_threadpool(assistant.generate_answer, payload.message, history, cancel)
    except RequestCancelled:
        logger.info("chat.cancelled")
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except Exception:
        logger.exception("chat.failed")
        error = ChatErrorOut(
            error="Failed to generate response. Please try again.",
            message=(
                "I'm having trouble responding right now. Please try again or contact "
                f"{settings.SUPPORT_EMAIL} for help."
            ),
        )
        return JSONResponse(status_code=500, content=error.model_dump())
    finally:
        cancel.set()
        watcher.cancel()


@router.get("/status", response_model=ChatStatusOut)
def chat_status(
    assistant: AnswerService = Depends(get_assistant),
    store: KnowledgeStore = Depends(get_store),
):
    providers = assistant.provider_status()
    return ChatStatusOut(
        configured=any(providers.values()),
        providers=providers,
        knowledge_chunks=len(store),
    )
