from contextlib import asynccontextmanager

from fastapi import FastAPI

from venue_assistant.api import router as api_router
from venue_assistant.core.config import settings
from venue_assistant.core.logging import LoggingMiddleware, configure_logging
from venue_assistant.services.knowledge.store import get_knowledge_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # load the corpus once, before the first request
    get_knowledge_store()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(LoggingMiddleware)
app.include_router(api_router)

@app.get("/health")
def health():
    return {"status": "ok"}
