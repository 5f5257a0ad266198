from fastapi import APIRouter
from venue_assistant.api.routes import chat

router = APIRouter()
router.include_router(chat.router, prefix="/chat", tags=["chat"])
