from fastapi import FastAPI

from .auth import router as auth_router
from .chat_messages import router as chat_messages_router
from .notifications import router as notifications_router
from .realtime import router as realtime_router
from .tasks import router as tasks_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(chat_messages_router)
    app.include_router(notifications_router)
    app.include_router(realtime_router)
