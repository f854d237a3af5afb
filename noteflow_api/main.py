from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from noteflow_api.db import dispose_engine
from noteflow_api.db_init import init_db
from noteflow_api.routes import auth, bootstrap, chat, music, settings, tasks

logger = logging.getLogger("noteflow_api")

ROUTERS = (auth, bootstrap, tasks, settings, music, chat)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("BACKEND_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    # httpx logs every LLM request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    try:
        yield
    finally:
        await dispose_engine()


async def internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal error"})


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="NoteFlow API", version="0.1.0", lifespan=lifespan)
    for module in ROUTERS:
        app.include_router(module.router)
    app.add_exception_handler(Exception, internal_error)

    @app.get("/health")
    async def health():
        return {"ok": True, "service": "noteflow"}

    return app


app = create_app()
