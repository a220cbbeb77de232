# /backend/moodchat/main.py

from __future__ import annotations
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from moodchat import config
from moodchat.db import Database, get_db
from moodchat.api.routers import auth, chats, moods
from moodchat.services.sentiment_responder import OpenAISentimentResponder, SentimentResponder

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("moodchat")


def create_app(
    database_url: Optional[str] = None,
    responder: Optional[SentimentResponder] = None,
) -> FastAPI:
    database = Database(database_url or config.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 앱 시작 시 테이블 생성
        await database.create_all()
        if config.SECRET_KEY == config.DEV_SECRET_KEY:
            logger.warning("SECRET_KEY is not set; using the development default")
        try:
            yield
        finally:
            await database.dispose()

    app = FastAPI(title="MoodChat API", lifespan=lifespan)
    app.state.database = database
    app.state.responder = responder or OpenAISentimentResponder()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(chats.router)
    app.include_router(moods.router)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/db-health")
    async def db_health(db: AsyncSession = Depends(get_db)):
        result = await db.execute(text("SELECT 1"))
        return {"db": "ok", "result": result.scalar_one()}

    return app


app = create_app()


def run():
    """`moodchat` 콘솔 스크립트. `uvicorn moodchat.main:app`과 같습니다."""
    uvicorn.run(
        "moodchat.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
