from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xpenso.api.routers import api_router
from xpenso.core.config import Settings, settings as default_settings
from xpenso.db.init_db import ensure_schema
from xpenso.db.session import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.database_url)
        ensure_schema(database)
        app.state.database = database
        logger.info("Xpenso API started")
        try:
            yield
        finally:
            database.dispose()

    app = FastAPI(title="Xpenso API", lifespan=lifespan)
    app.state.settings = settings

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def root() -> dict:
        return {"message": "Hello, This is Xpenso"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("xpenso.main:app", host="0.0.0.0", port=3000)
