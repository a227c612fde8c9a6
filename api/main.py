import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from admin import router as admin_router
from core import db
from core.errors import register_exception_handlers
from core.log import configure_logging
from core.schema import init_schema
from core.settings import Settings, load_settings
from lyrics import router as lyrics_router
from performers import router as performers_router

logger = logging.getLogger(__name__)

PAGINATION_HEADERS = ["X-Total-Count", "X-Page", "X-Page-Size"]


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        # One database handle per process, shared by all requests.
        database = db.open_database(settings)
        await database.connect()
        try:
            if settings.init_schema:
                await init_schema(database, settings.profile)
            app.state.db = database
            logger.info(
                "startup dialect=%s profile=%s create_policy=%s delete_policy=%s",
                database.dialect,
                settings.profile.name,
                settings.profile.create_policy,
                settings.profile.delete_policy,
            )
            yield
        finally:
            await database.close()
            logger.info("shutdown")

    app = FastAPI(title="lyrics-api", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=PAGINATION_HEADERS,
    )
    register_exception_handlers(app)

    app.include_router(performers_router.router, tags=["performers"])
    app.include_router(lyrics_router.router, tags=["lyrics"])
    app.include_router(admin_router.router, tags=["admin"])

    @app.get("/health")
    async def health(database: db.Database = Depends(db.get_db)) -> dict:
        row = await database.fetch_one("SELECT 1 AS ok")
        return {"ok": True, "db": bool(row) and int(row["ok"]) == 1}

    @app.get("/")
    def root() -> dict:
        return {"message": "lyrics-api"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
