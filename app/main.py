import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app import config
from app.auth.dependencies import auth_gate
from app.db.database import Database
from app.errors import FeedError, Internal
from app.logging_config import setup_logging
from app.realtime.broadcaster import Broadcaster
from app.routers import auth, feed, gql, images, realtime
from app.services.images import ImageStore

logger = logging.getLogger(__name__)


def create_app(database_url: str | None = None, images_dir: str | None = None) -> FastAPI:
    database = Database(database_url or config.DATABASE_URL)
    image_store = ImageStore(images_dir or config.IMAGES_DIR)
    broadcaster = Broadcaster()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        image_store.ensure_directory()
        broadcaster.start()
        try:
            yield
        finally:
            await broadcaster.stop()
            database.dispose()

    app = FastAPI(title="feed-server", lifespan=lifespan)
    app.state.database = database
    app.state.images = image_store
    app.state.broadcaster = broadcaster

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.middleware("http")(auth_gate)

    @app.exception_handler(FeedError)
    async def feed_error_handler(request: Request, exc: FeedError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        data = [{"message": f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}"} for e in exc.errors()]
        return JSONResponse(
            status_code=422,
            content={"message": "Validation failed, entered data is incorrect.", "data": data},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=Internal().to_dict())

    app.include_router(auth.router)
    app.include_router(feed.router)
    app.include_router(images.router)
    app.include_router(gql.router)
    app.include_router(realtime.router)
    app.mount("/images", StaticFiles(directory=image_store.directory, check_dir=False), name="images")

    return app


setup_logging()
app = create_app()
