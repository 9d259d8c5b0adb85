"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from photo_diary.app_logging import configure_logging
from photo_diary.containers import AppContainer
from photo_diary.errors import (
    InferenceError,
    NotFoundError,
    PhotoDiaryError,
    SigningError,
    StorageError,
    TranslationError,
)

_FATAL_STAGES: dict[type[PhotoDiaryError], str] = {
    StorageError: "store",
    SigningError: "sign",
    InferenceError: "caption",
    TranslationError: "translate_caption",
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(PhotoDiaryError)
    async def upstream_failure(_request: Request, exc: PhotoDiaryError) -> JSONResponse:
        logger.warning("Request failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc), "stage": _FATAL_STAGES.get(type(exc))},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/photos", status_code=status.HTTP_201_CREATED)
    async def upload_photo(request: Request) -> dict[str, object]:
        """Store and annotate a raw image sent as the request body."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        if not image_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Empty image body"
            )
        content_type = request.headers.get("content-type", "image/jpeg")
        result = await state_container.annotation_pipeline.upload(
            image_bytes, content_type
        )
        return asdict(result)

    @app.get("/photos")
    async def list_photos(
        request: Request, limit: int = 20, offset: int = 0
    ) -> dict[str, object]:
        """Return photo summaries, newest first."""
        state_container: AppContainer = request.app.state.container
        photos = state_container.photo_service.list_photos(limit, offset)
        return {"photos": [asdict(photo) for photo in photos]}

    @app.get("/photos/{photo_id}")
    async def photo_information(photo_id: int, request: Request) -> dict[str, object]:
        """Return the annotated view of a single photo."""
        state_container: AppContainer = request.app.state.container
        information = state_container.photo_service.get_photo_information(photo_id)
        return asdict(information)

    @app.get("/categories")
    async def list_categories(request: Request) -> dict[str, object]:
        """Return all categories with photo counts."""
        state_container: AppContainer = request.app.state.container
        details = state_container.category_service.list_categories()
        return {"categories": [asdict(detail) for detail in details]}

    @app.get("/categories/{category_id}/photos")
    async def photos_in_category(
        category_id: int, request: Request, limit: int = 20, offset: int = 0
    ) -> dict[str, object]:
        """Return summaries of photos linked to a category."""
        state_container: AppContainer = request.app.state.container
        photos = state_container.photo_service.list_photos_in_category(
            category_id, limit, offset
        )
        return {"photos": [asdict(photo) for photo in photos]}

    return app
