"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, File, Request, Response, UploadFile, status
from fastapi.responses import HTMLResponse, JSONResponse

from merry_style.api.models import (
    ColorRequest,
    ImageDataRequest,
    OptionsView,
    SessionView,
    ShareResult,
)
from merry_style.api.ui import INDEX_HTML
from merry_style.app_logging import configure_logging
from merry_style.containers import AppContainer
from merry_style.domain.images import EncodedImage
from merry_style.services.delivery import NoGeneratedImageError, ShareUnsupportedError
from merry_style.services.ingestion import (
    ImageIngestionService,
    InvalidImageError,
    ensure_image_media_type,
)
from merry_style.services.sessions import (
    GenerationInProgressError,
    InMemorySessionRegistry,
    SessionController,
    SessionNotFoundError,
    UnknownHatColorError,
)

_INVALID_IMAGE_STATUS = {
    "media_type": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "too_large": status.HTTP_413_CONTENT_TOO_LARGE,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SessionNotFoundError)
    async def session_not_found(
        request: Request, exc: SessionNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": "Session not found."},
        )

    @app.exception_handler(InvalidImageError)
    async def invalid_image(request: Request, exc: InvalidImageError) -> JSONResponse:
        return JSONResponse(
            status_code=_INVALID_IMAGE_STATUS.get(
                exc.reason, status.HTTP_422_UNPROCESSABLE_CONTENT
            ),
            content={"detail": exc.message},
        )

    @app.exception_handler(UnknownHatColorError)
    async def unknown_color(
        request: Request, exc: UnknownHatColorError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            content={"detail": str(exc)},
        )

    @app.exception_handler(GenerationInProgressError)
    async def generation_in_progress(
        request: Request, exc: GenerationInProgressError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(NoGeneratedImageError)
    async def no_generated_image(
        request: Request, exc: NoGeneratedImageError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(ShareUnsupportedError)
    async def share_unsupported(
        request: Request, exc: ShareUnsupportedError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_501_NOT_IMPLEMENTED,
            content={"detail": exc.message},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Minimal page that drives the session API."""
        return HTMLResponse(INDEX_HTML)

    @app.get("/options")
    async def options(request: Request) -> OptionsView:
        """List hat colors and aspect ratios."""
        state_container: AppContainer = request.app.state.container
        return OptionsView.build(state_container.delivery_service.can_share)

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(request: Request) -> SessionView:
        """Start a new editing session."""
        controller = _registry(request).create()
        logger.info("Session created", extra={"session_id": str(controller.session_id)})
        return _view(controller)

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> SessionView:
        return _view(_controller(request, session_id))

    @app.post("/sessions/{session_id}/image")
    async def upload_image(
        session_id: UUID, request: Request, file: UploadFile = File(...)
    ) -> SessionView:
        """Select a new photo from a multipart upload."""
        controller = _controller(request, session_id)
        ingestion_service = _ingestion(request)
        ensure_image_media_type(file.content_type)
        ingestion_service.ensure_within_limit(file.size)
        content = await file.read(ingestion_service.max_upload_bytes + 1)
        await controller.select_image(
            content, file.content_type, filename=file.filename
        )
        return _view(controller)

    @app.post("/sessions/{session_id}/image-data")
    async def submit_image_data(
        session_id: UUID, body: ImageDataRequest, request: Request
    ) -> SessionView:
        """Select a new photo sent as a data URL."""
        controller = _controller(request, session_id)
        _ingestion(request).ensure_encoded_within_limit(body.image)
        try:
            image = EncodedImage.from_base64(body.image, body.mime_type)
        except ValueError as exc:
            raise InvalidImageError(str(exc), reason="encoding") from exc
        await controller.select_image(
            image.data, image.mime_type, filename=body.filename
        )
        return _view(controller)

    @app.delete("/sessions/{session_id}/image")
    async def clear_image(session_id: UUID, request: Request) -> SessionView:
        controller = _controller(request, session_id)
        controller.clear_image()
        return _view(controller)

    @app.put("/sessions/{session_id}/color")
    async def choose_color(
        session_id: UUID, body: ColorRequest, request: Request
    ) -> SessionView:
        controller = _controller(request, session_id)
        controller.choose_color(body.color)
        return _view(controller)

    @app.post("/sessions/{session_id}/generate")
    async def generate(session_id: UUID, request: Request) -> SessionView:
        """Add hats to the current photo."""
        controller = _controller(request, session_id)
        await controller.generate()
        return _view(controller)

    @app.post("/sessions/{session_id}/try-again")
    async def try_again(session_id: UUID, request: Request) -> SessionView:
        controller = _controller(request, session_id)
        controller.try_again()
        return _view(controller)

    @app.get("/sessions/{session_id}/download")
    async def download(session_id: UUID, request: Request) -> Response:
        """Return the generated image as an attachment."""
        controller = _controller(request, session_id)
        state_container: AppContainer = request.app.state.container
        image_file = state_container.delivery_service.download(controller.state)
        return Response(
            content=image_file.content,
            media_type=image_file.mime_type,
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{image_file.filename}"'
                )
            },
        )

    @app.post("/sessions/{session_id}/share")
    async def share(session_id: UUID, request: Request) -> ShareResult:
        """Share the generated image through the configured target."""
        controller = _controller(request, session_id)
        state_container: AppContainer = request.app.state.container
        shared = await state_container.delivery_service.share(controller.state)
        return ShareResult(shared=shared)

    return app


def _registry(request: Request) -> InMemorySessionRegistry:
    state_container: AppContainer = request.app.state.container
    return state_container.session_registry


def _ingestion(request: Request) -> ImageIngestionService:
    state_container: AppContainer = request.app.state.container
    return state_container.ingestion_service


def _controller(request: Request, session_id: UUID) -> SessionController:
    return _registry(request).get(session_id)


def _view(controller: SessionController) -> SessionView:
    return SessionView.from_state(controller.session_id, controller.state)
