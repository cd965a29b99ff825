import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.api.routes import router
from src.core.config import settings
from src.core.container import ServiceContainer
from src.core.exceptions import PipelineError
from src.schemas.models.api.error_response import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build clients & services unless one was injected (tests)
    owns_container = getattr(app.state, "container", None) is None
    if owns_container:
        app.state.container = ServiceContainer.from_settings(settings)
    yield
    # Shutdown: close network clients
    if owns_container:
        app.state.container.close()


async def pipeline_error_handler(request: Request, exc: PipelineError):
    if exc.is_client_error:
        logger.warning(f"Rejected request: {exc.error}: {exc}")
    else:
        logger.error(f"Upload error: {exc.error}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.error, details=str(exc)).model_dump(),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Server error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(error="Internal server error", details=str(exc)).model_dump(),
    )


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    app = FastAPI(
        title="Video Publisher",
        lifespan=lifespan
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # Register API Router
    app.include_router(router)

    # Static frontend (registered last so API routes take precedence)
    if os.path.isdir(settings.STATIC_DIR):
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


app = create_app()


# AWS Lambda handler (mangum)
# pip install -e ".[lambda]" 로 설치 필요
try:
    from mangum import Mangum
    handler = Mangum(app, lifespan="auto")
except ImportError:
    # mangum이 설치되지 않은 경우 (로컬 개발 환경)
    handler = None


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT)
