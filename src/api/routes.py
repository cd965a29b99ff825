import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from src.core.config import settings
from src.core.container import ServiceContainer
from src.core.exceptions import AuthenticationError
from src.schemas.models.api.error_response import ErrorResponse
from src.schemas.models.api.upload_response import UploadResponse
from src.schemas.models.common.publish_request import PublishRequest

logger = logging.getLogger(__name__)

router = APIRouter()

UPLOAD_READ_CHUNK = 1024 * 1024


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


@router.get("/health")
def health_check():
    return {"status": "healthy", "env": settings.ENV}


@router.get("/auth")
def auth(container: ServiceContainer = Depends(get_container)):
    """Google 동의 화면으로 redirect"""
    try:
        url = container.auth_service.authorization_url()
    except AuthenticationError as e:
        logger.error(f"Authentication error: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return RedirectResponse(url, status_code=302)


@router.get("/oauth2callback")
async def oauth2callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    container: ServiceContainer = Depends(get_container),
):
    if not code:
        return JSONResponse(status_code=400, content={"error": "Authentication failed: authorization code is missing"})

    try:
        await run_in_threadpool(container.auth_service.exchange_code, code, state)
    except AuthenticationError as e:
        logger.error(f"Authentication error: {e}")
        return JSONResponse(status_code=500, content={"error": str(e)})

    return RedirectResponse("/", status_code=302)


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload(
    title: Optional[str] = Form(default=None),
    videoUrl: Optional[str] = Form(default=None),
    video: Optional[UploadFile] = File(default=None),
    container: ServiceContainer = Depends(get_container),
):
    """
    파일 업로드 또는 URL 로 받은 영상을 YouTube 에 게시한다.
    multipart 로 받은 파일은 이 라우트가 소유하며, 결과와 관계없이 finally 에서 삭제한다.
    PipelineError 는 main 의 exception handler 가 {error, details} 로 변환한다.
    """
    uploaded_path: Optional[Path] = None
    try:
        if video is not None and video.filename:
            # finally 에서 부분 기록된 파일도 지우도록 먼저 경로를 잡아둔다
            uploaded_path = await run_in_threadpool(container.lifecycle.allocate_path)
            await _save_upload(video, uploaded_path, container.lifecycle.max_file_size)

        request = PublishRequest(title=title, video_url=videoUrl, uploaded_file_path=uploaded_path)
        result = await run_in_threadpool(container.orchestrator.run, request)

        logger.info(f"Upload completed: {result.publish_result.platform_id}")
        return UploadResponse(video_id=result.publish_result.platform_id, metadata=result.metadata)
    finally:
        if uploaded_path is not None:
            await run_in_threadpool(container.lifecycle.release_path, uploaded_path)
        if video is not None:
            await video.close()


async def _save_upload(video: UploadFile, destination: Path, max_file_size: int) -> None:
    """multipart 파일을 destination 에 저장한다. 상한 + 1 byte 까지만 기록 (검증 단계에서 거부)."""
    written = 0
    f = await run_in_threadpool(open, destination, "wb")
    try:
        while True:
            chunk = await video.read(UPLOAD_READ_CHUNK)
            if not chunk:
                break
            await run_in_threadpool(f.write, chunk)
            written += len(chunk)
            if written > max_file_size:
                logger.warning(f"Uploaded file '{video.filename}' passed the size limit, truncating")
                break
    finally:
        await run_in_threadpool(f.close)
