import logging
import os
import sys

import pytest
from dotenv import load_dotenv

# 프로젝트 루트 경로 설정
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# 환경 변수 로드
env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env.local")
if os.path.exists(env_path):
    load_dotenv(env_path, override=True)

from tests.data.fakes import FakeResponse, FakeSession
from tests.data.pipeline_factory import build_pipeline

logging.basicConfig(level=logging.INFO)

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
DIRECT_URL = "https://cdn.example.com/videos/clip.mp4"


@pytest.fixture
def work_dir(tmp_path):
    # 디렉토리는 만들지 않는다 (필요 시 파이프라인이 생성)
    return tmp_path / "uploads"


@pytest.fixture
def video_head_response():
    return FakeResponse(200, {"Content-Type": "video/mp4", "Content-Length": "2048"})


@pytest.fixture
def direct_download_session(video_head_response):
    return FakeSession(
        head_responses=[video_head_response],
        get_responses=[FakeResponse(200, chunks=[b"\x00" * 1024, b"\x01" * 1024])],
    )


@pytest.fixture
def pipeline_factory(work_dir):
    def _factory(**kwargs):
        return build_pipeline(work_dir, **kwargs)
    return _factory
