import time
import uuid
from pathlib import Path


def build_artifact_path(work_dir, suffix: str = ".mp4") -> Path:
    """
    작업 디렉토리 안에 요청별로 고유한 임시 파일 경로를 만든다.
    동시 요청 간 충돌을 막기 위해 epoch ms 와 uuid 를 함께 사용한다.
    디렉토리가 없으면 생성한다.
    """
    directory = Path(work_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"temp-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{suffix}"
