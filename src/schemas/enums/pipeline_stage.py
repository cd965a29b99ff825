from enum import Enum


class PipelineStage(str, Enum):
    """
    Publishing pipeline state machine.
    IDLE -> VALIDATING -> (RESOLVING | FETCHING) -> VERIFYING -> PUBLISHING -> DONE | FAILED
    """
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    RESOLVING = "RESOLVING"      # 로컬 파일 (다운로드 없음)
    FETCHING = "FETCHING"        # 원격 URL 다운로드
    VERIFYING = "VERIFYING"
    PUBLISHING = "PUBLISHING"
    DONE = "DONE"
    FAILED = "FAILED"
