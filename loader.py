"""
리소스 로더 모듈
탭마다 반복되던 로딩/에러/빈 상태 처리를 하나의 상태 객체로 통합
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from api_client import ApiError
from app_logging import get_logger

logger = get_logger("loader")


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class Resource:
    """원격 리소스 하나의 조회 상태"""

    name: str
    status: LoadStatus = LoadStatus.IDLE
    data: Any = None
    error: str | None = None

    @property
    def is_idle(self) -> bool:
        return self.status == LoadStatus.IDLE

    @property
    def is_loading(self) -> bool:
        return self.status == LoadStatus.LOADING

    @property
    def is_loaded(self) -> bool:
        return self.status == LoadStatus.LOADED

    @property
    def is_failed(self) -> bool:
        return self.status == LoadStatus.FAILED

    @property
    def is_empty(self) -> bool:
        """조회는 성공했지만 결과가 비어 있는지"""
        return self.is_loaded and not self.data

    def load(self, fetch: Callable[[], Any], error_message: str) -> "Resource":
        """fetch를 실행해 결과 또는 오류 메시지를 저장"""
        self.status = LoadStatus.LOADING
        self.error = None

        try:
            data = fetch()
        except ApiError as e:
            logger.error("[Loader] %s 조회 실패: %s", self.name, e)
            self.status = LoadStatus.FAILED
            self.data = None
            self.error = error_message
            return self

        self.data = data
        self.status = LoadStatus.LOADED
        return self

    def ensure_loaded(self, fetch: Callable[[], Any], error_message: str) -> "Resource":
        """아직 조회한 적이 없을 때만 load (탭 마운트 시 한 번)"""
        if self.status == LoadStatus.IDLE:
            self.load(fetch, error_message)
        return self

    def reset(self):
        self.status = LoadStatus.IDLE
        self.data = None
        self.error = None
