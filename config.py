"""
애플리케이션 설정 모듈
.env 파일과 환경변수에서 대시보드 설정을 읽어온다
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_API_BASE_URL = "http://localhost:8080/api"
DEFAULT_BOOTH_ID = "f17ec1f8-78bd-4553-bf6f-9a139f21aba3"
DEFAULT_BOOTH_NAME = "Pevonia"
MEDIA_BUCKET_URL = "https://virtualspaces.s3.ca-central-1.amazonaws.com"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """대시보드 설정 (불변)"""

    api_base_url: str = DEFAULT_API_BASE_URL
    api_timeout_seconds: float = 15.0
    booth_id: str = DEFAULT_BOOTH_ID
    booth_name: str = DEFAULT_BOOTH_NAME
    media_base_url: str = f"{MEDIA_BUCKET_URL}/{DEFAULT_BOOTH_ID}/"
    session_cookie_days: int = 1
    verify_session_on_restore: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    """환경변수에서 Settings 생성"""
    booth_id = os.getenv("BOOTH_ID", DEFAULT_BOOTH_ID)

    # media URL은 항상 '/'로 끝나야 타입 경로를 바로 이어 붙일 수 있다
    media_base_url = os.getenv("MEDIA_BASE_URL") or f"{MEDIA_BUCKET_URL}/{booth_id}/"
    if not media_base_url.endswith("/"):
        media_base_url += "/"

    return Settings(
        api_base_url=os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
        api_timeout_seconds=float(os.getenv("API_TIMEOUT_SECONDS", "15")),
        booth_id=booth_id,
        booth_name=os.getenv("BOOTH_NAME", DEFAULT_BOOTH_NAME),
        media_base_url=media_base_url,
        session_cookie_days=int(os.getenv("SESSION_COOKIE_DAYS", "1")),
        verify_session_on_restore=_env_bool("VERIFY_SESSION_ON_RESTORE"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


# 전역 설정 인스턴스
_settings = None


def get_settings() -> Settings:
    """Settings 싱글톤 인스턴스 반환"""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
