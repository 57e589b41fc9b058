"""
앱 컨텍스트 모듈
브라우저 세션마다 하나씩 만들어 화면 트리 루트에 넘기는 의존성 묶음
"""

from collections.abc import Callable
from dataclasses import dataclass

import httpx
import streamlit as st

from api_client import ApiClient
from auth import CookieStorage, Session, SessionStore
from config import Settings, get_settings
from services import AuthService, MediaService, VisitorService

CONTEXT_KEY = "app_context"


@dataclass
class AppContext:
    settings: Settings
    session: Session
    client: ApiClient
    auth: AuthService
    media: MediaService
    visitors: VisitorService
    # 실행마다 쿠키 저장소를 새로 만드는 함수
    storage_factory: Callable[[], object]


def build_app_context(
    settings: Settings,
    transport: httpx.BaseTransport | None = None,
    storage_factory: Callable[[], object] | None = None,
) -> AppContext:
    """세션 객체와 서비스 생성 (토큰은 세션에서 요청마다 읽음)"""
    session = Session()
    client = ApiClient(
        settings.api_base_url,
        token_provider=lambda: session.token,
        timeout=settings.api_timeout_seconds,
        transport=transport,
    )
    if storage_factory is None:

        def storage_factory():
            return CookieStorage.create(max_age_days=settings.session_cookie_days)

    return AppContext(
        settings=settings,
        session=session,
        client=client,
        auth=AuthService(client),
        media=MediaService(client, settings.booth_id),
        visitors=VisitorService(client, settings.booth_id),
        storage_factory=storage_factory,
    )


def get_app_context() -> AppContext:
    """현재 브라우저 세션의 컨텍스트 (없으면 생성)"""
    if CONTEXT_KEY not in st.session_state:
        st.session_state[CONTEXT_KEY] = build_app_context(get_settings())
    return st.session_state[CONTEXT_KEY]


def get_session_store(ctx: AppContext, storage=None) -> SessionStore:
    """매 실행마다 쿠키 컴포넌트를 다시 그려야 하므로 저장소는 실행 단위로 생성"""
    if storage is None:
        storage = ctx.storage_factory()
    return SessionStore(
        ctx.session,
        storage,
        ctx.auth,
        verify_on_restore=ctx.settings.verify_session_on_restore,
    )
