"""
인증 관련 유틸리티 모듈
로그인 세션 상태와 쿠키 기반 영속 저장소를 관리
extra-streamlit-components의 CookieManager로 토큰/사용자 정보를 보관
"""

import json
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import wraps
from typing import Any

import streamlit as st
from extra_streamlit_components import CookieManager

from api_client import ApiError
from app_logging import get_logger

logger = get_logger("auth")

TOKEN_COOKIE = "booth_admin_token"
USER_COOKIE = "booth_admin_user"

BUSY_MESSAGE = "A sign-in request is already in progress"


class AuthError(ApiError):
    """로그인/가입 실패"""


class CookieStorage:
    """CookieManager 래퍼 (get/set/delete)"""

    def __init__(self, manager: CookieManager, max_age_days: int = 1):
        self.manager = manager
        self.max_age_days = max_age_days

    @classmethod
    def create(cls, key: str = "booth_admin_cookies", max_age_days: int = 1):
        return cls(CookieManager(key=key), max_age_days=max_age_days)

    def is_ready(self) -> bool:
        """브라우저 쿠키가 도착했는지 (컴포넌트 첫 실행에는 기본값 {})"""
        return bool(self.manager.cookies)

    def get(self, name: str) -> str | None:
        value = self.manager.get(cookie=name)
        return value if value else None

    def set(self, name: str, value: str):
        # 같은 실행에서 여러 쿠키를 쓰므로 컴포넌트 key를 쿠키마다 분리
        self.manager.set(
            name,
            value,
            expires_at=datetime.now() + timedelta(days=self.max_age_days),
            key=f"set_{name}",
        )

    def delete(self, name: str):
        # 브라우저 쿠키는 삭제 요청됨, 로컬 캐시에 없는 경우만 무시
        with suppress(KeyError):
            self.manager.delete(name, key=f"delete_{name}")


@dataclass
class Session:
    """현재 브라우저 세션의 로그인 상태"""

    user: dict[str, Any] | None = None
    token: str | None = None
    loading: bool = True
    error: str | None = None
    restored: bool = False
    # 로그아웃/복원 실패 후에는 남아 있는 쿠키로 다시 복원하지 않음
    skip_restore: bool = False
    # 쿠키 컴포넌트 응답을 한 번 기다렸는지
    storage_waited: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)


class SessionStore:
    """세션 상태 변경과 영속 저장을 담당하는 핸들"""

    def __init__(
        self,
        session: Session,
        storage,
        auth_service,
        verify_on_restore: bool = False,
    ):
        self.session = session
        self.storage = storage
        self.auth = auth_service
        self.verify_on_restore = verify_on_restore

    @property
    def user(self) -> dict[str, Any] | None:
        return self.session.user

    def initialize(self) -> Session:
        """저장소에서 세션 복원 (서버 검증 없이 그대로 채택)

        브라우저 세션의 첫 실행에서 쿠키 컴포넌트가 아직 응답하지 않았으면
        복원 중 상태를 유지한다. 컴포넌트 응답이 다음 실행을 일으킨다.
        """
        session = self.session
        if session.is_authenticated or session.skip_restore:
            session.restored = True
            session.loading = False
            return session

        if not session.restored and not session.storage_waited:
            session.storage_waited = True
            if not self.storage.is_ready():
                logger.debug("[Auth] 쿠키 응답 대기")
                return session

        try:
            token = self.storage.get(TOKEN_COOKIE)
            raw_user = self.storage.get(USER_COOKIE)

            if token and raw_user:
                user = self._parse_user(raw_user)
                if self.verify_on_restore:
                    session.token = token
                    user = self.auth.get_current_user()
                self._activate(token, user)
                logger.info("[Auth] 세션 복원 성공: %s", user["username"])
            elif token or raw_user:
                # 둘 중 하나만 남은 세션은 무효
                logger.warning("[Auth] 불완전한 세션 쿠키 삭제")
                self._discard()
        except (ValueError, TypeError, ApiError) as e:
            logger.warning("[Auth] 세션 복원 실패: %s", e)
            self._discard()
        finally:
            session.loading = False
            session.restored = True

        return session

    def login(self, email: str, password: str) -> dict[str, Any]:
        """사용자 로그인"""
        return self._authenticate("login", lambda: self.auth.login(email, password))

    def register(
        self, username: str, email: str, password: str, secret_code: str
    ) -> dict[str, Any]:
        """관리자 계정 가입 (secret code는 서버에서 검증)"""
        if not secret_code:
            raise AuthError("Secret code is required")
        return self._authenticate(
            "register",
            lambda: self.auth.register(username, email, password, secret_code),
        )

    def logout(self):
        """사용자 로그아웃"""
        self._clear_storage()
        self._reset()
        self.session.skip_restore = True
        self.session.loading = False
        self.session.error = None
        logger.info("[Auth] 로그아웃")

    def _authenticate(self, action: str, call: Callable[[], tuple[str, dict]]):
        session = self.session
        if session.loading and session.restored:
            raise AuthError(BUSY_MESSAGE)

        session.loading = True
        session.error = None
        try:
            token, user = call()
            self._persist(token, user)
        except ApiError as e:
            logger.warning("[Auth] %s 실패: %s", action, e.message)
            self._reset()
            session.error = e.message
            raise AuthError(e.message, status_code=e.status_code) from e
        finally:
            session.loading = False

        self._activate(token, user)
        session.skip_restore = False
        logger.info("[Auth] %s 성공: %s", action, user["username"])
        return user

    def _persist(self, token: str, user: dict[str, Any]):
        """토큰과 사용자 정보를 함께 저장 (하나만 남지 않도록)"""
        self.storage.set(TOKEN_COOKIE, token)
        try:
            self.storage.set(USER_COOKIE, json.dumps(user))
        except Exception:
            self.storage.delete(TOKEN_COOKIE)
            raise

    @staticmethod
    def _parse_user(raw_user: str) -> dict[str, Any]:
        user = json.loads(raw_user) if isinstance(raw_user, str) else raw_user
        if not isinstance(user, dict) or not user.get("id"):
            raise ValueError("stored user record is malformed")
        return user

    def _activate(self, token: str, user: dict[str, Any]):
        self.session.token = token
        self.session.user = user

    def _reset(self):
        self.session.token = None
        self.session.user = None

    def _discard(self):
        self._clear_storage()
        self._reset()
        self.session.skip_restore = True

    def _clear_storage(self):
        self.storage.delete(TOKEN_COOKIE)
        self.storage.delete(USER_COOKIE)


def require_auth(func: Callable) -> Callable:
    """인증 필요 데코레이터 (첫 인자는 AppContext)"""

    @wraps(func)
    def wrapper(ctx, *args, **kwargs):
        if not ctx.session.is_authenticated:
            st.warning("Please sign in to continue.")
            st.stop()

        return func(ctx, *args, **kwargs)

    return wrapper


def display_user_info(store: SessionStore, on_logout: Callable[[], None] | None = None):
    """사용자 정보 표시 (사이드바)"""
    user = store.user
    if not user:
        return

    with st.sidebar:
        st.write(f"**Username**: {user['username']}")
        st.write(f"**Email**: {user['email']}")
        if user.get("role"):
            st.caption(f"Role: {user['role']}")

        if st.button("Log out", use_container_width=True):
            store.logout()
            if on_logout:
                on_logout()
            st.rerun()
