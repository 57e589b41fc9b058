"""
라우트 가드 모듈
세션 상태에 따라 인증 화면 / 대시보드 / 로딩 중 어느 화면을 보여줄지 결정
"""

from dataclasses import dataclass
from enum import Enum

LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
ANALYTICS_PATH = "/dashboard/analytics"
CUSTOMIZE_PATH = "/dashboard/customize"
USERS_PATH = "/dashboard/users"

AUTH_PATHS = (LOGIN_PATH, REGISTER_PATH)
DASHBOARD_PATHS = (ANALYTICS_PATH, CUSTOMIZE_PATH, USERS_PATH)

# 대시보드 사이드바 메뉴 (경로 → 라벨)
DASHBOARD_TABS = {
    ANALYTICS_PATH: "Analytics",
    CUSTOMIZE_PATH: "Customize",
    USERS_PATH: "Users",
}


class RouteState(str, Enum):
    RESTORING = "restoring"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class View(str, Enum):
    LOADING = "loading"
    AUTH = "auth"
    DASHBOARD = "dashboard"


@dataclass(frozen=True)
class RouteDecision:
    view: View
    path: str | None
    redirected: bool = False


def route_state(session) -> RouteState:
    if not session.restored:
        return RouteState.RESTORING
    if session.is_authenticated:
        return RouteState.AUTHENTICATED
    return RouteState.UNAUTHENTICATED


def normalize_path(path: str | None) -> str:
    if not path:
        return "/"
    path = "/" + path.strip().strip("/")
    return path


def resolve_route(state: RouteState, path: str | None) -> RouteDecision:
    """현재 상태에서 허용되지 않는 경로는 해당 상태의 기본 경로로 리다이렉트"""
    if state == RouteState.RESTORING:
        return RouteDecision(view=View.LOADING, path=None)

    path = normalize_path(path)

    if state == RouteState.UNAUTHENTICATED:
        if path in AUTH_PATHS:
            return RouteDecision(view=View.AUTH, path=path)
        return RouteDecision(view=View.AUTH, path=LOGIN_PATH, redirected=True)

    if path in DASHBOARD_PATHS:
        return RouteDecision(view=View.DASHBOARD, path=path)
    return RouteDecision(view=View.DASHBOARD, path=ANALYTICS_PATH, redirected=True)
