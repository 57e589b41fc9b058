"""
부스 관리자 대시보드 진입점
실행: streamlit run app.py

세션 복원 → 라우트 가드 → 인증 화면 또는 대시보드 순서로 렌더링
"""

import streamlit as st

from app_logging import configure_logging
from components import loading_indicator
from config import get_settings
from context import get_app_context, get_session_store
from dashboard import show_dashboard
from login import show_auth_page
from router import View, resolve_route, route_state

settings = get_settings()
configure_logging(settings.log_level)

st.set_page_config(
    page_title=f"{settings.booth_name} - Booth Admin", page_icon="🏛️", layout="wide"
)


def main():
    ctx = get_app_context()
    store = get_session_store(ctx)

    # 보호된 화면을 그리기 전에 세션 복원을 끝낸다
    store.initialize()

    decision = resolve_route(route_state(ctx.session), st.query_params.get("path"))

    if decision.view == View.LOADING:
        loading_indicator("Restoring session...")
        st.stop()

    if decision.redirected:
        # 히스토리에 쌓지 않고 현재 경로를 교체
        st.query_params["path"] = decision.path

    if decision.view == View.AUTH:
        show_auth_page(store, decision.path)
    else:
        show_dashboard(ctx, store, decision.path)


main()
